"""
Pricing calculator
Prorates a room's monthly rate over the booked days
"""
from datetime import date
from fractions import Fraction
from math import ceil

from kosrent.config import settings


def stay_days(start_date: date, end_date: date) -> int:
    """Number of nights in the half-open range [start_date, end_date)"""
    return (end_date - start_date).days


def compute_total(monthly_rate: int, start_date: date, end_date: date,
                  days_per_month: int = None) -> int:
    """
    Total price of a stay

    daily rate = monthly_rate / days_per_month, kept as an exact fraction so
    short stays are never underpriced; the product is rounded up to a whole
    currency unit.

    Args:
        monthly_rate: room's monthly rate, non-negative
        start_date: first day of the stay
        end_date: exclusive end of the stay, strictly after start_date
        days_per_month: proration divisor, defaults to settings.DAYS_PER_MONTH

    Returns:
        Total price as an integer
    """
    if monthly_rate < 0:
        raise ValueError("monthly_rate must not be negative")

    days = stay_days(start_date, end_date)
    if days <= 0:
        raise ValueError("end_date must be after start_date")

    divisor = days_per_month or settings.DAYS_PER_MONTH
    daily_rate = Fraction(monthly_rate, divisor)
    return ceil(daily_rate * days)
