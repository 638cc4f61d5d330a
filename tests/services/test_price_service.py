"""
Tests for kosrent/services/price_service.py
"""
import pytest
from datetime import date, timedelta

from kosrent.services.price_service import compute_total, stay_days


class TestStayDays:

    def test_one_month(self):
        assert stay_days(date(2024, 1, 1), date(2024, 1, 31)) == 30

    def test_end_is_exclusive(self):
        assert stay_days(date(2024, 1, 1), date(2024, 1, 2)) == 1


class TestComputeTotal:

    def test_thirty_days_is_one_month(self):
        assert compute_total(900000, date(2024, 1, 1), date(2024, 1, 31)) == 900000

    def test_short_stay_rounds_up(self):
        # 1000000 / 30 = 33333.33.. per day
        assert compute_total(1000000, date(2024, 3, 1), date(2024, 3, 2)) == 33334

    def test_no_truncation_of_daily_rate(self):
        # truncating the daily rate first would give 33333 * 3 = 99999
        assert compute_total(1000000, date(2024, 3, 1), date(2024, 3, 4)) == 100000

    def test_zero_rate(self):
        assert compute_total(0, date(2024, 1, 1), date(2024, 2, 1)) == 0

    def test_custom_divisor(self):
        assert compute_total(310000, date(2024, 1, 1), date(2024, 1, 2), days_per_month=31) == 10000

    def test_monotonic_in_duration(self):
        start = date(2024, 1, 1)
        totals = [compute_total(875000, start, start + timedelta(days=n)) for n in range(1, 120)]
        assert totals == sorted(totals)

    def test_rejects_empty_range(self):
        with pytest.raises(ValueError):
            compute_total(900000, date(2024, 1, 1), date(2024, 1, 1))

    def test_rejects_negative_rate(self):
        with pytest.raises(ValueError):
            compute_total(-1, date(2024, 1, 1), date(2024, 1, 2))
