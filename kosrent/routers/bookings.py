"""
Booking routes
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from kosrent.database import get_db
from kosrent.models.ontology import User, BookingStatus
from kosrent.models.schemas import (
    BookingCreate, BookingStatusUpdate, BookingResponse, InvoiceResponse, envelope
)
from kosrent.services.booking_service import BookingService
from kosrent.services.invoice_service import InvoiceRenderer
from kosrent.security.auth import require_society, require_any_role

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def get_invoice_renderer() -> InvoiceRenderer:
    """Invoice renderer dependency"""
    return InvoiceRenderer()


@router.get("")
def list_bookings(
    booking_status: Optional[BookingStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_any_role)
):
    """Own bookings for renters, bookings on their kos for owners"""
    bookings = BookingService(db).get_bookings(current_user, status=booking_status, search=search)
    return envelope(
        [BookingResponse.model_validate(b) for b in bookings],
        "Bookings retrieved successfully"
    )


@router.get("/{booking_id}")
def get_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_any_role)
):
    booking = BookingService(db).get_booking(booking_id, current_user)
    return envelope(BookingResponse.model_validate(booking), "Booking retrieved successfully")


@router.post("")
def create_booking(
    data: BookingCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_society)
):
    """Book a room for [start_date, end_date)"""
    booking = BookingService(db).create_booking(data, current_user)
    return envelope(BookingResponse.model_validate(booking), "Booking created successfully")


@router.put("/{booking_id}/status")
def update_booking_status(
    booking_id: int,
    data: BookingStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_any_role)
):
    booking = BookingService(db).set_status(booking_id, data.status, current_user)
    return envelope(
        BookingResponse.model_validate(booking),
        f"Booking status updated to {booking.status.value}"
    )


@router.delete("/{booking_id}")
def delete_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_any_role)
):
    deleted = BookingService(db).delete_booking(booking_id, current_user)
    return envelope(deleted, "Booking deleted successfully")


@router.get("/{booking_id}/invoice")
def get_invoice(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_any_role),
    renderer: InvoiceRenderer = Depends(get_invoice_renderer)
):
    """Render the booking's invoice and return where to download it"""
    invoice_number, download_url = BookingService(db, renderer).generate_invoice(
        booking_id, current_user
    )
    return envelope(
        InvoiceResponse(invoice_number=invoice_number, download_url=download_url),
        "Invoice generated successfully"
    )
