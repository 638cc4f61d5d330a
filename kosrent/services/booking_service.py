"""
Booking service
Creates bookings, moves them through their status lifecycle, deletes them
and issues invoices, keeping the booked room's status (and through it the
kos counters) consistent
"""
from datetime import date
from typing import Iterable, List, Optional, Tuple
import logging
from sqlalchemy import or_
from sqlalchemy.orm import Session

from kosrent.exceptions import Conflict, NotFound
from kosrent.models.ontology import (
    Booking, BookingStatus, Room, RoomStatus, Kos, User, UserRole
)
from kosrent.models.schemas import BookingCreate, BookingResponse
from kosrent.security.permissions import Capability, authorize, chain_for_booking
from kosrent.services.availability_service import AvailabilityService
from kosrent.services.booking_state import booking_state_machine
from kosrent.services.invoice_service import InvoiceRenderer
from kosrent.services.price_service import compute_total
from kosrent.services.room_counter import RoomCounter

logger = logging.getLogger(__name__)


class BookingService:
    """Booking lifecycle manager"""

    def __init__(self, db: Session, renderer: Optional[InvoiceRenderer] = None):
        self.db = db
        self.availability = AvailabilityService(db)
        self.counter = RoomCounter(db)
        self.renderer = renderer or InvoiceRenderer()

    # ============== Queries ==============

    def get_bookings(self, caller: User, status: Optional[BookingStatus] = None,
                     search: Optional[str] = None) -> List[Booking]:
        """Renters see their own bookings, owners see bookings on their kos"""
        query = self.db.query(Booking).join(Room, Booking.room_id == Room.id).join(
            Kos, Room.kos_id == Kos.id
        )

        if caller.role == UserRole.SOCIETY:
            query = query.filter(Booking.user_id == caller.id)
        else:
            query = query.filter(Kos.owner_id == caller.id)

        if status:
            query = query.filter(Booking.status == status)
        if search:
            query = query.join(User, Booking.user_id == User.id).filter(
                or_(User.name.contains(search), Kos.name.contains(search))
            )

        return query.order_by(Booking.created_at.desc(), Booking.id.desc()).all()

    def get_booking(self, booking_id: int, caller: User) -> Booking:
        """Single booking, visible to its renter and the kos owner"""
        booking = self._get_booking(booking_id)
        authorize(caller, chain_for_booking(booking), Capability.READ,
                  "You can only view your own bookings or bookings for your kos")
        return booking

    # ============== Lifecycle ==============

    def create_booking(self, data: BookingCreate, renter: User) -> Booking:
        """
        Book a room

        The room row is locked before the overlap check, so two overlapping
        requests for the same room are serialized and the second one sees
        the first booking.
        """
        try:
            room = self.availability.get_room(data.room_id, for_update=True)
            self.availability.ensure_available(room, data.start_date, data.end_date)

            booking = Booking(
                user_id=renter.id,
                room_id=room.id,
                start_date=data.start_date,
                end_date=data.end_date,
                total_price=compute_total(room.harga, data.start_date, data.end_date),
                notes=data.notes or "",
                status=BookingStatus.PENDING,
            )
            self.db.add(booking)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(booking)
        logger.info(
            "Booking %s created: room %s, %s..%s, total %s",
            booking.id, booking.room_id, booking.start_date, booking.end_date, booking.total_price
        )
        return booking

    def set_status(self, booking_id: int, new_status: BookingStatus, caller: User) -> Booking:
        """
        Change a booking's status

        CONFIRMED occupies the room; CANCELLED and COMPLETED release it
        unless another confirmed booking still holds it.
        """
        try:
            booking = self._get_booking(booking_id, for_update=True)
            authorize(caller, chain_for_booking(booking), Capability.WRITE,
                      "You can only update your own bookings or bookings for your kos")
            booking_state_machine.transition(booking.status, new_status)

            room = self.availability.get_room(booking.room_id, for_update=True)
            old_status = booking.status
            booking.status = new_status

            if new_status == BookingStatus.CONFIRMED:
                if room.status == RoomStatus.MAINTENANCE:
                    raise Conflict(f"Room {room.room_number} is under maintenance and cannot be occupied")
                self.counter.change_status(room, RoomStatus.OCCUPIED)
            elif new_status in (BookingStatus.CANCELLED, BookingStatus.COMPLETED):
                self.release_room(room, [booking.id])

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(booking)
        logger.info(
            "Booking %s status %s -> %s by user %s",
            booking.id, old_status.value, new_status.value, caller.id
        )
        return booking

    def delete_booking(self, booking_id: int, caller: User) -> dict:
        """Remove a booking and release its room; returns the deleted row"""
        try:
            booking = self._get_booking(booking_id, for_update=True)
            authorize(caller, chain_for_booking(booking), Capability.DELETE,
                      "You can only delete your own bookings or bookings for your kos")

            room = self.availability.get_room(booking.room_id, for_update=True)
            deleted = BookingResponse.model_validate(booking).model_dump()
            self.db.delete(booking)
            self.release_room(room, [booking.id])
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info("Booking %s deleted by user %s", booking_id, caller.id)
        return deleted

    def generate_invoice(self, booking_id: int, caller: User) -> Tuple[str, str]:
        """
        Issue the booking's invoice

        The invoice number is assigned on the first call and kept afterwards;
        the document is rendered again on every call.

        Returns:
            (invoice_number, download_url)
        """
        try:
            booking = self._get_booking(booking_id)
            authorize(caller, chain_for_booking(booking), Capability.READ,
                      "You are not authorized to access this invoice")

            if not booking.invoice_number:
                booking.invoice_date = date.today()
                booking.invoice_number = self.invoice_number_for(booking.id, booking.invoice_date)

            filename = self.renderer.render(
                booking, booking.invoice_number, booking.invoice_date or date.today()
            )
            booking.invoice_pdf = filename
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        return booking.invoice_number, self.renderer.download_url(filename)

    @staticmethod
    def invoice_number_for(booking_id: int, issued_on: Optional[date] = None) -> str:
        """INV-YYYYMMDD-<booking id>"""
        issued_on = issued_on or date.today()
        return f"INV-{issued_on:%Y%m%d}-{booking_id}"

    # ============== Internals ==============

    def _get_booking(self, booking_id: int, for_update: bool = False) -> Booking:
        query = self.db.query(Booking).filter(Booking.id == booking_id)
        if for_update:
            query = query.with_for_update()
        booking = query.first()
        if not booking:
            raise NotFound(f"Booking with ID {booking_id} not found")
        return booking

    # ============== Room release ==============

    def release_room(self, room: Room, released_ids: Iterable[int]) -> None:
        """
        Make an occupied room available again

        Only when no confirmed booking outside released_ids still holds it;
        a room that is not OCCUPIED is left alone.
        """
        if room.status != RoomStatus.OCCUPIED:
            return

        holders = self.db.query(Booking).filter(
            Booking.room_id == room.id,
            Booking.id.notin_(list(released_ids)),
            Booking.status == BookingStatus.CONFIRMED,
        ).count()
        if holders:
            logger.info("Room %s stays occupied: %s other confirmed booking(s)", room.id, holders)
            return

        self.counter.change_status(room, RoomStatus.AVAILABLE)
