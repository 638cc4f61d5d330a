"""
Availability checker
Decides whether a room can take a booking for a date range.
Ranges are half-open [start, end): a stay ending on the day another
begins does not overlap it.
"""
from datetime import date
from typing import List, Optional
import logging
from sqlalchemy.orm import Session

from kosrent.exceptions import Conflict, NotFound
from kosrent.models.ontology import (
    Room, RoomStatus, Booking, ACTIVE_BOOKING_STATUSES
)

logger = logging.getLogger(__name__)


class AvailabilityService:
    """Availability checker (read only)"""

    def __init__(self, db: Session):
        self.db = db

    def get_room(self, room_id: int, for_update: bool = False) -> Room:
        """Fetch a room, optionally locking its row until the transaction ends"""
        query = self.db.query(Room).filter(Room.id == room_id)
        if for_update:
            query = query.with_for_update()
        room = query.first()
        if not room:
            raise NotFound(f"Room with ID {room_id} not found")
        return room

    def conflicting_bookings(self, room_id: int, start_date: date, end_date: date,
                             exclude_booking_id: Optional[int] = None) -> List[Booking]:
        """Active bookings of the room whose range intersects [start_date, end_date)"""
        query = self.db.query(Booking).filter(
            Booking.room_id == room_id,
            Booking.status.in_(ACTIVE_BOOKING_STATUSES),
            Booking.start_date < end_date,
            Booking.end_date > start_date,
        )
        if exclude_booking_id is not None:
            query = query.filter(Booking.id != exclude_booking_id)
        return query.order_by(Booking.start_date).all()

    def is_available(self, room_id: int, start_date: date, end_date: date,
                     exclude_booking_id: Optional[int] = None) -> bool:
        """
        Whether the room can take a booking for the range

        Raises:
            NotFound: room does not exist
            Conflict: room is not AVAILABLE
        """
        self._check_range(start_date, end_date)
        room = self.get_room(room_id)
        self._check_status(room)
        return not self.conflicting_bookings(room_id, start_date, end_date, exclude_booking_id)

    def ensure_available(self, room: Room, start_date: date, end_date: date,
                         exclude_booking_id: Optional[int] = None) -> None:
        """
        Raise unless the room can be booked for the range

        Raises:
            Conflict: room is not AVAILABLE, or an active booking overlaps
        """
        self._check_range(start_date, end_date)
        self._check_status(room)

        clashes = self.conflicting_bookings(room.id, start_date, end_date, exclude_booking_id)
        if clashes:
            logger.warning(
                "Room %s rejected booking %s..%s: overlaps booking %s",
                room.id, start_date, end_date, clashes[0].id
            )
            raise Conflict("Room is already booked for the selected dates")

    @staticmethod
    def _check_status(room: Room) -> None:
        if room.status != RoomStatus.AVAILABLE:
            logger.warning("Room %s rejected booking: status %s", room.id, room.status.value)
            raise Conflict(f"Room {room.room_number} is not available (status: {room.status.value})")

    @staticmethod
    def _check_range(start_date: date, end_date: date) -> None:
        if end_date <= start_date:
            raise Conflict("end_date must be after start_date")
