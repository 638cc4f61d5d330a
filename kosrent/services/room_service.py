"""
Room service
Room CRUD for kos owners; every insert, delete and status change goes
through RoomCounter so the parent kos counters follow
"""
from typing import List, Optional
import logging
from sqlalchemy.orm import Session

from kosrent.exceptions import Conflict, NotFound
from kosrent.models.ontology import (
    Kos, Room, RoomStatus, Booking, User, ACTIVE_BOOKING_STATUSES
)
from kosrent.models.schemas import RoomCreate, RoomUpdate, RoomResponse, KosCounters
from kosrent.security.permissions import (
    Capability, authorize, chain_for_kos, chain_for_room
)
from kosrent.services.room_counter import RoomCounter

logger = logging.getLogger(__name__)


class RoomService:
    """Room service"""

    def __init__(self, db: Session):
        self.db = db
        self.counter = RoomCounter(db)

    # ============== Queries ==============

    def get_room(self, room_id: int) -> Room:
        """Single room"""
        room = self.db.query(Room).filter(Room.id == room_id).first()
        if not room:
            raise NotFound(f"Room with ID {room_id} not found")
        return room

    def get_rooms_by_kos(self, kos_id: int, status: Optional[RoomStatus] = None) -> List[Room]:
        """Rooms of a kos, optionally filtered by status"""
        query = self.db.query(Room).filter(Room.kos_id == kos_id)
        if status is not None:
            query = query.filter(Room.status == status)
        return query.order_by(Room.room_number).all()

    def get_room_by_number(self, kos_id: int, room_number: str) -> Optional[Room]:
        return self.db.query(Room).filter(
            Room.kos_id == kos_id,
            Room.room_number == room_number
        ).first()

    def count_active_bookings(self, room_id: int) -> int:
        return self.db.query(Booking).filter(
            Booking.room_id == room_id,
            Booking.status.in_(ACTIVE_BOOKING_STATUSES)
        ).count()

    # ============== Mutations ==============

    def create_room(self, data: RoomCreate, caller: User) -> dict:
        """Add a room to the caller's kos; returns the room and the updated counters"""
        try:
            kos = self.db.query(Kos).filter(Kos.id == data.kos_id).first()
            if not kos:
                raise NotFound("Kos not found")
            authorize(caller, chain_for_kos(kos), Capability.WRITE,
                      "You can only add rooms to your own kos")

            if self.get_room_by_number(kos.id, data.room_number):
                raise Conflict(f"Room number {data.room_number} already exists in this kos")

            room = Room(
                kos_id=kos.id,
                room_number=data.room_number,
                tipe=data.tipe,
                harga=data.harga,
                status=data.status,
                room_picture=data.room_picture or "",
            )
            self.db.add(room)
            self.db.flush()
            self.counter.room_added(kos.id, room.status)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(room)
        self.db.refresh(kos)
        logger.info("Room %s (%s) added to kos %s", room.id, room.room_number, kos.id)
        return {
            "room": RoomResponse.model_validate(room),
            "kos_updated": KosCounters.model_validate(kos),
        }

    def update_room(self, room_id: int, data: RoomUpdate, caller: User) -> Room:
        """Edit a room; a status change moves the kos's available_rooms"""
        try:
            room = self.get_room(room_id)
            authorize(caller, chain_for_room(room), Capability.WRITE,
                      "You can only update rooms in your own kos")

            update_data = data.model_dump(exclude_unset=True, exclude_none=True)
            new_status = update_data.pop("status", None)

            new_number = update_data.get("room_number")
            if new_number and new_number != room.room_number:
                existing = self.get_room_by_number(room.kos_id, new_number)
                if existing and existing.id != room.id:
                    raise Conflict(f"Room number {new_number} already exists in this kos")

            for key, value in update_data.items():
                setattr(room, key, value)

            if new_status is not None:
                self.counter.change_status(room, new_status)

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(room)
        return room

    def delete_room(self, room_id: int, caller: User) -> dict:
        """Delete a room without active bookings; returns the room and the updated counters"""
        try:
            room = self.get_room(room_id)
            authorize(caller, chain_for_room(room), Capability.DELETE,
                      "You can only delete rooms in your own kos")

            active = self.count_active_bookings(room.id)
            if active:
                logger.warning("Room %s not deleted: %s active booking(s)", room.id, active)
                raise Conflict(
                    "Cannot delete room with active bookings. "
                    "Please cancel or complete all bookings first."
                )

            kos_id = room.kos_id
            deleted = RoomResponse.model_validate(room)
            self.db.delete(room)
            self.db.flush()
            self.counter.room_removed(kos_id, deleted.status)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        kos = self.db.query(Kos).filter(Kos.id == kos_id).first()
        logger.info("Room %s deleted from kos %s", deleted.id, kos_id)
        return {
            "deleted_room": deleted,
            "kos_updated": KosCounters.model_validate(kos),
        }
