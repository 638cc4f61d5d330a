"""
Kos room counters
Keeps Kos.total_rooms / Kos.available_rooms in step with the rooms.

Every change is a single relative UPDATE guarded in its WHERE clause, so two
requests touching rooms of the same kos never overwrite each other's
increment, and a change that would push available_rooms outside
[0, total_rooms] matches no row and fails instead of being written.
"""
from typing import Tuple
import logging
from sqlalchemy import update, func
from sqlalchemy.orm import Session

from kosrent.exceptions import Conflict, NotFound
from kosrent.models.ontology import Kos, Room, RoomStatus

logger = logging.getLogger(__name__)


def availability_delta(old_status: RoomStatus, new_status: RoomStatus) -> int:
    """Change of available_rooms when a room moves from old_status to new_status"""
    was_available = old_status == RoomStatus.AVAILABLE
    is_available = new_status == RoomStatus.AVAILABLE
    if was_available and not is_available:
        return -1
    if is_available and not was_available:
        return 1
    return 0


class RoomCounter:
    """Aggregate counter maintainer"""

    def __init__(self, db: Session):
        self.db = db

    # ============== Room lifecycle hooks ==============

    def room_added(self, kos_id: int, status: RoomStatus) -> None:
        """A room with the given status was inserted into the kos"""
        self._apply(kos_id, 1, 1 if status == RoomStatus.AVAILABLE else 0)

    def room_removed(self, kos_id: int, status: RoomStatus) -> None:
        """A room with the given status was deleted from the kos"""
        self._apply(kos_id, -1, -1 if status == RoomStatus.AVAILABLE else 0)

    def change_status(self, room: Room, new_status: RoomStatus) -> bool:
        """
        Move a room to new_status and adjust its kos's available_rooms

        The room row is updated only if it still holds the status this
        session saw, so a concurrent change of the same room is detected
        rather than counted twice.

        Returns:
            True if the status changed
        """
        old_status = room.status
        if old_status == new_status:
            return False

        result = self.db.execute(
            update(Room)
            .where(Room.id == room.id, Room.status == old_status)
            .values(status=new_status)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise Conflict(f"Room {room.room_number} was modified concurrently, please retry")
        self.db.expire(room, ["status"])

        delta = availability_delta(old_status, new_status)
        if delta:
            self._apply(room.kos_id, 0, delta)

        logger.info(
            "Room %s status %s -> %s (kos %s available %+d)",
            room.id, old_status.value, new_status.value, room.kos_id, delta
        )
        return True

    # ============== Repair ==============

    def recount(self, kos_id: int) -> Tuple[int, int]:
        """Rebuild both counters of a kos from its rooms"""
        kos = self.db.query(Kos).filter(Kos.id == kos_id).first()
        if not kos:
            raise NotFound(f"Kos with ID {kos_id} not found")

        total = self.db.query(func.count(Room.id)).filter(Room.kos_id == kos_id).scalar()
        available = self.db.query(func.count(Room.id)).filter(
            Room.kos_id == kos_id,
            Room.status == RoomStatus.AVAILABLE
        ).scalar()

        if (kos.total_rooms, kos.available_rooms) != (total, available):
            logger.warning(
                "Kos %s counters drifted: stored %s/%s, actual %s/%s",
                kos_id, kos.available_rooms, kos.total_rooms, available, total
            )
        kos.total_rooms = total
        kos.available_rooms = available
        self.db.flush()
        return total, available

    # ============== Internals ==============

    def _apply(self, kos_id: int, total_delta: int, available_delta: int) -> None:
        new_total = Kos.total_rooms + total_delta
        new_available = Kos.available_rooms + available_delta

        result = self.db.execute(
            update(Kos)
            .where(
                Kos.id == kos_id,
                new_total >= 0,
                new_available >= 0,
                new_available <= new_total,
            )
            .values(total_rooms=new_total, available_rooms=new_available)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            logger.error(
                "Kos %s counter update rejected (total %+d, available %+d)",
                kos_id, total_delta, available_delta
            )
            raise Conflict(f"Room counters of kos {kos_id} cannot be updated")

        # Loaded copies of the kos reread the counters on next access
        kos = self.db.get(Kos, kos_id)
        if kos is not None:
            self.db.expire(kos, ["total_rooms", "available_rooms"])
