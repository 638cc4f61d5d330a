"""
Facility service
Facilities hang off either a kos or a single room; only the owner of the
parent kos may change them
"""
from typing import List
import logging
from sqlalchemy.orm import Session

from kosrent.exceptions import NotFound
from kosrent.models.ontology import Facility, FacilityType, Kos, Room, User
from kosrent.models.schemas import (
    KosFacilityCreate, RoomFacilityCreate, FacilityUpdate, FacilityResponse
)
from kosrent.security.permissions import (
    Capability, authorize, chain_for_kos, chain_for_room, chain_for_facility
)

logger = logging.getLogger(__name__)


class FacilityService:
    """Facility service"""

    def __init__(self, db: Session):
        self.db = db

    # ============== Queries ==============

    def get_facility(self, facility_id: int) -> Facility:
        facility = self.db.query(Facility).filter(Facility.id == facility_id).first()
        if not facility:
            raise NotFound(f"Facility with ID {facility_id} not found")
        return facility

    def get_kos_facilities(self, kos_id: int) -> List[Facility]:
        return self.db.query(Facility).filter(
            Facility.kos_id == kos_id,
            Facility.facility_type == FacilityType.KOS_FACILITY
        ).order_by(Facility.name).all()

    def get_room_facilities(self, room_id: int) -> List[Facility]:
        return self.db.query(Facility).filter(
            Facility.room_id == room_id,
            Facility.facility_type == FacilityType.ROOM_FACILITY
        ).order_by(Facility.name).all()

    # ============== Mutations ==============

    def create_kos_facility(self, data: KosFacilityCreate, caller: User) -> Facility:
        kos = self.db.query(Kos).filter(Kos.id == data.kos_id).first()
        if not kos:
            raise NotFound("Kos not found")
        authorize(caller, chain_for_kos(kos), Capability.WRITE,
                  "You can only add facilities to your own kos")

        facility = Facility(
            name=data.name,
            description=data.description,
            icon=data.icon or "",
            facility_type=FacilityType.KOS_FACILITY,
            kos_id=kos.id,
        )
        return self._save(facility)

    def create_room_facility(self, data: RoomFacilityCreate, caller: User) -> Facility:
        room = self.db.query(Room).filter(Room.id == data.room_id).first()
        if not room:
            raise NotFound("Room not found")
        authorize(caller, chain_for_room(room), Capability.WRITE,
                  "You can only add facilities to rooms in your own kos")

        facility = Facility(
            name=data.name,
            description=data.description,
            icon=data.icon or "",
            facility_type=FacilityType.ROOM_FACILITY,
            room_id=room.id,
        )
        return self._save(facility)

    def update_facility(self, facility_id: int, data: FacilityUpdate, caller: User) -> Facility:
        facility = self.get_facility(facility_id)
        authorize(caller, chain_for_facility(facility), Capability.WRITE,
                  "You can only update facilities of your own kos")

        for key, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(facility, key, value)

        self.db.commit()
        self.db.refresh(facility)
        return facility

    def delete_facility(self, facility_id: int, caller: User) -> FacilityResponse:
        facility = self.get_facility(facility_id)
        authorize(caller, chain_for_facility(facility), Capability.DELETE,
                  "You can only delete facilities of your own kos")

        deleted = FacilityResponse.model_validate(facility)
        self.db.delete(facility)
        self.db.commit()
        logger.info("Facility %s deleted by owner %s", facility_id, caller.id)
        return deleted

    def _save(self, facility: Facility) -> Facility:
        self.db.add(facility)
        self.db.commit()
        self.db.refresh(facility)
        logger.info(
            "Facility %s (%s) added to %s %s",
            facility.id, facility.name, facility.facility_type.value,
            facility.kos_id or facility.room_id
        )
        return facility
