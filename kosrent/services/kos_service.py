"""
Kos service
Listing CRUD; the room counters are owned by RoomCounter and never written here
"""
from typing import List, Optional
import logging
from sqlalchemy import or_
from sqlalchemy.orm import Session

from kosrent.exceptions import NotFound
from kosrent.models.ontology import Kos, GenderType, User
from kosrent.models.schemas import KosCreate, KosUpdate, KosResponse
from kosrent.security.permissions import Capability, authorize, chain_for_kos

logger = logging.getLogger(__name__)


class KosService:
    """Kos listing service"""

    def __init__(self, db: Session):
        self.db = db

    def get_kos_list(self, search: Optional[str] = None,
                     gender_type: Optional[GenderType] = None,
                     owner_id: Optional[int] = None) -> List[Kos]:
        """Listings filtered by name/address search, gender restriction and owner"""
        query = self.db.query(Kos)
        if search:
            query = query.filter(or_(Kos.name.contains(search), Kos.address.contains(search)))
        if gender_type:
            query = query.filter(Kos.gender_type == gender_type)
        if owner_id is not None:
            query = query.filter(Kos.owner_id == owner_id)
        return query.order_by(Kos.created_at.desc(), Kos.id.desc()).all()

    def get_kos(self, kos_id: int) -> Kos:
        kos = self.db.query(Kos).filter(Kos.id == kos_id).first()
        if not kos:
            raise NotFound(f"Kos with ID {kos_id} not found")
        return kos

    def create_kos(self, data: KosCreate, owner: User) -> Kos:
        """New listing of the calling owner, starting with no rooms"""
        kos = Kos(
            **data.model_dump(exclude_none=True),
            owner_id=owner.id,
            total_rooms=0,
            available_rooms=0,
        )
        self.db.add(kos)
        self.db.commit()
        self.db.refresh(kos)
        logger.info("Kos %s created by owner %s", kos.id, owner.id)
        return kos

    def update_kos(self, kos_id: int, data: KosUpdate, caller: User) -> Kos:
        kos = self.get_kos(kos_id)
        authorize(caller, chain_for_kos(kos), Capability.WRITE,
                  "You can only update your own kos")

        for key, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(kos, key, value)

        self.db.commit()
        self.db.refresh(kos)
        return kos

    def delete_kos(self, kos_id: int, caller: User) -> KosResponse:
        """Delete a listing together with its rooms, facilities and reviews"""
        kos = self.get_kos(kos_id)
        authorize(caller, chain_for_kos(kos), Capability.DELETE,
                  "You can only delete your own kos")

        deleted = KosResponse.model_validate(kos)
        try:
            self.db.delete(kos)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info("Kos %s deleted by owner %s", kos_id, caller.id)
        return deleted
