"""
Kos listing routes
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from kosrent.database import get_db
from kosrent.models.ontology import User, GenderType
from kosrent.models.schemas import KosCreate, KosUpdate, KosResponse, envelope
from kosrent.services.kos_service import KosService
from kosrent.security.auth import require_owner

router = APIRouter(prefix="/kos", tags=["Kos"])


@router.get("")
def list_kos(
    search: Optional[str] = Query(None),
    gender_type: Optional[GenderType] = Query(None),
    owner_id: Optional[int] = Query(None),
    db: Session = Depends(get_db)
):
    """Public listing search"""
    kos_list = KosService(db).get_kos_list(search=search, gender_type=gender_type, owner_id=owner_id)
    return envelope([KosResponse.model_validate(k) for k in kos_list], "Kos retrieved successfully")


@router.get("/{kos_id}")
def get_kos(kos_id: int, db: Session = Depends(get_db)):
    kos = KosService(db).get_kos(kos_id)
    return envelope(KosResponse.model_validate(kos), "Kos retrieved successfully")


@router.post("", status_code=status.HTTP_201_CREATED)
def create_kos(
    data: KosCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_owner)
):
    kos = KosService(db).create_kos(data, current_user)
    return envelope(KosResponse.model_validate(kos), "Kos created successfully")


@router.put("/{kos_id}")
def update_kos(
    kos_id: int,
    data: KosUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_owner)
):
    kos = KosService(db).update_kos(kos_id, data, current_user)
    return envelope(KosResponse.model_validate(kos), "Kos updated successfully")


@router.delete("/{kos_id}")
def delete_kos(
    kos_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_owner)
):
    deleted = KosService(db).delete_kos(kos_id, current_user)
    return envelope(deleted, "Kos deleted successfully")
