"""
Facility routes
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from kosrent.database import get_db
from kosrent.models.ontology import User
from kosrent.models.schemas import (
    KosFacilityCreate, RoomFacilityCreate, FacilityUpdate, FacilityResponse, envelope
)
from kosrent.services.facility_service import FacilityService
from kosrent.security.auth import require_owner

router = APIRouter(prefix="/facilities", tags=["Facilities"])


@router.get("/kos/{kos_id}")
def list_kos_facilities(kos_id: int, db: Session = Depends(get_db)):
    facilities = FacilityService(db).get_kos_facilities(kos_id)
    return envelope(
        [FacilityResponse.model_validate(f) for f in facilities],
        "Facilities retrieved successfully"
    )


@router.get("/room/{room_id}")
def list_room_facilities(room_id: int, db: Session = Depends(get_db)):
    facilities = FacilityService(db).get_room_facilities(room_id)
    return envelope(
        [FacilityResponse.model_validate(f) for f in facilities],
        "Facilities retrieved successfully"
    )


@router.post("/kos", status_code=status.HTTP_201_CREATED)
def create_kos_facility(
    data: KosFacilityCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_owner)
):
    facility = FacilityService(db).create_kos_facility(data, current_user)
    return envelope(FacilityResponse.model_validate(facility), "Facility created successfully")


@router.post("/room", status_code=status.HTTP_201_CREATED)
def create_room_facility(
    data: RoomFacilityCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_owner)
):
    facility = FacilityService(db).create_room_facility(data, current_user)
    return envelope(FacilityResponse.model_validate(facility), "Facility created successfully")


@router.put("/{facility_id}")
def update_facility(
    facility_id: int,
    data: FacilityUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_owner)
):
    facility = FacilityService(db).update_facility(facility_id, data, current_user)
    return envelope(FacilityResponse.model_validate(facility), "Facility updated successfully")


@router.delete("/{facility_id}")
def delete_facility(
    facility_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_owner)
):
    deleted = FacilityService(db).delete_facility(facility_id, current_user)
    return envelope(deleted, "Facility deleted successfully")
