"""
Room routes
Mutations return the parent kos's updated counters alongside the room
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from kosrent.database import get_db
from kosrent.models.ontology import User, RoomStatus
from kosrent.models.schemas import RoomCreate, RoomUpdate, RoomResponse, envelope
from kosrent.services.room_service import RoomService
from kosrent.security.auth import require_owner, require_any_role

router = APIRouter(prefix="/rooms", tags=["Rooms"])


@router.get("/kos/{kos_id}")
def list_rooms_by_kos(
    kos_id: int,
    room_status: Optional[RoomStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_any_role)
):
    rooms = RoomService(db).get_rooms_by_kos(kos_id, status=room_status)
    return envelope([RoomResponse.model_validate(r) for r in rooms], "Rooms retrieved successfully")


@router.get("/{room_id}")
def get_room(
    room_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_any_role)
):
    room = RoomService(db).get_room(room_id)
    return envelope(RoomResponse.model_validate(room), "Room retrieved successfully")


@router.post("", status_code=status.HTTP_201_CREATED)
def create_room(
    data: RoomCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_owner)
):
    """Add a room; total_rooms and available_rooms follow"""
    result = RoomService(db).create_room(data, current_user)
    return envelope(result, "Room created successfully")


@router.put("/{room_id}")
def update_room(
    room_id: int,
    data: RoomUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_owner)
):
    room = RoomService(db).update_room(room_id, data, current_user)
    return envelope(RoomResponse.model_validate(room), "Room updated successfully")


@router.delete("/{room_id}")
def delete_room(
    room_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_owner)
):
    """Delete a room that has no pending or confirmed bookings"""
    result = RoomService(db).delete_room(room_id, current_user)
    return envelope(result, "Room deleted successfully")
