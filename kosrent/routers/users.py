"""
User routes
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from kosrent.database import get_db
from kosrent.models.ontology import User, UserRole
from kosrent.models.schemas import UserCreate, UserUpdate, UserResponse, envelope
from kosrent.services.user_service import UserService
from kosrent.security.auth import require_owner, require_any_role

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", status_code=status.HTTP_201_CREATED)
def register(data: UserCreate, db: Session = Depends(get_db)):
    """Register an owner or renter account"""
    user = UserService(db).register(data)
    return envelope(UserResponse.model_validate(user), "User registered successfully")


@router.get("/profile")
def get_profile(current_user: User = Depends(require_any_role)):
    return envelope(UserResponse.model_validate(current_user), "Profile retrieved successfully")


@router.get("")
def list_users(
    search: Optional[str] = Query(None),
    role: Optional[UserRole] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_owner)
):
    """All accounts, filtered by name or email"""
    users = UserService(db).get_users(search=search, role=role)
    return envelope([UserResponse.model_validate(u) for u in users], "Users retrieved successfully")


@router.put("/{user_id}")
def update_user(
    user_id: int,
    data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_any_role)
):
    user = UserService(db).update_user(user_id, data, current_user)
    return envelope(UserResponse.model_validate(user), "User updated successfully")


@router.delete("/{user_id}")
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_owner)
):
    deleted = UserService(db).delete_user(user_id, current_user)
    return envelope(deleted, "User deleted successfully")
