"""
Authentication routes
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from kosrent.database import get_db
from kosrent.models.ontology import User
from kosrent.models.schemas import LoginRequest, LoginResponse, UserResponse, envelope
from kosrent.services.user_service import UserService
from kosrent.security.auth import get_current_user

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login")
def login(data: LoginRequest, db: Session = Depends(get_db)):
    """Exchange email and password for a bearer token"""
    result = UserService(db).authenticate(data.email, data.password)
    return envelope(LoginResponse(**result), "Login successful")


@router.get("/me")
def get_current_user_info(current_user: User = Depends(get_current_user)):
    return envelope(UserResponse.model_validate(current_user), "Current user")
