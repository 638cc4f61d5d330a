"""
User service
Registration, login and account maintenance for owners and renters
"""
from typing import List, Optional
import logging
from sqlalchemy import or_
from sqlalchemy.orm import Session

from kosrent.exceptions import Conflict, Forbidden, NotFound, Unauthorized
from kosrent.models.ontology import BookingStatus, User, UserRole
from kosrent.models.schemas import UserCreate, UserUpdate, UserResponse
from kosrent.security.auth import get_password_hash, verify_password, create_access_token
from kosrent.services.booking_service import BookingService

logger = logging.getLogger(__name__)


class UserService:
    """Account service"""

    def __init__(self, db: Session):
        self.db = db

    # ============== Queries ==============

    def get_user(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFound(f"User with ID {user_id} not found")
        return user

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def get_users(self, search: Optional[str] = None, role: Optional[UserRole] = None) -> List[User]:
        query = self.db.query(User)
        if search:
            query = query.filter(or_(User.name.contains(search), User.email.contains(search)))
        if role:
            query = query.filter(User.role == role)
        return query.order_by(User.id).all()

    # ============== Accounts ==============

    def register(self, data: UserCreate) -> User:
        """Create an account; email and phone number must be unused"""
        self._check_unique(data.email, data.phone_number)

        user = User(
            name=data.name,
            email=data.email,
            phone_number=data.phone_number,
            password_hash=get_password_hash(data.password),
            role=data.role,
            profile_picture=data.profile_picture or "",
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.info("User %s registered as %s", user.id, user.role.value)
        return user

    def authenticate(self, email: str, password: str) -> dict:
        """
        Check credentials and issue a token

        Returns:
            {"access_token", "token_type", "user"}

        Raises:
            Unauthorized: unknown email or wrong password
        """
        user = self.get_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            logger.warning("Failed login for %s", email)
            raise Unauthorized("Invalid email or password")

        token = create_access_token(user.id, user.role)
        return {
            "access_token": token,
            "token_type": "bearer",
            "user": UserResponse.model_validate(user),
        }

    def update_user(self, user_id: int, data: UserUpdate, caller: User) -> User:
        """Users may only edit their own account"""
        if caller.id != user_id:
            raise Forbidden("You can only update your own profile")
        user = self.get_user(user_id)

        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        self._check_unique(
            update_data.get("email"), update_data.get("phone_number"), exclude_id=user.id
        )

        password = update_data.pop("password", None)
        if password:
            user.password_hash = get_password_hash(password)
        for key, value in update_data.items():
            setattr(user, key, value)

        self.db.commit()
        self.db.refresh(user)
        return user

    def delete_user(self, user_id: int, caller: User) -> UserResponse:
        """
        Delete an account with everything it owns

        Rooms occupied through the user's confirmed bookings are released
        in the same transaction, before the bookings go with the account.
        """
        user = self.get_user(user_id)
        deleted = UserResponse.model_validate(user)
        try:
            self._release_rooms_of(user)
            self.db.delete(user)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info("User %s deleted by user %s", user_id, caller.id)
        return deleted

    def _release_rooms_of(self, user: User) -> None:
        booking_ids = [b.id for b in user.bookings]
        confirmed_room_ids = {
            b.room_id for b in user.bookings if b.status == BookingStatus.CONFIRMED
        }
        if not confirmed_room_ids:
            return

        bookings = BookingService(self.db)
        for room_id in sorted(confirmed_room_ids):
            room = bookings.availability.get_room(room_id, for_update=True)
            bookings.release_room(room, booking_ids)
        logger.info("Released %s room(s) held by user %s", len(confirmed_room_ids), user.id)

    def _check_unique(self, email: Optional[str], phone_number: Optional[str],
                      exclude_id: Optional[int] = None) -> None:
        for column, value, label in (
            (User.email, email, "Email"),
            (User.phone_number, phone_number, "Phone number"),
        ):
            if not value:
                continue
            query = self.db.query(User.id).filter(column == value)
            if exclude_id is not None:
                query = query.filter(User.id != exclude_id)
            if query.first():
                raise Conflict(f"{label} already registered")
