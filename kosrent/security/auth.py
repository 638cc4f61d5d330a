"""
Authentication and role checks
Bearer tokens carry {sub, role}; every protected route resolves the caller
through get_current_user and narrows by role with require_role
"""
import bcrypt
import logging
from datetime import datetime, timedelta, UTC
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.orm import Session
from kosrent.config import settings
from kosrent.database import get_db
from kosrent.exceptions import Forbidden, Unauthorized
from kosrent.models.ontology import User, UserRole

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_password_hash(password: str) -> str:
    """Hash a password"""
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against its hash"""
    return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))


def create_access_token(user_id: int, role: UserRole,
                        expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT for the user"""
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {
        "sub": str(user_id),
        "role": role.value if isinstance(role, UserRole) else str(role),
        "exp": expire
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict:
    """Decode a JWT"""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        raise Unauthorized(f"Invalid token: {e}")


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the caller from the bearer token"""
    if credentials is None:
        raise Forbidden("Access denied. Token format should be: Bearer <token>")

    payload = decode_token(credentials.credentials)

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise Unauthorized("Invalid token: missing subject")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise Unauthorized("User not found")

    return user


def require_role(*allowed_roles: UserRole):
    """Dependency factory: caller must hold one of the roles"""
    async def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed_roles:
            logger.warning(
                "Role check failed for user %s: %s not in %s",
                current_user.id, current_user.role.value, [r.value for r in allowed_roles]
            )
            raise Forbidden(
                f"Access denied. Requires one of the following roles: "
                f"{', '.join(r.value for r in allowed_roles)}. Your role: {current_user.role.value}"
            )
        return current_user
    return role_checker


# Ready-made role checkers
require_owner = require_role(UserRole.OWNER)
require_society = require_role(UserRole.SOCIETY)
require_any_role = require_role(UserRole.OWNER, UserRole.SOCIETY)
