"""
Domain exceptions

Every service failure is one of these; the API layer renders them as the
standard JSON envelope with the matching HTTP status code.
"""
from fastapi import status


class KosError(Exception):
    """Base class of all domain errors"""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFound(KosError):
    """Referenced entity does not exist"""

    status_code = status.HTTP_404_NOT_FOUND


class Unauthorized(KosError):
    """Missing or invalid credentials"""

    status_code = status.HTTP_401_UNAUTHORIZED


class Forbidden(KosError):
    """Caller lacks the role or the ownership required"""

    status_code = status.HTTP_403_FORBIDDEN


class Conflict(KosError):
    """Request clashes with the current state of the store"""

    status_code = status.HTTP_400_BAD_REQUEST


class InvalidTransition(Conflict):
    """Booking status change not allowed by the transition table"""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot change booking status from {current} to {target}")


class RenderError(KosError):
    """Invoice document could not be rendered or stored"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


__all__ = [
    "KosError",
    "NotFound",
    "Unauthorized",
    "Forbidden",
    "Conflict",
    "InvalidTransition",
    "RenderError",
]
