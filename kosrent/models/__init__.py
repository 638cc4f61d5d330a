# ORM models
from kosrent.models.ontology import (
    User, Kos, Room, Booking, Facility, Review,
    UserRole, GenderType, RoomStatus, BookingStatus, FacilityType
)

__all__ = [
    'User', 'Kos', 'Room', 'Booking', 'Facility', 'Review',
    'UserRole', 'GenderType', 'RoomStatus', 'BookingStatus', 'FacilityType'
]
