"""
ORM entities
Kos listings, their rooms, bookings, facilities and reviews, plus the users
that own or rent them
"""
import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import (
    Column, Integer, String, DateTime, Date, ForeignKey, Text,
    Enum as SQLEnum, CheckConstraint, UniqueConstraint
)
from sqlalchemy.orm import relationship
from kosrent.database import Base


def _new_uuid() -> str:
    return str(uuid.uuid4())


# ============== Enums ==============

class UserRole(str, Enum):
    """User role"""
    OWNER = "OWNER"        # manages kos listings
    SOCIETY = "SOCIETY"    # renter


class GenderType(str, Enum):
    """Who may live in a kos"""
    MALE_ONLY = "MALE_ONLY"
    FEMALE_ONLY = "FEMALE_ONLY"
    MIXED = "MIXED"


class RoomStatus(str, Enum):
    """Room status"""
    AVAILABLE = "AVAILABLE"
    OCCUPIED = "OCCUPIED"
    MAINTENANCE = "MAINTENANCE"


class BookingStatus(str, Enum):
    """Booking status"""
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


# Bookings in these states hold the room's dates
ACTIVE_BOOKING_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)


class FacilityType(str, Enum):
    """Facility attachment point"""
    KOS_FACILITY = "KOS_FACILITY"
    ROOM_FACILITY = "ROOM_FACILITY"


# ============== Entities ==============

class User(Base):
    """Owner or renter account"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), unique=True, nullable=False, default=_new_uuid)
    name = Column(String(100), nullable=False)
    email = Column(String(120), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(SQLEnum(UserRole), nullable=False, default=UserRole.SOCIETY)
    phone_number = Column(String(20), unique=True, nullable=False)
    profile_picture = Column(String(255), default="")
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    kos_list = relationship("Kos", back_populates="owner", cascade="all, delete-orphan")
    bookings = relationship("Booking", back_populates="user", cascade="all, delete-orphan")
    reviews = relationship(
        "Review", back_populates="user", foreign_keys="Review.user_id",
        cascade="all, delete-orphan"
    )


class Kos(Base):
    """
    Boarding-house listing
    total_rooms / available_rooms are derived from the rooms and only ever
    changed through RoomCounter
    """
    __tablename__ = "kos"
    __table_args__ = (
        CheckConstraint("total_rooms >= 0", name="ck_kos_total_rooms"),
        CheckConstraint(
            "available_rooms >= 0 AND available_rooms <= total_rooms",
            name="ck_kos_available_rooms"
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), unique=True, nullable=False, default=_new_uuid)
    name = Column(String(150), nullable=False)
    address = Column(String(255), nullable=False)
    description = Column(Text, default="")
    rules = Column(Text, default="")
    gender_type = Column(SQLEnum(GenderType), nullable=False, default=GenderType.MIXED)
    total_rooms = Column(Integer, nullable=False, default=0)
    available_rooms = Column(Integer, nullable=False, default=0)
    kos_picture = Column(String(255), default="")
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    owner = relationship("User", back_populates="kos_list")
    rooms = relationship("Room", back_populates="kos", cascade="all, delete-orphan")
    facilities = relationship("Facility", back_populates="kos", cascade="all, delete-orphan")
    reviews = relationship("Review", back_populates="kos", cascade="all, delete-orphan")


class Room(Base):
    """Individually bookable unit of a kos"""
    __tablename__ = "rooms"
    __table_args__ = (
        UniqueConstraint("kos_id", "room_number", name="uq_room_number_per_kos"),
        CheckConstraint("harga >= 0", name="ck_room_harga"),
    )

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), unique=True, nullable=False, default=_new_uuid)
    room_number = Column(String(20), nullable=False)
    tipe = Column(String(50), nullable=False)
    harga = Column(Integer, nullable=False)          # monthly rate
    status = Column(SQLEnum(RoomStatus), nullable=False, default=RoomStatus.AVAILABLE)
    room_picture = Column(String(255), default="")
    kos_id = Column(Integer, ForeignKey("kos.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    kos = relationship("Kos", back_populates="rooms")
    bookings = relationship("Booking", back_populates="room", cascade="all, delete-orphan")
    facilities = relationship("Facility", back_populates="room", cascade="all, delete-orphan")


class Booking(Base):
    """Reservation of a room for the half-open date range [start_date, end_date)"""
    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("end_date > start_date", name="ck_booking_dates"),
        CheckConstraint("total_price >= 0", name="ck_booking_total_price"),
    )

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), unique=True, nullable=False, default=_new_uuid)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    total_price = Column(Integer, nullable=False, default=0)
    status = Column(SQLEnum(BookingStatus), nullable=False, default=BookingStatus.PENDING)
    notes = Column(Text, default="")
    invoice_number = Column(String(50), unique=True, nullable=True)
    invoice_date = Column(Date, nullable=True)          # day the invoice number was issued
    invoice_pdf = Column(String(255), nullable=True)     # stored document reference
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="bookings")
    room = relationship("Room", back_populates="bookings")


class Facility(Base):
    """Facility of either a kos or a single room, discriminated by facility_type"""
    __tablename__ = "facilities"
    __table_args__ = (
        CheckConstraint(
            "(facility_type = 'KOS_FACILITY' AND kos_id IS NOT NULL AND room_id IS NULL) OR "
            "(facility_type = 'ROOM_FACILITY' AND room_id IS NOT NULL AND kos_id IS NULL)",
            name="ck_facility_parent"
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), unique=True, nullable=False, default=_new_uuid)
    name = Column(String(100), nullable=False)
    description = Column(Text, default="")
    icon = Column(String(255), default="")
    facility_type = Column(SQLEnum(FacilityType), nullable=False)
    kos_id = Column(Integer, ForeignKey("kos.id", ondelete="CASCADE"), nullable=True, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id", ondelete="CASCADE"), nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    kos = relationship("Kos", back_populates="facilities")
    room = relationship("Room", back_populates="facilities")


class Review(Base):
    """Renter review of a kos, with an optional owner reply"""
    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("user_id", "kos_id", name="uq_review_user_kos"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_review_rating"),
    )

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), unique=True, nullable=False, default=_new_uuid)
    content = Column(Text, nullable=False)
    rating = Column(Integer, nullable=False)
    reply_content = Column(Text, nullable=True)
    reply_at = Column(DateTime, nullable=True)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    kos_id = Column(Integer, ForeignKey("kos.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="reviews", foreign_keys=[user_id])
    owner = relationship("User", foreign_keys=[owner_id])
    kos = relationship("Kos", back_populates="reviews")
