"""
Pydantic schemas
Request validation and response serialization for the API
"""
from datetime import datetime, date
from typing import Optional, Any
from pydantic import BaseModel, Field, field_validator, model_validator, ConfigDict
from kosrent.models.ontology import (
    UserRole, GenderType, RoomStatus, BookingStatus, FacilityType
)


def _upper(value: Any) -> Any:
    """Enum inputs are accepted case-insensitively"""
    if isinstance(value, str):
        return value.strip().upper()
    return value


# ============== Envelope ==============

def envelope(data: Any = None, message: str = "") -> dict:
    """Successful response body"""
    return {"status": True, "data": data, "message": message}


# ============== User Schemas ==============

class UserBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", max_length=120)
    phone_number: str = Field(..., min_length=10, max_length=20)


class UserCreate(UserBase):
    password: str = Field(..., min_length=3)
    role: UserRole
    profile_picture: Optional[str] = ""

    @field_validator("role", mode="before")
    @classmethod
    def upper_role(cls, v):
        return _upper(v)


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = Field(None, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", max_length=120)
    phone_number: Optional[str] = Field(None, min_length=10, max_length=20)
    password: Optional[str] = Field(None, min_length=3)
    profile_picture: Optional[str] = None


class UserResponse(BaseModel):
    id: int
    uuid: str
    name: str
    email: str
    role: UserRole
    phone_number: str
    profile_picture: Optional[str] = ""
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class UserBrief(BaseModel):
    id: int
    name: str
    phone_number: str
    model_config = ConfigDict(from_attributes=True)


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


# ============== Kos Schemas ==============

class KosBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    address: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = ""
    rules: Optional[str] = ""
    gender_type: GenderType
    kos_picture: Optional[str] = ""

    @field_validator("gender_type", mode="before")
    @classmethod
    def upper_gender(cls, v):
        return _upper(v)


class KosCreate(KosBase):
    pass


class KosUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    address: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    rules: Optional[str] = None
    gender_type: Optional[GenderType] = None
    kos_picture: Optional[str] = None

    @field_validator("gender_type", mode="before")
    @classmethod
    def upper_gender(cls, v):
        return _upper(v)


class KosResponse(KosBase):
    id: int
    uuid: str
    total_rooms: int
    available_rooms: int
    owner_id: int
    owner: Optional[UserBrief] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class KosCounters(BaseModel):
    """Derived counters returned after room mutations"""
    id: int
    name: str
    total_rooms: int
    available_rooms: int
    model_config = ConfigDict(from_attributes=True)


# ============== Room Schemas ==============

class RoomCreate(BaseModel):
    kos_id: int = Field(..., alias="kosId")
    room_number: str = Field(..., min_length=1, max_length=20)
    tipe: str = Field(..., min_length=1, max_length=50)
    harga: int = Field(..., ge=0)
    status: RoomStatus = RoomStatus.AVAILABLE
    room_picture: Optional[str] = ""
    model_config = ConfigDict(populate_by_name=True)

    @field_validator("status", mode="before")
    @classmethod
    def upper_status(cls, v):
        return _upper(v)


class RoomUpdate(BaseModel):
    room_number: Optional[str] = Field(None, min_length=1, max_length=20)
    tipe: Optional[str] = Field(None, min_length=1, max_length=50)
    harga: Optional[int] = Field(None, ge=0)
    status: Optional[RoomStatus] = None
    room_picture: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def upper_status(cls, v):
        return _upper(v)


class RoomResponse(BaseModel):
    id: int
    uuid: str
    room_number: str
    tipe: str
    harga: int
    status: RoomStatus
    room_picture: Optional[str] = ""
    kos_id: int
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


# ============== Booking Schemas ==============

class BookingCreate(BaseModel):
    room_id: int = Field(..., alias="roomId")
    start_date: date
    end_date: date
    notes: Optional[str] = ""
    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        return self


class BookingStatusUpdate(BaseModel):
    status: BookingStatus

    @field_validator("status", mode="before")
    @classmethod
    def upper_status(cls, v):
        return _upper(v)


class BookingResponse(BaseModel):
    id: int
    uuid: str
    start_date: date
    end_date: date
    total_price: int
    status: BookingStatus
    notes: Optional[str] = ""
    invoice_number: Optional[str] = None
    invoice_date: Optional[date] = None
    user_id: int
    room_id: int
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class InvoiceResponse(BaseModel):
    invoice_number: str
    download_url: str


# ============== Facility Schemas ==============

class KosFacilityCreate(BaseModel):
    kos_id: int = Field(..., alias="kosId")
    name: str = Field(..., min_length=1, max_length=100)
    description: str
    icon: Optional[str] = ""
    model_config = ConfigDict(populate_by_name=True)


class RoomFacilityCreate(BaseModel):
    room_id: int = Field(..., alias="roomId")
    name: str = Field(..., min_length=1, max_length=100)
    description: str
    icon: Optional[str] = ""
    model_config = ConfigDict(populate_by_name=True)


class FacilityUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    icon: Optional[str] = None


class FacilityResponse(BaseModel):
    id: int
    uuid: str
    name: str
    description: Optional[str] = ""
    icon: Optional[str] = ""
    facility_type: FacilityType
    kos_id: Optional[int] = None
    room_id: Optional[int] = None
    model_config = ConfigDict(from_attributes=True)


# ============== Review Schemas ==============

class ReviewCreate(BaseModel):
    kos_id: int = Field(..., alias="kosId")
    content: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)
    model_config = ConfigDict(populate_by_name=True)


class ReviewReply(BaseModel):
    reply_content: str = Field(..., min_length=1)


class ReviewResponse(BaseModel):
    id: int
    uuid: str
    content: str
    rating: int
    reply_content: Optional[str] = None
    reply_at: Optional[datetime] = None
    owner_id: Optional[int] = None
    user_id: int
    kos_id: int
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)

