from pydantic import BaseModel, Field, validator
from typing import List, Optional
from datetime import datetime

from parkpass.models import (
    BookingStatus, PaymentStatus, PaymentMethod, EntryAction, EntryMethod
)
from parkpass.schemas import Pagination
from parkpass.timeutils import to_naive_utc

# Booking Request Models
class BookingCreateRequest(BaseModel):
    """Request to reserve a slot at a spot for a time window"""
    spot_id: int
    vehicle_id: int
    start_time: datetime
    end_time: datetime

    @validator("start_time", "end_time")
    def normalize_timezone(cls, v):
        return to_naive_utc(v)

class EntryValidationRequest(BaseModel):
    """Code presented at the gate: QR token or PIN"""
    code: str = Field(..., min_length=4, max_length=64)

    @validator("code")
    def strip_code(cls, v):
        return v.strip()

# Nested summaries
class SpotSummary(BaseModel):
    id: int
    name: str
    address: str
    price: float
    price_type: str
    owner_id: int

    class Config:
        from_attributes = True

class VehicleSummary(BaseModel):
    id: int
    make: str
    model: str
    license_plate: str
    color: Optional[str] = None

    class Config:
        from_attributes = True

class CustomerSummary(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None

    class Config:
        from_attributes = True

class PaymentInfo(BaseModel):
    id: int
    amount: float
    method: PaymentMethod
    status: PaymentStatus
    transaction_id: Optional[str] = None
    processed_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class EntryLogInfo(BaseModel):
    id: int
    action: EntryAction
    method: EntryMethod
    code: Optional[str] = None
    timestamp: datetime

    class Config:
        from_attributes = True

# Booking Response Models
class Booking(BaseModel):
    id: int
    spot_id: int
    user_id: int
    vehicle_id: int
    start_time: datetime
    end_time: datetime
    reserved_end_time: datetime
    actual_end_time: Optional[datetime] = None
    total_cost: float
    qr_code: str
    pin: str
    is_extended: bool
    extended_at: Optional[datetime] = None
    status: BookingStatus
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class BookingListItem(Booking):
    spot: SpotSummary
    vehicle: VehicleSummary
    payments: List[PaymentInfo] = []

class BookingDetail(BookingListItem):
    user: CustomerSummary
    entry_logs: List[EntryLogInfo] = []

class BookingCreateResponse(BaseModel):
    message: str
    booking: BookingListItem

class BookingListResponse(BaseModel):
    bookings: List[BookingListItem]
    pagination: Pagination

class OwnerBookingListItem(BookingListItem):
    user: CustomerSummary

class OwnerBookingListResponse(BaseModel):
    bookings: List[OwnerBookingListItem]
    pagination: Pagination

class BookingExtensionResponse(BaseModel):
    message: str
    booking: Booking
    extension_cost: float

class EntryBookingSummary(BaseModel):
    """What the gate attendant sees after a successful scan"""
    id: int
    spot_name: str
    start_time: datetime
    end_time: datetime
    reserved_end_time: datetime
    total_cost: float
    status: BookingStatus
    is_extended: bool
    vehicle: VehicleSummary
    customer_name: str
    customer_phone: Optional[str] = None

class EntryValidationResponse(BaseModel):
    success: bool
    message: str
    booking: EntryBookingSummary

class ExitResponse(BaseModel):
    message: str
    actual_end_time: datetime

class QRCodeResponse(BaseModel):
    booking_id: int
    qr_code: str
    pin: str
    image: str
