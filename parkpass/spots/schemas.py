from pydantic import BaseModel, Field, validator
from typing import List, Optional
from datetime import datetime

from parkpass.bookings.pricing import PriceType
from parkpass.models import SpotStatus
from parkpass.schemas import Pagination

class SpotBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    address: str = Field(..., min_length=5, max_length=500)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    price: float = Field(..., gt=0)
    price_type: PriceType
    opening_hours: Optional[str] = None
    phone: Optional[str] = None

class SpotCreate(SpotBase):
    total_slots: int = Field(..., ge=1)

class SpotUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    address: Optional[str] = Field(None, min_length=5, max_length=500)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    price: Optional[float] = Field(None, gt=0)
    price_type: Optional[PriceType] = None
    total_slots: Optional[int] = Field(None, ge=1)
    opening_hours: Optional[str] = None
    phone: Optional[str] = None
    status: Optional[SpotStatus] = None

class Spot(SpotBase):
    id: int
    owner_id: int
    total_slots: int
    available_slots: int
    status: SpotStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class SpotWithDistance(Spot):
    distance_km: Optional[float] = None

class SpotSearch(BaseModel):
    """Search filters for the public spot listing"""
    search: Optional[str] = None
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)
    radius_km: float = Field(10.0, gt=0)
    min_price: Optional[float] = Field(None, gt=0)
    max_price: Optional[float] = Field(None, gt=0)
    price_type: Optional[PriceType] = None
    sort_by: str = "distance"

    @validator("sort_by")
    def validate_sort_by(cls, v):
        if v not in ("distance", "price", "created"):
            raise ValueError("sort_by must be one of distance, price, created")
        return v

class SpotSearchResult(BaseModel):
    spots: List[SpotWithDistance]
    pagination: Pagination
