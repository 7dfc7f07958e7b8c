from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

from parkpass.models import UserRole

class UserBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    email: EmailStr
    phone: Optional[str] = None

class UserCreate(UserBase):
    password: str = Field(..., min_length=6)
    role: UserRole = UserRole.CUSTOMER
    business_name: Optional[str] = None
    business_address: Optional[str] = None

class User(UserBase):
    id: int
    role: UserRole
    business_name: Optional[str] = None
    business_address: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class AuthResponse(BaseModel):
    access_token: str
    token_type: str
    user: User

# Vehicles
class VehicleCreate(BaseModel):
    make: str = Field(..., min_length=1, max_length=100)
    model: str = Field(..., min_length=1, max_length=100)
    license_plate: str = Field(..., min_length=2, max_length=32)
    color: Optional[str] = None

class Vehicle(VehicleCreate):
    id: int
    user_id: int

    class Config:
        from_attributes = True
