from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from parkpass.models import PaymentMethod, PaymentStatus
from parkpass.schemas import Pagination

class PaymentProcessRequest(BaseModel):
    """Confirmation of an external charge for a booking"""
    booking_id: int
    method: PaymentMethod
    transaction_id: Optional[str] = None

class Payment(BaseModel):
    id: int
    booking_id: int
    amount: float
    method: PaymentMethod
    status: PaymentStatus
    transaction_id: Optional[str] = None
    processed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class PaymentProcessResponse(BaseModel):
    message: str
    payments: List[Payment]

class PaymentHistoryResponse(BaseModel):
    payments: List[Payment]
    pagination: Pagination
