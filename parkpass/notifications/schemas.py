from pydantic import BaseModel
from typing import Any, Dict, List, Optional
from datetime import datetime

from parkpass.models import NotificationType
from parkpass.schemas import Pagination

class Notification(BaseModel):
    id: int
    title: str
    message: str
    type: NotificationType
    booking_id: Optional[int] = None
    data: Optional[Dict[str, Any]] = None
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True

class NotificationListResponse(BaseModel):
    notifications: List[Notification]
    pagination: Pagination

class UnreadCountResponse(BaseModel):
    count: int
