from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from parkpass.auth.dependencies import get_current_user
from parkpass.database import get_db
from parkpass.models import NotificationType
from parkpass.notifications.schemas import NotificationListResponse, UnreadCountResponse
from parkpass.notifications.service import NotificationService
from parkpass.schemas import MessageResponse, build_pagination

router = APIRouter()

@router.get("/", response_model=NotificationListResponse)
def get_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    type: Optional[NotificationType] = Query(None),
    is_read: Optional[bool] = Query(None),
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    notifications, total = NotificationService(db).get_user_notifications(
        current_user.id, page=page, limit=limit, type=type, is_read=is_read
    )
    return {"notifications": notifications, "pagination": build_pagination(page, limit, total)}

@router.get("/unread-count", response_model=UnreadCountResponse)
def get_unread_count(current_user = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"count": NotificationService(db).get_unread_count(current_user.id)}

@router.put("/read-all", response_model=MessageResponse)
def mark_all_as_read(current_user = Depends(get_current_user), db: Session = Depends(get_db)):
    NotificationService(db).mark_all_as_read(current_user.id)
    return {"message": "All notifications marked as read"}

@router.put("/{notification_id}/read", response_model=MessageResponse)
def mark_as_read(
    notification_id: int,
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    NotificationService(db).mark_as_read(notification_id, current_user.id)
    return {"message": "Notification marked as read"}
