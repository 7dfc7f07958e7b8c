from typing import List, Optional, Tuple
from datetime import datetime, timedelta
import logging

from sqlalchemy.orm import Session

from parkpass.models import Notification, NotificationType
from parkpass.timeutils import utcnow

logger = logging.getLogger(__name__)


class NotificationService:
    """Stores user notifications; delivery beyond the table is not attempted"""

    def __init__(self, db: Session):
        self.db = db

    def create_notification(
        self,
        user_id: int,
        title: str,
        message: str,
        type: NotificationType,
        booking_id: Optional[int] = None,
        now: Optional[datetime] = None
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            title=title,
            message=message,
            type=type,
            booking_id=booking_id,
            data={"bookingId": booking_id} if booking_id is not None else {},
            is_read=False,
            created_at=now or utcnow()
        )
        self.db.add(notification)
        self.db.flush()

        logger.info(f"Notification created for user: {user_id}")
        return notification

    def get_user_notifications(
        self,
        user_id: int,
        page: int = 1,
        limit: int = 20,
        type: Optional[NotificationType] = None,
        is_read: Optional[bool] = None
    ) -> Tuple[List[Notification], int]:
        query = self.db.query(Notification).filter(Notification.user_id == user_id)
        if type is not None:
            query = query.filter(Notification.type == type)
        if is_read is not None:
            query = query.filter(Notification.is_read == is_read)

        total = query.count()
        notifications = (
            query.order_by(Notification.created_at.desc(), Notification.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return notifications, total

    def mark_as_read(self, notification_id: int, user_id: int) -> int:
        updated = (
            self.db.query(Notification)
            .filter(Notification.id == notification_id, Notification.user_id == user_id)
            .update({Notification.is_read: True}, synchronize_session=False)
        )
        self.db.commit()
        return updated

    def mark_all_as_read(self, user_id: int) -> int:
        updated = (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .update({Notification.is_read: True}, synchronize_session=False)
        )
        self.db.commit()
        return updated

    def get_unread_count(self, user_id: int) -> int:
        return (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .count()
        )

    def reminder_exists(self, user_id: int, booking_id: int) -> bool:
        return (
            self.db.query(Notification.id)
            .filter(
                Notification.user_id == user_id,
                Notification.type == NotificationType.REMINDER,
                Notification.booking_id == booking_id
            )
            .first()
            is not None
        )

    def cleanup_old_notifications(self, retention_days: int, now: Optional[datetime] = None) -> int:
        """Delete read notifications older than the retention window"""
        cutoff = (now or utcnow()) - timedelta(days=retention_days)
        deleted = (
            self.db.query(Notification)
            .filter(Notification.created_at < cutoff, Notification.is_read.is_(True))
            .delete(synchronize_session=False)
        )
        self.db.commit()
        logger.info(f"Cleaned up {deleted} old notifications")
        return deleted
