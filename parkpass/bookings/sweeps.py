from typing import Callable, Optional
from datetime import datetime, timedelta
import logging

from sqlalchemy.orm import Session

from parkpass.bookings.booking_service import BookingService, PARKED_STATUSES
from parkpass.config import Settings, settings as default_settings
from parkpass.models import Booking, BookingStatus, NotificationType
from parkpass.notifications.service import NotificationService
from parkpass.timeutils import utcnow

logger = logging.getLogger(__name__)


class BookingSweeps:
    """Background reconciliation passes over bookings and notifications

    Each booking is handled in its own session and transaction; a failure is
    logged and skipped so the rest of the batch still runs. The next scheduled
    run retries anything that was skipped.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        notification_factory: Callable[[Session], NotificationService] = NotificationService,
        config: Optional[Settings] = None
    ):
        self.session_factory = session_factory
        self.notification_factory = notification_factory
        self.config = config or default_settings

    def release_expired_reservations(self, now: Optional[datetime] = None) -> int:
        """Complete parked bookings whose reserved end time has passed"""

        now = now or utcnow()

        db = self.session_factory()
        try:
            expired_ids = [
                booking_id for (booking_id,) in db.query(Booking.id).filter(
                    Booking.status.in_(PARKED_STATUSES),
                    Booking.reserved_end_time < now,
                    Booking.actual_end_time.is_(None)
                ).all()
            ]
        finally:
            db.close()

        released = 0
        for booking_id in expired_ids:
            db = self.session_factory()
            try:
                service = BookingService(db, notifications=self.notification_factory(db), config=self.config)
                if service.expire_booking(booking_id, now=now):
                    db.commit()
                    released += 1
                    logger.info(f"Released expired reservation: {booking_id}")
                else:
                    db.rollback()
            except Exception:
                db.rollback()
                logger.exception(f"Error releasing expired reservation {booking_id}")
            finally:
                db.close()

        if released:
            logger.info(f"Released {released} expired reservations")
        return released

    def send_booking_reminders(self, now: Optional[datetime] = None) -> int:
        """Remind customers once about pending bookings starting within the lead time"""

        now = now or utcnow()
        horizon = now + timedelta(minutes=self.config.REMINDER_LEAD_MINUTES)

        db = self.session_factory()
        try:
            upcoming = [
                (booking.id, booking.user_id, booking.spot.name)
                for booking in db.query(Booking).filter(
                    Booking.status == BookingStatus.PENDING,
                    Booking.start_time >= now,
                    Booking.start_time <= horizon
                ).all()
            ]
        finally:
            db.close()

        sent = 0
        for booking_id, user_id, spot_name in upcoming:
            db = self.session_factory()
            try:
                notifications = self.notification_factory(db)
                if notifications.reminder_exists(user_id, booking_id):
                    continue
                notifications.create_notification(
                    user_id=user_id,
                    title="Booking Reminder",
                    message=f"Your parking booking at {spot_name} starts in 1 hour.",
                    type=NotificationType.REMINDER,
                    booking_id=booking_id,
                    now=now
                )
                db.commit()
                sent += 1
                logger.info(f"Sent booking reminder for: {booking_id}")
            except Exception:
                db.rollback()
                logger.exception(f"Error sending booking reminder {booking_id}")
            finally:
                db.close()

        if sent:
            logger.info(f"Sent {sent} booking reminders")
        return sent

    def cleanup_old_notifications(self, now: Optional[datetime] = None) -> int:
        """Purge read notifications past the retention window"""

        db = self.session_factory()
        try:
            return self.notification_factory(db).cleanup_old_notifications(
                self.config.NOTIFICATION_RETENTION_DAYS, now=now
            )
        except Exception:
            db.rollback()
            logger.exception("Error cleaning up old notifications")
            return 0
        finally:
            db.close()
