from typing import List, Optional, Tuple
from datetime import datetime
import logging

from sqlalchemy.orm import Session

from parkpass.exceptions import NotFoundError
from parkpass.models import Booking, Payment, PaymentMethod, PaymentStatus
from parkpass.timeutils import utcnow

logger = logging.getLogger(__name__)


class PaymentService:
    """Payment records attached to bookings"""

    def __init__(self, db: Session):
        self.db = db

    def create_payment(
        self,
        booking_id: int,
        amount: float,
        status: PaymentStatus = PaymentStatus.PENDING,
        method: PaymentMethod = PaymentMethod.CREDIT_CARD,
        now: Optional[datetime] = None
    ) -> Payment:
        payment = Payment(
            booking_id=booking_id,
            amount=amount,
            method=method,
            status=status,
            processed_at=(now or utcnow()) if status == PaymentStatus.COMPLETED else None,
            created_at=now or utcnow()
        )
        self.db.add(payment)
        self.db.flush()
        return payment

    def refund_booking_payments(self, booking_id: int) -> int:
        return (
            self.db.query(Payment)
            .filter(Payment.booking_id == booking_id)
            .update({Payment.status: PaymentStatus.REFUNDED}, synchronize_session="fetch")
        )

    def process_payment(
        self,
        booking_id: int,
        user_id: int,
        method: PaymentMethod,
        transaction_id: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> List[Payment]:
        """Confirm the booking's pending payments after an external charge succeeds"""

        booking = (
            self.db.query(Booking)
            .filter(Booking.id == booking_id, Booking.user_id == user_id)
            .first()
        )
        if not booking:
            raise NotFoundError("Booking not found")

        pending = [p for p in booking.payments if p.status == PaymentStatus.PENDING]
        if not pending:
            raise NotFoundError("Payment record not found")

        processed_at = now or utcnow()
        for payment in pending:
            payment.method = method
            payment.status = PaymentStatus.COMPLETED
            payment.transaction_id = transaction_id
            payment.processed_at = processed_at

        self.db.commit()
        logger.info(f"Payment processed for booking: {booking_id}")
        return pending

    def get_payment_history(self, user_id: int, page: int = 1, limit: int = 10) -> Tuple[List[Payment], int]:
        query = (
            self.db.query(Payment)
            .join(Booking, Payment.booking_id == Booking.id)
            .filter(Booking.user_id == user_id)
        )
        total = query.count()
        payments = (
            query.order_by(Payment.created_at.desc(), Payment.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return payments, total
