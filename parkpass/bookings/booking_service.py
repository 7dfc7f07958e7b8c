from typing import List, Optional, Tuple
from datetime import date, datetime, timedelta
import logging

from sqlalchemy import or_, update
from sqlalchemy.orm import Session, joinedload

from parkpass.bookings.codes import generate_pin, generate_qr_data
from parkpass.bookings.pricing import PriceType, calculate_cost
from parkpass.bookings.schemas import BookingCreateRequest
from parkpass.config import Settings, settings as default_settings
from parkpass.exceptions import (
    ConflictError, EntryWindowError, ForbiddenError, InvalidStateError, NotFoundError
)
from parkpass.models import (
    Booking, BookingStatus, EntryAction, EntryLog, EntryMethod, NotificationType,
    ParkingSpot, PaymentStatus, SpotStatus, User, UserRole, Vehicle
)
from parkpass.notifications.service import NotificationService
from parkpass.payments.service import PaymentService
from parkpass.spots.ledger import SlotLedger
from parkpass.timeutils import utcnow

logger = logging.getLogger(__name__)

LIVE_STATUSES = (BookingStatus.PENDING, BookingStatus.ACTIVE, BookingStatus.EXTENDED)
PARKED_STATUSES = (BookingStatus.ACTIVE, BookingStatus.EXTENDED)


class BookingService:
    """Booking lifecycle: create, enter, extend, cancel, exit and expire

    Every mutating operation takes an optional ``now`` so callers control the
    clock; it defaults to the current UTC time.
    """

    def __init__(
        self,
        db: Session,
        notifications: Optional[NotificationService] = None,
        config: Optional[Settings] = None
    ):
        self.db = db
        self.config = config or default_settings
        self.notifications = notifications or NotificationService(db)
        self.payments = PaymentService(db)
        self.ledger = SlotLedger(db)

    @property
    def reservation_buffer(self) -> timedelta:
        return timedelta(minutes=self.config.RESERVATION_BUFFER_MINUTES)

    @property
    def extension_length(self) -> timedelta:
        return timedelta(minutes=self.config.EXTENSION_MINUTES)

    @property
    def cancellation_cutoff(self) -> timedelta:
        return timedelta(minutes=self.config.CANCELLATION_CUTOFF_MINUTES)

    def create_booking(
        self,
        user: User,
        request: BookingCreateRequest,
        now: Optional[datetime] = None
    ) -> Booking:
        """Reserve one slot for the requested window and issue entry codes"""

        now = now or utcnow()

        spot = self.db.query(ParkingSpot).filter(ParkingSpot.id == request.spot_id).first()
        if not spot:
            raise NotFoundError("Parking spot not found")
        if spot.status != SpotStatus.ACTIVE:
            raise ConflictError("Parking spot not available")
        if spot.available_slots <= 0:
            raise ConflictError("No available slots")

        vehicle = (
            self.db.query(Vehicle)
            .filter(Vehicle.id == request.vehicle_id, Vehicle.user_id == user.id)
            .first()
        )
        if not vehicle:
            raise NotFoundError("Vehicle not found")

        total_cost = calculate_cost(spot.price, spot.price_type, request.start_time, request.end_time)

        try:
            # The count may have dropped since the read above
            if not self.ledger.decrement(spot.id):
                raise ConflictError("No available slots")

            booking = Booking(
                spot_id=spot.id,
                user_id=user.id,
                vehicle_id=vehicle.id,
                start_time=request.start_time,
                end_time=request.end_time,
                reserved_end_time=request.end_time + self.reservation_buffer,
                total_cost=total_cost,
                qr_code=generate_qr_data(),
                pin=generate_pin(),
                is_extended=False,
                status=BookingStatus.PENDING,
                created_at=now
            )
            self.db.add(booking)
            self.db.flush()

            self.payments.create_payment(booking.id, total_cost, status=PaymentStatus.PENDING, now=now)
            self.notifications.create_notification(
                user_id=user.id,
                title="Booking Confirmed",
                message=f"Your booking at {spot.name} has been confirmed.",
                type=NotificationType.BOOKING,
                booking_id=booking.id,
                now=now
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(booking)
        logger.info(f"Booking created: {booking.id} for user: {user.id}")
        return booking

    def get_booking(self, booking_id: int, user: User) -> Booking:
        """Booking visible to its customer, the spot owner, or an admin"""

        query = (
            self.db.query(Booking)
            .options(
                joinedload(Booking.spot),
                joinedload(Booking.vehicle),
                joinedload(Booking.user),
                joinedload(Booking.payments),
                joinedload(Booking.entry_logs)
            )
            .filter(Booking.id == booking_id)
        )
        if user.role != UserRole.ADMIN:
            query = query.join(ParkingSpot, Booking.spot_id == ParkingSpot.id).filter(
                or_(Booking.user_id == user.id, ParkingSpot.owner_id == user.id)
            )

        booking = query.first()
        if not booking:
            raise NotFoundError("Booking not found")
        return booking

    def list_user_bookings(
        self,
        user_id: int,
        status: Optional[BookingStatus] = None,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[List[Booking], int]:
        """Customer's bookings, newest first"""

        query = self.db.query(Booking).filter(Booking.user_id == user_id)
        if status:
            query = query.filter(Booking.status == status)
        return self._paginate(query, page, limit)

    def list_owner_bookings(
        self,
        owner: User,
        status: Optional[BookingStatus] = None,
        spot_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[List[Booking], int]:
        """Bookings on the owner's spots; admins see every spot"""

        query = self.db.query(Booking)
        if owner.role != UserRole.ADMIN:
            query = query.join(ParkingSpot, Booking.spot_id == ParkingSpot.id).filter(
                ParkingSpot.owner_id == owner.id
            )
        if status:
            query = query.filter(Booking.status == status)
        if spot_id:
            query = query.filter(Booking.spot_id == spot_id)
        if start_date:
            query = query.filter(Booking.start_time >= datetime.combine(start_date, datetime.min.time()))
        if end_date:
            query = query.filter(Booking.start_time <= datetime.combine(end_date, datetime.max.time()))
        return self._paginate(query, page, limit)

    def extend_booking(
        self,
        booking_id: int,
        user: User,
        now: Optional[datetime] = None
    ) -> Tuple[Booking, float]:
        """Add one hour to an active booking; allowed once, before the reserved end"""

        now = now or utcnow()

        booking = (
            self.db.query(Booking)
            .filter(Booking.id == booking_id, Booking.user_id == user.id)
            .first()
        )
        if not booking:
            raise NotFoundError("Booking not found")
        if booking.is_extended or booking.status == BookingStatus.EXTENDED:
            raise ConflictError("Booking has already been extended")
        if booking.status != BookingStatus.ACTIVE:
            raise InvalidStateError(f"Only active bookings can be extended. Status: {booking.status.value}")
        if now > booking.reserved_end_time:
            raise ConflictError("Extension time has expired")

        spot = booking.spot
        extension_cost = PriceType(spot.price_type).extension_cost(spot.price)

        try:
            booking.end_time = booking.end_time + self.extension_length
            booking.reserved_end_time = booking.reserved_end_time + self.extension_length
            booking.total_cost = booking.total_cost + extension_cost
            booking.is_extended = True
            booking.extended_at = now
            booking.status = BookingStatus.EXTENDED

            self.payments.create_payment(booking.id, extension_cost, status=PaymentStatus.COMPLETED, now=now)
            self._log(booking, EntryAction.EXTEND, EntryMethod.APP, "EXTENSION", now)
            self.notifications.create_notification(
                user_id=user.id,
                title="Booking Extended",
                message=f"Your booking at {spot.name} has been extended by 1 hour.",
                type=NotificationType.BOOKING,
                booking_id=booking.id,
                now=now
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(booking)
        logger.info(f"Booking extended: {booking.id} for user: {user.id}")
        return booking, extension_cost

    def cancel_booking(
        self,
        booking_id: int,
        user: User,
        now: Optional[datetime] = None
    ) -> Booking:
        """Cancel a pending booking at least an hour before it starts"""

        now = now or utcnow()

        booking = (
            self.db.query(Booking)
            .filter(Booking.id == booking_id, Booking.user_id == user.id)
            .first()
        )
        if not booking:
            raise NotFoundError("Booking not found")
        if booking.status in PARKED_STATUSES:
            raise InvalidStateError("Cannot cancel active booking. Please contact support.")
        if booking.status != BookingStatus.PENDING:
            raise InvalidStateError(f"Booking cannot be cancelled. Status: {booking.status.value}")
        if now > booking.start_time - self.cancellation_cutoff:
            raise ConflictError("Cannot cancel booking less than 1 hour before start time")

        try:
            booking.status = BookingStatus.CANCELLED
            self.ledger.increment(booking.spot_id)
            self.payments.refund_booking_payments(booking.id)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(booking)
        logger.info(f"Booking cancelled: {booking.id} for user: {user.id}")
        return booking

    def validate_entry(
        self,
        code: str,
        actor: User,
        now: Optional[datetime] = None
    ) -> Booking:
        """Admit the vehicle holding ``code`` (QR token or PIN)

        A pending booking becomes active; an already parked booking stays as
        it is and the re-entry is logged.
        """

        now = now or utcnow()

        candidates = (
            self.db.query(Booking)
            .options(joinedload(Booking.spot), joinedload(Booking.vehicle), joinedload(Booking.user))
            .filter(
                or_(Booking.qr_code == code, Booking.pin == code),
                Booking.status.in_(LIVE_STATUSES)
            )
            .all()
        )
        if not candidates:
            raise NotFoundError("Invalid code or booking not found")

        permitted = [b for b in candidates if self._can_operate(b, actor)]
        if not permitted:
            raise ForbiddenError("Access denied")

        booking = self._pick_entry_candidate(permitted, code, now)

        if now < booking.start_time:
            raise EntryWindowError(EntryWindowError.NOT_STARTED)
        if now > booking.reserved_end_time:
            raise EntryWindowError(EntryWindowError.EXPIRED)

        method = EntryMethod.QR if booking.qr_code == code else EntryMethod.PIN
        try:
            if booking.status == BookingStatus.PENDING:
                booking.status = BookingStatus.ACTIVE
            self._log(booking, EntryAction.ENTRY, method, code, now)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(booking)
        logger.info(f"Entry validated for booking: {booking.id}")
        return booking

    def process_exit(
        self,
        booking_id: int,
        actor: User,
        now: Optional[datetime] = None
    ) -> datetime:
        """Complete a parked booking at the gate and release its slot"""

        now = now or utcnow()

        booking = (
            self.db.query(Booking)
            .filter(Booking.id == booking_id, Booking.status.in_(PARKED_STATUSES))
            .first()
        )
        if not booking:
            raise NotFoundError("Active booking not found")
        if not self._can_operate(booking, actor):
            raise ForbiddenError("Access denied")

        try:
            if not self._complete(booking, now, EntryMethod.MANUAL, "EXIT"):
                raise NotFoundError("Active booking not found")
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Exit processed for booking: {booking.id}")
        return now

    def expire_booking(self, booking_id: int, now: Optional[datetime] = None) -> bool:
        """Force-complete a parked booking whose reserved window has lapsed

        The guard is re-read here so the call is a no-op for bookings that
        were exited or expired in the meantime. The caller commits.
        """

        now = now or utcnow()

        booking = (
            self.db.query(Booking)
            .filter(
                Booking.id == booking_id,
                Booking.status.in_(PARKED_STATUSES),
                Booking.reserved_end_time < now,
                Booking.actual_end_time.is_(None)
            )
            .first()
        )
        if not booking:
            return False
        if not self._complete(booking, now, EntryMethod.AUTO, "EXPIRED"):
            return False

        self.notifications.create_notification(
            user_id=booking.user_id,
            title="Booking Expired",
            message=f"Your booking at {booking.spot.name} has expired and been automatically completed.",
            type=NotificationType.BOOKING,
            booking_id=booking.id,
            now=now
        )
        return True

    def _complete(self, booking: Booking, now: datetime, method: EntryMethod, code: str) -> bool:
        # Conditional update so a concurrent exit and expiry cannot both release the slot
        result = self.db.execute(
            update(Booking)
            .where(
                Booking.id == booking.id,
                Booking.status.in_(PARKED_STATUSES),
                Booking.actual_end_time.is_(None)
            )
            .values(status=BookingStatus.COMPLETED, actual_end_time=now)
            .execution_options(synchronize_session="fetch")
        )
        if result.rowcount != 1:
            return False

        self.ledger.increment(booking.spot_id)
        self._log(booking, EntryAction.EXIT, method, code, now)
        return True

    def _log(self, booking: Booking, action: EntryAction, method: EntryMethod, code: str, now: datetime):
        self.db.add(EntryLog(
            booking_id=booking.id,
            action=action,
            method=method,
            code=code,
            timestamp=now
        ))

    @staticmethod
    def _can_operate(booking: Booking, actor: User) -> bool:
        return actor.role == UserRole.ADMIN or booking.spot.owner_id == actor.id

    @staticmethod
    def _pick_entry_candidate(bookings: List[Booking], code: str, now: datetime) -> Booking:
        """QR tokens are unique; PINs are not, so prefer a booking whose window is open"""
        for booking in bookings:
            if booking.qr_code == code:
                return booking
        for booking in bookings:
            if booking.start_time <= now <= booking.reserved_end_time:
                return booking
        return min(bookings, key=lambda b: b.start_time)

    def _paginate(self, query, page: int, limit: int) -> Tuple[List[Booking], int]:
        total = query.count()
        bookings = (
            query.options(
                joinedload(Booking.spot),
                joinedload(Booking.vehicle),
                joinedload(Booking.user),
                joinedload(Booking.payments)
            )
            .order_by(Booking.created_at.desc(), Booking.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return bookings, total
