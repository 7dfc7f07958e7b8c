"""
Booking Module

Time-windowed parking reservations for the ParkPass marketplace:

- pricing.py: cost of a booking window per price type (hour, day, month)
- codes.py: gate PIN and QR token generation, QR image rendering
- booking_service.py: booking lifecycle (create, entry, extend, cancel, exit, expiry)
- sweeps.py: background passes releasing expired reservations, sending
  reminders and purging old notifications
- router.py: FastAPI endpoints for customers and spot owners
- schemas.py: Pydantic request and response models

Lifecycle: PENDING -> ACTIVE -> (EXTENDED) -> COMPLETED, or PENDING -> CANCELLED.
"""

from .booking_service import BookingService
from .pricing import PriceType, calculate_cost
from .sweeps import BookingSweeps

__all__ = [
    "BookingService",
    "BookingSweeps",
    "PriceType",
    "calculate_cost",
]
