from datetime import datetime
from enum import Enum
import math

from parkpass.exceptions import InvalidDurationError

HOURS_PER_DAY = 24
HOURS_PER_MONTH = 24 * 30


class PriceType(str, Enum):
    """How a spot's unit price is charged

    Each member knows how many units a duration spans, so booking cost,
    extension cost and search filters share one implementation.
    """
    HOUR = "hour"
    DAY = "day"
    MONTH = "month"

    @property
    def hours_per_unit(self) -> int:
        if self is PriceType.HOUR:
            return 1
        if self is PriceType.DAY:
            return HOURS_PER_DAY
        return HOURS_PER_MONTH

    def units(self, duration_hours: float) -> float:
        """Billable units for a duration; hourly is linear, day and month round up"""
        if self is PriceType.HOUR:
            return duration_hours
        return math.ceil(duration_hours / self.hours_per_unit)

    def cost(self, price: float, duration_hours: float) -> float:
        return price * self.units(duration_hours)

    def extension_cost(self, price: float) -> float:
        """Cost of a single one-hour extension"""
        if self is PriceType.HOUR:
            return price
        # Daily and monthly rates are both converted with the daily divisor
        return price / HOURS_PER_DAY

    def hourly_rate(self, price: float) -> float:
        return price / self.hours_per_unit


def duration_hours(start: datetime, end: datetime) -> float:
    """Length of a booking window in hours; rejects empty or inverted windows"""
    hours = (end - start).total_seconds() / 3600
    if hours <= 0:
        raise InvalidDurationError("Invalid booking duration")
    return hours


def calculate_cost(price: float, price_type, start: datetime, end: datetime) -> float:
    """Total cost of parking from start to end at the spot's rate"""
    return PriceType(price_type).cost(price, duration_hours(start, end))
