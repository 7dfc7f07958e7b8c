import logging

from sqlalchemy import update
from sqlalchemy.orm import Session

from parkpass.models import ParkingSpot

logger = logging.getLogger(__name__)


class SlotLedger:
    """Atomic counter updates on a spot's available slots

    Both updates are single conditional statements, so the bounds check and
    the write happen in the same row update instead of check-then-write.
    """

    def __init__(self, db: Session):
        self.db = db

    def decrement(self, spot_id: int) -> bool:
        """Take one slot; False when the spot is missing or already full"""
        result = self.db.execute(
            update(ParkingSpot)
            .where(ParkingSpot.id == spot_id, ParkingSpot.available_slots > 0)
            .values(available_slots=ParkingSpot.available_slots - 1)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount == 1

    def increment(self, spot_id: int) -> bool:
        """Release one slot; never raises the count above total slots"""
        result = self.db.execute(
            update(ParkingSpot)
            .where(ParkingSpot.id == spot_id, ParkingSpot.available_slots < ParkingSpot.total_slots)
            .values(available_slots=ParkingSpot.available_slots + 1)
            .execution_options(synchronize_session="fetch")
        )
        if result.rowcount != 1:
            logger.warning(f"Slot release skipped for spot {spot_id}: already at capacity")
            return False
        return True
