from typing import Callable, Dict, List, Optional
import logging
import threading

from parkpass.bookings.sweeps import BookingSweeps
from parkpass.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class SweepJob:
    """One periodic task running on its own daemon thread"""

    def __init__(self, name: str, interval_seconds: float, task: Callable[[], object]):
        self.name = name
        self.interval_seconds = interval_seconds
        self.task = task
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._loop, name=f"sweep-{self.name}")
        self._thread.daemon = True
        self._thread.start()

    def stop(self, timeout: float = 5):
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=timeout)
            self._thread = None

    def run_once(self):
        try:
            return self.task()
        except Exception:
            logger.exception(f"Error in {self.name} sweep")
            return None

    def _loop(self):
        # Wait first: the interval elapses before the first run, like a cron tick
        while not self._stop_event.wait(self.interval_seconds):
            self.run_once()


class SweepScheduler:
    """Starts and stops the booking sweeps at their configured intervals"""

    def __init__(self, sweeps: BookingSweeps, config: Optional[Settings] = None):
        config = config or default_settings
        self.sweeps = sweeps
        self.jobs: Dict[str, SweepJob] = {
            "expired-reservations": SweepJob(
                "expired-reservations", config.EXPIRY_SWEEP_SECONDS, sweeps.release_expired_reservations
            ),
            "booking-reminders": SweepJob(
                "booking-reminders", config.REMINDER_SWEEP_SECONDS, sweeps.send_booking_reminders
            ),
            "notification-cleanup": SweepJob(
                "notification-cleanup", config.CLEANUP_SWEEP_SECONDS, sweeps.cleanup_old_notifications
            ),
        }

    @property
    def job_names(self) -> List[str]:
        return list(self.jobs)

    def start(self):
        for job in self.jobs.values():
            job.start()
        logger.info("Sweep jobs started successfully")

    def stop(self):
        for job in self.jobs.values():
            job.stop()
        logger.info("Sweep jobs stopped")

    def run_now(self, name: str):
        """Run a sweep immediately on the calling thread"""
        if name not in self.jobs:
            raise KeyError(name)
        return self.jobs[name].run_once()
