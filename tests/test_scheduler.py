import threading

import pytest

from parkpass.bookings.sweeps import BookingSweeps
from parkpass.database import SessionLocal
from parkpass.scheduler import SweepJob, SweepScheduler


def test_job_runs_on_interval_until_stopped():
    ran = threading.Event()
    job = SweepJob("tick", 0.01, ran.set)

    job.start()
    assert ran.wait(timeout=2)
    job.stop()

    assert not job.running


def test_run_once_swallows_task_errors(caplog):
    def explode():
        raise RuntimeError("boom")

    job = SweepJob("broken", 60, explode)
    assert job.run_once() is None
    assert "Error in broken sweep" in caplog.text


def test_scheduler_exposes_named_jobs():
    scheduler = SweepScheduler(BookingSweeps(SessionLocal))
    assert scheduler.job_names == ["expired-reservations", "booking-reminders", "notification-cleanup"]


def test_run_now_executes_sweep_and_rejects_unknown_names():
    scheduler = SweepScheduler(BookingSweeps(SessionLocal))

    assert scheduler.run_now("expired-reservations") == 0
    assert scheduler.run_now("notification-cleanup") == 0
    with pytest.raises(KeyError):
        scheduler.run_now("vacuum")


def test_start_and_stop_all_jobs():
    scheduler = SweepScheduler(BookingSweeps(SessionLocal))
    scheduler.start()
    assert all(job.running for job in scheduler.jobs.values())
    scheduler.stop()
    assert not any(job.running for job in scheduler.jobs.values())
