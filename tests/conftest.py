import os
import tempfile
from datetime import datetime, timedelta, timezone

import pytest

# Deterministic env before any app module reads it
_TMP_DIR = tempfile.mkdtemp(prefix="autoschedule-tests-")
TEST_ENV = {
    "ENVIRONMENT": "test",
    "LOG_DIR": os.path.join(_TMP_DIR, "logs"),
    "LOG_LEVEL": "WARNING",
    "DATABASE_URL": f"sqlite:///{os.path.join(_TMP_DIR, 'default.db')}",
    "ENABLE_PROMETHEUS": "false",
    "ENABLE_API_KEY_SECURITY": "false",
    "SCHEDULER_TIMEZONE": "UTC",
    "STRICT_SLOT_VALIDATION": "false",
    "SENTRY_DSN": "",
}
for key, value in TEST_ENV.items():
    os.environ[key] = value

from app.base.config import settings
from app.base.models import AvailabilityRule, Booking, DayOfWeek, InterviewerConfig, TimeRange
from app.services.interview_scheduler_service import InterviewSchedulerService
from app.services.schedule_store import ScheduleStore
from app.utils.time_utils import get_zone, week_number_for_instant

# Saturday 2026-10-17, week 42. Mondays 19th/26th, Wednesdays 21st/28th fall in weeks 43 and 44.
NOW = datetime(2026, 10, 17, 10, 0, tzinfo=timezone.utc)


def utc(year, month, day, hour=0, minute=0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


def make_config(max_per_week: int = 5, rules=None) -> InterviewerConfig:
    if rules is None:
        rules = {
            DayOfWeek.MONDAY: [("09:00", "12:00")],
            DayOfWeek.WEDNESDAY: [("14:00", "17:00")],
        }
    return InterviewerConfig(
        max_interviews_per_week=max_per_week,
        rules=[
            AvailabilityRule(day_of_week=day, time_ranges=[TimeRange(start=s, end=e) for s, e in ranges])
            for day, ranges in rules.items()
        ],
    )


def booking_at(start: datetime, booking_id: str = "b1") -> Booking:
    return Booking(
        id=booking_id,
        candidate_name="Ada",
        candidate_email="ada@example.com",
        start_time=start,
        end_time=start + timedelta(hours=1),
        week_number=week_number_for_instant(start, get_zone("UTC")),
    )


class FrozenClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return FrozenClock(NOW)


@pytest.fixture
def store(tmp_path):
    store = ScheduleStore(f"sqlite:///{tmp_path / 'schedule.db'}", lock_timeout=5.0).open()
    yield store
    store.close()


@pytest.fixture
def scheduler(store, clock):
    return InterviewSchedulerService(store, config=settings, clock=clock)
