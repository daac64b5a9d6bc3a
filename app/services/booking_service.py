# app/services/booking_service.py

import logging
import time
import uuid
from datetime import datetime
from typing import Optional

from app.base.errors import InvalidRequest, QuotaExceededError, SlotTakenError, StoreUnavailableError
from app.base.metrics import (
    booking_attempts_total,
    booking_cancellations_total,
    booking_commit_duration,
)
from app.base.models import Booking
from app.services.quota_service import QuotaTracker
from app.services.schedule_store import ScheduleStore
from app.services.slot_generator_service import SlotGenerator
from app.utils.time_utils import Clock, ensure_aware_utc, system_clock, week_number_for_instant

logger = logging.getLogger("booking")


class BookingArbiter:
    """
    Authoritative booking path.

    Every commit re-reads config and bookings inside ``ScheduleStore.atomic``
    and re-checks both conflicts there, whatever the caller saw when it listed
    slots. Conflicts surface as ``SlotTakenError`` / ``QuotaExceededError``;
    nothing is retried here.
    """

    def __init__(
        self,
        store: ScheduleStore,
        generator: SlotGenerator,
        interviewer_id: str,
        clock: Optional[Clock] = None,
        strict_slot_validation: bool = False,
    ):
        self.store = store
        self.generator = generator
        self.interviewer_id = interviewer_id
        self.clock = clock or system_clock
        self.strict_slot_validation = strict_slot_validation

    def commit(self, requested_start: datetime, candidate_name: str, candidate_email: str) -> Booking:
        name = (candidate_name or "").strip()
        email = (candidate_email or "").strip()
        if not name or not email:
            booking_attempts_total.labels(outcome="invalid").inc()
            raise InvalidRequest("candidate name and email are required")

        try:
            start = ensure_aware_utc(requested_start)
            week = week_number_for_instant(start, self.generator.zone)
            end = start + self.generator.slot_length
        except (ValueError, OverflowError) as e:
            booking_attempts_total.labels(outcome="invalid").inc()
            raise InvalidRequest(f"start time {requested_start.isoformat()} is out of range") from e

        started = time.perf_counter()
        try:
            with self.store.atomic(self.interviewer_id) as tx:
                config = tx.get_config()
                bookings = tx.list_bookings()

                if any(b.start_time == start for b in bookings):
                    raise SlotTakenError(start)

                quota = QuotaTracker(bookings, config.max_interviews_per_week)
                if quota.is_exhausted(week):
                    raise QuotaExceededError(week, config.max_interviews_per_week)

                if self.strict_slot_validation and not self.generator.is_offered(
                    start, config, bookings, quota, self.clock()
                ):
                    raise InvalidRequest(f"{start.isoformat()} is not an available slot")

                booking = Booking(
                    id=uuid.uuid4().hex,
                    candidate_name=name,
                    candidate_email=email,
                    start_time=start,
                    end_time=end,
                    week_number=week,
                )
                tx.add_booking(booking)
        except SlotTakenError:
            booking_attempts_total.labels(outcome="slot_taken").inc()
            logger.info(f"[Book] Slot {start.isoformat()} already taken")
            raise
        except QuotaExceededError:
            booking_attempts_total.labels(outcome="quota_exceeded").inc()
            logger.info(f"[Book] Week {week} is at capacity, rejected {start.isoformat()}")
            raise
        except InvalidRequest:
            booking_attempts_total.labels(outcome="invalid").inc()
            raise
        except StoreUnavailableError:
            booking_attempts_total.labels(outcome="unavailable").inc()
            raise
        finally:
            booking_commit_duration.observe(time.perf_counter() - started)

        booking_attempts_total.labels(outcome="created").inc()
        logger.info(f"[Book] Booking {booking.id} created at {start.isoformat()} (week {week})")
        return booking

    def cancel(self, booking_id: str) -> bool:
        """Remove a booking. Unknown ids are a no-op and return ``False``."""
        with self.store.atomic(self.interviewer_id) as tx:
            removed = tx.delete_booking(booking_id)

        booking_cancellations_total.labels(result="cancelled" if removed else "not_found").inc()
        if removed:
            logger.info(f"[Cancel] Booking {booking_id} cancelled")
        else:
            logger.info(f"[Cancel] Booking {booking_id} not found, nothing to do")
        return removed
