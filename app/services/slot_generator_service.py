# app/services/slot_generator_service.py

from datetime import datetime, timedelta
from typing import Iterator, Sequence

from app.base.models import Booking, InterviewerConfig, SlotOption
from app.services.quota_service import QuotaTracker
from app.utils.time_utils import (
    combine_local,
    day_of_week,
    ensure_aware_utc,
    get_zone,
    iter_days,
    local_date,
    parse_hhmm,
    week_number,
)


class SlotGenerator:
    """
    Expands recurring weekly availability into concrete bookable slots.

    ``generate`` is a pure function of its arguments (``now`` included) and
    yields lazily, so callers only pay for the slots they consume.
    """

    def __init__(self, timezone_name: str = "UTC", slot_minutes: int = 60):
        self.zone = get_zone(timezone_name)
        self.slot_length = timedelta(minutes=slot_minutes)

    def generate(
        self,
        from_instant: datetime,
        to_instant: datetime,
        config: InterviewerConfig,
        live_bookings: Sequence[Booking],
        quota: QuotaTracker,
        now: datetime,
    ) -> Iterator[SlotOption]:
        """
        Yield free future slots for every local day in ``[from_instant, to_instant]``,
        ascending by start time.

        A day is skipped entirely when its week already holds
        ``max_interviews_per_week`` bookings. Slots starting at or before
        ``now``, slots already booked and slots starting before
        ``from_instant`` are suppressed. A trailing piece of a range shorter
        than the slot length is dropped.
        """
        from_instant = ensure_aware_utc(from_instant)
        now = ensure_aware_utc(now)
        booked_starts = {ensure_aware_utc(b.start_time) for b in live_bookings}

        for day in iter_days(local_date(from_instant, self.zone), local_date(to_instant, self.zone)):
            if quota.count_for_week(week_number(day)) >= config.max_interviews_per_week:
                continue

            rule = config.rule_for(day_of_week(day))
            if rule is None:
                continue

            for time_range in sorted(rule.time_ranges, key=lambda r: parse_hhmm(r.start)):
                slot_start = combine_local(day, parse_hhmm(time_range.start), self.zone)
                range_end = combine_local(day, parse_hhmm(time_range.end), self.zone)

                while slot_start + self.slot_length <= range_end:
                    slot_end = slot_start + self.slot_length
                    if slot_start > now and slot_start >= from_instant and slot_start not in booked_starts:
                        yield SlotOption(start_time=slot_start, end_time=slot_end, is_booked=False)
                    slot_start = slot_end

    def is_offered(
        self,
        start_time: datetime,
        config: InterviewerConfig,
        live_bookings: Sequence[Booking],
        quota: QuotaTracker,
        now: datetime,
    ) -> bool:
        """Whether ``start_time`` is a slot the current rules would offer."""
        start_time = ensure_aware_utc(start_time)
        for slot in self.generate(start_time, start_time, config, live_bookings, quota, now):
            if slot.start_time == start_time:
                return True
            if slot.start_time > start_time:
                break
        return False
