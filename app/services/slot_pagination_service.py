# app/services/slot_pagination_service.py

from datetime import datetime, timedelta
from itertools import islice
from typing import Optional, Union

from app.base.errors import InvalidRequest
from app.base.models import SlotPage
from app.services.quota_service import QuotaTracker
from app.services.schedule_store import ScheduleState
from app.services.slot_generator_service import SlotGenerator
from app.utils.time_utils import parse_instant, start_of_day, to_iso


class SlotPaginator:
    """
    Cursor pagination over the generated slot sequence.

    Every page re-runs the generator from the cursor through a horizon
    anchored to the start of *today*, never to the cursor, so pages past the
    horizon are simply empty and cursors before today start at today. Pages
    are not snapshotted: a booking or cancellation between two fetches can
    make a slot vanish from, or show up again on, a later page. Listing is
    advisory; the booking commit re-checks everything.
    """

    def __init__(self, generator: SlotGenerator, horizon_days: int = 14):
        self.generator = generator
        self.horizon = timedelta(days=horizon_days)

    def window(self, cursor: Optional[datetime], now: datetime):
        today = start_of_day(now, self.generator.zone)
        start = max(cursor, today) if cursor else today
        return start, today + self.horizon

    def page(
        self,
        state: ScheduleState,
        cursor: Optional[Union[str, datetime]],
        limit: int,
        now: datetime,
    ) -> SlotPage:
        if limit < 1:
            raise InvalidRequest(f"limit must be a positive integer, got {limit}")
        try:
            cursor_instant = parse_instant(cursor) if cursor else None
        except ValueError as e:
            raise InvalidRequest(f"invalid cursor: {e}") from e

        start, end = self.window(cursor_instant, now)
        if start > end:
            return SlotPage(slots=[], next_cursor=None, has_more=False)
        quota = QuotaTracker(state.bookings, state.config.max_interviews_per_week)
        slots = self.generator.generate(start, end, state.config, state.bookings, quota, now)

        batch = list(islice(slots, limit + 1))
        items, overflow = batch[:limit], batch[limit:]
        next_cursor = to_iso(overflow[0].start_time) if overflow else None
        return SlotPage(slots=items, next_cursor=next_cursor, has_more=bool(overflow))
