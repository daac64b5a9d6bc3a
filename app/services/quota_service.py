# app/services/quota_service.py

from typing import Sequence

from app.base.models import Booking


class QuotaTracker:
    """
    Per-week booking counts derived from a booking set.

    Counts are recomputed from ``bookings`` on every call; nothing is cached,
    so the tracker can never disagree with the bookings it was built from.
    """

    def __init__(self, bookings: Sequence[Booking], max_per_week: int):
        self.bookings = bookings
        self.max_per_week = max_per_week

    def count_for_week(self, week_number: int) -> int:
        return sum(1 for b in self.bookings if b.week_number == week_number)

    def is_exhausted(self, week_number: int) -> bool:
        return self.count_for_week(week_number) >= self.max_per_week
