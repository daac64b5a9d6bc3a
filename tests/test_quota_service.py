from app.services.quota_service import QuotaTracker

from conftest import booking_at, utc


def test_counts_are_derived_from_current_bookings():
    bookings = [booking_at(utc(2026, 10, 19, 9), "a"), booking_at(utc(2026, 10, 21, 14), "b")]
    quota = QuotaTracker(bookings, max_per_week=2)
    assert quota.count_for_week(43) == 2
    assert quota.count_for_week(44) == 0
    assert quota.is_exhausted(43)
    assert not quota.is_exhausted(44)

    # no cached counter: removing a booking is reflected immediately
    bookings.pop()
    assert quota.count_for_week(43) == 1
    assert not quota.is_exhausted(43)
