import inspect
from datetime import timedelta
from itertools import islice

from app.base.models import DayOfWeek
from app.services.quota_service import QuotaTracker
from app.services.slot_generator_service import SlotGenerator

from conftest import NOW, booking_at, make_config, utc

WINDOW_START = utc(2026, 10, 17)
WINDOW_END = utc(2026, 10, 31)


def generate(config, bookings=(), now=NOW, start=WINDOW_START, end=WINDOW_END, generator=None):
    generator = generator or SlotGenerator()
    quota = QuotaTracker(list(bookings), config.max_interviews_per_week)
    return list(generator.generate(start, end, config, list(bookings), quota, now))


def starts(slots):
    return [s.start_time for s in slots]


def test_default_rules_expand_to_hourly_slots():
    slots = generate(make_config())
    assert starts(slots) == [
        utc(2026, 10, 19, 9), utc(2026, 10, 19, 10), utc(2026, 10, 19, 11),
        utc(2026, 10, 21, 14), utc(2026, 10, 21, 15), utc(2026, 10, 21, 16),
        utc(2026, 10, 26, 9), utc(2026, 10, 26, 10), utc(2026, 10, 26, 11),
        utc(2026, 10, 28, 14), utc(2026, 10, 28, 15), utc(2026, 10, 28, 16),
    ]
    assert all(s.end_time - s.start_time == timedelta(minutes=60) for s in slots)
    assert not any(s.is_booked for s in slots)


def test_trailing_partial_slot_is_dropped():
    config = make_config(rules={DayOfWeek.MONDAY: [("09:00", "10:30")]})
    assert starts(generate(config)) == [utc(2026, 10, 19, 9), utc(2026, 10, 26, 9)]


def test_range_shorter_than_slot_yields_nothing():
    config = make_config(rules={DayOfWeek.MONDAY: [("09:00", "09:45")]})
    assert generate(config) == []


def test_days_without_rule_are_unavailable():
    config = make_config(rules={DayOfWeek.FRIDAY: [("09:00", "10:00")]})
    assert starts(generate(config)) == [utc(2026, 10, 23, 9), utc(2026, 10, 30, 9)]


def test_past_and_present_slots_are_suppressed():
    now = utc(2026, 10, 19, 10)
    slots = generate(make_config(), now=now)
    assert utc(2026, 10, 19, 9) not in starts(slots)
    assert utc(2026, 10, 19, 10) not in starts(slots)  # start == now is not in the future
    assert starts(slots)[0] == utc(2026, 10, 19, 11)
    assert all(s.start_time > now for s in slots)


def test_booked_slot_is_suppressed():
    slots = generate(make_config(), bookings=[booking_at(utc(2026, 10, 19, 10))])
    assert utc(2026, 10, 19, 10) not in starts(slots)
    assert len(slots) == 11


def test_full_week_suppresses_every_day_of_that_week():
    # cap 1, Monday 09:00 of week 43 booked: Wednesday of week 43 disappears too
    slots = generate(make_config(max_per_week=1), bookings=[booking_at(utc(2026, 10, 19, 9))])
    assert starts(slots) == [
        utc(2026, 10, 26, 9), utc(2026, 10, 26, 10), utc(2026, 10, 26, 11),
        utc(2026, 10, 28, 14), utc(2026, 10, 28, 15), utc(2026, 10, 28, 16),
    ]


def test_week_below_cap_keeps_remaining_slots():
    slots = generate(make_config(max_per_week=2), bookings=[booking_at(utc(2026, 10, 19, 9))])
    assert utc(2026, 10, 19, 10) in starts(slots)
    assert utc(2026, 10, 21, 14) in starts(slots)


def test_generation_is_pure():
    config = make_config(max_per_week=2)
    bookings = [booking_at(utc(2026, 10, 21, 15))]
    first = [s.model_dump_json() for s in generate(config, bookings)]
    second = [s.model_dump_json() for s in generate(config, bookings)]
    assert first == second


def test_generation_is_lazy():
    generator = SlotGenerator()
    config = make_config()
    far_future = utc(2100, 1, 1)
    slots = generator.generate(WINDOW_START, far_future, config, [], QuotaTracker([], 5), NOW)
    assert inspect.isgenerator(slots)
    assert starts(islice(slots, 2)) == [utc(2026, 10, 19, 9), utc(2026, 10, 19, 10)]


def test_lower_bound_inside_a_day():
    slots = generate(make_config(), start=utc(2026, 10, 19, 10))
    assert starts(slots)[:2] == [utc(2026, 10, 19, 10), utc(2026, 10, 19, 11)]


def test_ranges_are_visited_in_start_order():
    config = make_config(rules={DayOfWeek.MONDAY: [("13:00", "14:00"), ("09:00", "10:00")]})
    slots = generate(config, end=utc(2026, 10, 19))
    assert starts(slots) == [utc(2026, 10, 19, 9), utc(2026, 10, 19, 13)]


def test_wall_clock_rules_follow_interviewer_timezone():
    generator = SlotGenerator(timezone_name="America/New_York")
    config = make_config(rules={DayOfWeek.MONDAY: [("09:00", "10:00")]})
    slots = generate(config, end=utc(2026, 10, 20), generator=generator)
    assert starts(slots) == [utc(2026, 10, 19, 13)]


def test_is_offered():
    generator = SlotGenerator()
    config = make_config()
    quota = QuotaTracker([], 5)
    assert generator.is_offered(utc(2026, 10, 19, 9), config, [], quota, NOW)
    assert not generator.is_offered(utc(2026, 10, 19, 9, 30), config, [], quota, NOW)
    assert not generator.is_offered(utc(2026, 10, 20, 9), config, [], quota, NOW)
    assert not generator.is_offered(utc(2026, 10, 12, 9), config, [], quota, NOW)
