from datetime import datetime
from enum import IntEnum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from app.utils.time_utils import ensure_aware_utc, parse_hhmm


class SchedulingModel(BaseModel):
    # camelCase on the wire and in the persisted record, snake_case in code
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DayOfWeek(IntEnum):
    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6


# === 🗓 Availability ===

class TimeRange(SchedulingModel):
    start: str = Field(..., description="Wall-clock start, HH:MM", examples=["09:00"])
    end: str = Field(..., description="Wall-clock end, HH:MM", examples=["12:00"])

    @field_validator("start", "end")
    @classmethod
    def validate_hhmm(cls, value: str) -> str:
        parse_hhmm(value)
        return value

    @model_validator(mode="after")
    def validate_order(self):
        if parse_hhmm(self.start) >= parse_hhmm(self.end):
            raise ValueError(f"range start {self.start} must be before end {self.end}")
        return self


class AvailabilityRule(SchedulingModel):
    day_of_week: DayOfWeek
    time_ranges: List[TimeRange] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_no_overlap(self):
        ordered = sorted(self.time_ranges, key=lambda r: parse_hhmm(r.start))
        for prev, nxt in zip(ordered, ordered[1:]):
            if parse_hhmm(nxt.start) < parse_hhmm(prev.end):
                raise ValueError(
                    f"overlapping ranges on {self.day_of_week.name}: "
                    f"{prev.start}-{prev.end} and {nxt.start}-{nxt.end}"
                )
        return self


class InterviewerConfig(SchedulingModel):
    max_interviews_per_week: int = Field(..., ge=1)
    rules: List[AvailabilityRule] = Field(default_factory=list)

    @field_validator("rules")
    @classmethod
    def validate_unique_days(cls, rules: List[AvailabilityRule]) -> List[AvailabilityRule]:
        seen = set()
        for rule in rules:
            if rule.day_of_week in seen:
                raise ValueError(f"duplicate rule for {rule.day_of_week.name}")
            seen.add(rule.day_of_week)
        return rules

    def rule_for(self, day_of_week: int) -> Optional[AvailabilityRule]:
        for rule in self.rules:
            if rule.day_of_week == day_of_week:
                return rule
        return None


def default_interviewer_config(max_interviews_per_week: int = 5) -> InterviewerConfig:
    return InterviewerConfig(
        max_interviews_per_week=max_interviews_per_week,
        rules=[
            AvailabilityRule(
                day_of_week=DayOfWeek.MONDAY,
                time_ranges=[TimeRange(start="09:00", end="12:00")],
            ),
            AvailabilityRule(
                day_of_week=DayOfWeek.WEDNESDAY,
                time_ranges=[TimeRange(start="14:00", end="17:00")],
            ),
        ],
    )


# === 📅 Bookings & Slots ===

class Booking(SchedulingModel):
    id: str
    candidate_name: str
    candidate_email: str
    start_time: datetime
    end_time: datetime
    week_number: int

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_utc(cls, value: datetime) -> datetime:
        return ensure_aware_utc(value)


class SlotOption(SchedulingModel):
    start_time: datetime
    end_time: datetime
    is_booked: bool = False


class SlotPage(SchedulingModel):
    slots: List[SlotOption]
    next_cursor: Optional[str] = None
    has_more: bool = False


class CreateBookingRequest(SchedulingModel):
    start_time: datetime = Field(..., description="Slot start, ISO-8601")
    candidate_name: str = Field(..., description="Free-text candidate name")
    candidate_email: str = Field(..., description="Free-text candidate email")


class CancelBookingResponse(SchedulingModel):
    status: str
    booking_id: str


class StatusResponse(SchedulingModel):
    status: str
