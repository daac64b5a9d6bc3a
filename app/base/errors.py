"""Scheduling error taxonomy.

``InvalidRequest`` is a caller bug and is raised before the store is touched.
``ConflictError`` subclasses are expected outcomes of racing booking attempts:
the caller should re-list slots and pick another one. None of them are retried
internally.
"""

from datetime import datetime
from typing import Optional


class SchedulingError(Exception):
    """Base class for every error the scheduling core raises on purpose."""

    code = "scheduling_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"error": self.message, "code": self.code}


class InvalidRequest(SchedulingError):
    code = "invalid_request"


class ConflictError(SchedulingError):
    code = "conflict"


class SlotTakenError(ConflictError):
    code = "slot_taken"

    def __init__(self, start_time: datetime, message: Optional[str] = None):
        self.start_time = start_time
        super().__init__(message or "Slot was just taken by another candidate. Please pick a different slot.")

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["start_time"] = self.start_time.isoformat()
        return payload


class QuotaExceededError(ConflictError):
    code = "quota_exceeded"

    def __init__(self, week_number: int, limit: int):
        self.week_number = week_number
        self.limit = limit
        super().__init__(
            f"Weekly limit of {limit} interviews reached for week {week_number}. "
            "Please choose a slot in a different week."
        )

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["week_number"] = self.week_number
        return payload


class StoreUnavailableError(SchedulingError):
    code = "store_unavailable"


__all__ = [
    "SchedulingError",
    "InvalidRequest",
    "ConflictError",
    "SlotTakenError",
    "QuotaExceededError",
    "StoreUnavailableError",
]
