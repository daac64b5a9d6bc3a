"""
AutoSchedule Services Module

Scheduling core: slot generation from weekly availability rules, derived
weekly quotas, cursor pagination over generated slots, and the atomic booking
arbiter that guards against double booking and quota overrun.
"""

# === Storage ===
from .schedule_store import ScheduleStore, ScheduleState, StoreTransaction

# === Slot Generation & Listing ===
from .quota_service import QuotaTracker
from .slot_generator_service import SlotGenerator
from .slot_pagination_service import SlotPaginator

# === Booking ===
from .booking_service import BookingArbiter

# === Facade ===
from .interview_scheduler_service import InterviewSchedulerService

# === Exported Interface ===
__all__ = [
    "ScheduleStore",
    "ScheduleState",
    "StoreTransaction",
    "QuotaTracker",
    "SlotGenerator",
    "SlotPaginator",
    "BookingArbiter",
    "InterviewSchedulerService",
]
