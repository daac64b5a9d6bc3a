# app/services/interview_scheduler_service.py

import logging
from datetime import datetime
from typing import List, Optional

from app.base.config import AppConfig, settings as default_settings
from app.base.errors import InvalidRequest
from app.base.metrics import slot_pages_served_total
from app.base.models import Booking, InterviewerConfig, SlotPage, default_interviewer_config
from app.services.booking_service import BookingArbiter
from app.services.schedule_store import ScheduleStore
from app.services.slot_generator_service import SlotGenerator
from app.services.slot_pagination_service import SlotPaginator
from app.utils.time_utils import Clock, system_clock

logger = logging.getLogger("scheduler")


class InterviewSchedulerService:
    """
    Logical operations of the scheduling engine: availability config,
    paginated slot listing, booking and cancellation for one interviewer.
    Transport-agnostic; the HTTP router is a thin layer over this class.
    """

    def __init__(
        self,
        store: ScheduleStore,
        config: Optional[AppConfig] = None,
        clock: Optional[Clock] = None,
        interviewer_id: Optional[str] = None,
    ):
        self.settings = config or default_settings
        self.store = store
        self.clock = clock or system_clock
        self.interviewer_id = interviewer_id or self.settings.DEFAULT_INTERVIEWER_ID

        self.generator = SlotGenerator(
            timezone_name=self.settings.SCHEDULER_TIMEZONE,
            slot_minutes=self.settings.SLOT_DURATION_MINUTES,
        )
        self.paginator = SlotPaginator(self.generator, horizon_days=self.settings.SLOT_HORIZON_DAYS)
        self.arbiter = BookingArbiter(
            store,
            self.generator,
            self.interviewer_id,
            clock=self.clock,
            strict_slot_validation=self.settings.STRICT_SLOT_VALIDATION,
        )

    # === Configuration ===

    def get_config(self) -> InterviewerConfig:
        return self.store.read_state(self.interviewer_id).config

    def update_config(self, config: InterviewerConfig) -> None:
        with self.store.atomic(self.interviewer_id) as tx:
            tx.replace_config(config)
        logger.info(
            f"[Config] Updated: max/week={config.max_interviews_per_week}, "
            f"days={[r.day_of_week.name for r in config.rules]}"
        )

    def reset(self) -> None:
        """Restore the default availability and drop every booking."""
        with self.store.atomic(self.interviewer_id) as tx:
            removed = tx.delete_all_bookings()
            tx.replace_config(self._default_config())
        logger.warning(f"[Reset] Schedule reset to defaults, {removed} bookings removed")

    def _default_config(self) -> InterviewerConfig:
        return default_interviewer_config(self.settings.DEFAULT_MAX_INTERVIEWS_PER_WEEK)

    # === Slots ===

    def list_slots(self, cursor: Optional[str] = None, limit: Optional[int] = None) -> SlotPage:
        limit = self.settings.DEFAULT_PAGE_LIMIT if limit is None else limit
        state = self.store.read_state(self.interviewer_id)
        page = self.paginator.page(state, cursor, limit, self.clock())
        slot_pages_served_total.inc()
        logger.info(f"[Slots] cursor={cursor} limit={limit} -> {len(page.slots)} slots, has_more={page.has_more}")
        return page

    # === Bookings ===

    def list_bookings(self) -> List[Booking]:
        return self.store.read_state(self.interviewer_id).bookings

    def list_bookings_by_candidate(self, email: str) -> List[Booking]:
        needle = (email or "").strip().lower()
        if not needle:
            raise InvalidRequest("email is required")
        return [b for b in self.list_bookings() if b.candidate_email.strip().lower() == needle]

    def create_booking(self, start_time: datetime, candidate_name: str, candidate_email: str) -> Booking:
        return self.arbiter.commit(start_time, candidate_name, candidate_email)

    def cancel_booking(self, booking_id: str) -> bool:
        return self.arbiter.cancel(booking_id)
