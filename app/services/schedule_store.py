# app/services/schedule_store.py

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, Iterator, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from app.base.db import Base, BookingRecord, InterviewerConfigRecord, make_engine
from app.base.errors import SlotTakenError, StoreUnavailableError
from app.base.models import Booking, InterviewerConfig, default_interviewer_config

logger = logging.getLogger("scheduler")


def _to_db(dt: datetime) -> datetime:
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def _from_db(dt: datetime) -> datetime:
    return dt.replace(tzinfo=timezone.utc)


def _booking_from_record(record: BookingRecord) -> Booking:
    return Booking(
        id=record.id,
        candidate_name=record.candidate_name,
        candidate_email=record.candidate_email,
        start_time=_from_db(record.start_time),
        end_time=_from_db(record.end_time),
        week_number=record.week_number,
    )


def _config_from_record(record: InterviewerConfigRecord) -> InterviewerConfig:
    return InterviewerConfig.model_validate(
        {"maxInterviewsPerWeek": record.max_interviews_per_week, "rules": record.rules or []}
    )


def _rules_payload(config: InterviewerConfig) -> list:
    return config.model_dump(mode="json", by_alias=True)["rules"]


@dataclass
class ScheduleState:
    """Read-only view of one interviewer's config and live bookings."""
    config: InterviewerConfig
    bookings: List[Booking] = field(default_factory=list)


class StoreTransaction:
    """
    Operations available inside ``ScheduleStore.atomic``. Everything here runs
    in one database transaction while the interviewer lock is held.
    """

    def __init__(self, session: Session, interviewer_id: str, default_config: Callable[[], InterviewerConfig]):
        self.session = session
        self.interviewer_id = interviewer_id
        self._default_config = default_config

    def get_config(self) -> InterviewerConfig:
        # Row lock on the interviewer (SQLite: the transaction already holds the write lock)
        record = self.session.scalar(
            select(InterviewerConfigRecord)
            .where(InterviewerConfigRecord.interviewer_id == self.interviewer_id)
            .with_for_update()
        )
        if record is None:
            config = self._default_config()
            self.session.add(InterviewerConfigRecord(
                interviewer_id=self.interviewer_id,
                max_interviews_per_week=config.max_interviews_per_week,
                rules=_rules_payload(config),
            ))
            self.session.flush()
            logger.info(f"[Store] Seeded default config for interviewer {self.interviewer_id}")
            return config
        return _config_from_record(record)

    def replace_config(self, config: InterviewerConfig) -> None:
        record = self.session.get(InterviewerConfigRecord, self.interviewer_id)
        if record is None:
            record = InterviewerConfigRecord(interviewer_id=self.interviewer_id)
            self.session.add(record)
        record.max_interviews_per_week = config.max_interviews_per_week
        record.rules = _rules_payload(config)
        self.session.flush()

    def list_bookings(self) -> List[Booking]:
        records = self.session.scalars(
            select(BookingRecord)
            .where(BookingRecord.interviewer_id == self.interviewer_id)
            .order_by(BookingRecord.start_time.asc())
        ).all()
        return [_booking_from_record(r) for r in records]

    def add_booking(self, booking: Booking) -> None:
        self.session.add(BookingRecord(
            id=booking.id,
            interviewer_id=self.interviewer_id,
            candidate_name=booking.candidate_name,
            candidate_email=booking.candidate_email,
            start_time=_to_db(booking.start_time),
            end_time=_to_db(booking.end_time),
            week_number=booking.week_number,
        ))
        try:
            self.session.flush()
        except IntegrityError as e:
            logger.info(f"[Store] Unique constraint rejected booking at {booking.start_time.isoformat()}")
            raise SlotTakenError(booking.start_time) from e

    def delete_booking(self, booking_id: str) -> bool:
        result = self.session.execute(
            delete(BookingRecord).where(
                BookingRecord.id == booking_id,
                BookingRecord.interviewer_id == self.interviewer_id,
            )
        )
        return result.rowcount > 0

    def delete_all_bookings(self) -> int:
        result = self.session.execute(
            delete(BookingRecord).where(BookingRecord.interviewer_id == self.interviewer_id)
        )
        return result.rowcount


class ScheduleStore:
    """
    Durable record store holding ``{config, bookings}`` per interviewer.

    ``atomic()`` is the only way to write: it holds a per-interviewer lock for
    a bounded time and wraps the body in a single transaction, so a
    read-check-write sequence can never interleave with another one. The lock
    only covers this process; stores in other processes sharing the database
    are serialized by the transaction itself (row lock, or ``BEGIN IMMEDIATE``
    on SQLite, see ``make_engine``).
    ``read_state()`` is lock-free and may observe a slightly stale snapshot.
    """

    def __init__(
        self,
        database_url: str,
        lock_timeout: float = 5.0,
        default_config: Optional[Callable[[], InterviewerConfig]] = None,
    ):
        self.database_url = database_url
        self.lock_timeout = lock_timeout
        self._default_config = default_config or default_interviewer_config
        self._engine = None
        self._session_factory: Optional[sessionmaker] = None
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # === Lifecycle ===

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    def open(self) -> "ScheduleStore":
        if self.is_open:
            return self
        self._engine = make_engine(self.database_url)
        Base.metadata.create_all(self._engine)
        self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        logger.info(f"[Store] Opened {self._engine.url.render_as_string(hide_password=True)}")
        return self

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            logger.info("[Store] Closed")
        self._engine = None
        self._session_factory = None

    def _sessions(self) -> sessionmaker:
        if self._session_factory is None:
            raise StoreUnavailableError("Schedule store is not open")
        return self._session_factory

    def _lock_for(self, interviewer_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(interviewer_id)
            if lock is None:
                lock = self._locks[interviewer_id] = threading.Lock()
            return lock

    # === Access ===

    @contextmanager
    def atomic(self, interviewer_id: str) -> Iterator[StoreTransaction]:
        session_factory = self._sessions()
        lock = self._lock_for(interviewer_id)
        if not lock.acquire(timeout=self.lock_timeout):
            logger.warning(f"[Store] Lock wait for interviewer {interviewer_id} exceeded {self.lock_timeout}s")
            raise StoreUnavailableError("Schedule store is busy, try again shortly")
        try:
            with session_factory() as session, session.begin():
                yield StoreTransaction(session, interviewer_id, self._default_config)
        finally:
            lock.release()

    def read_state(self, interviewer_id: str) -> ScheduleState:
        with self._sessions()() as session:
            record = session.get(InterviewerConfigRecord, interviewer_id)
            config = _config_from_record(record) if record is not None else self._default_config()
            records = session.scalars(
                select(BookingRecord)
                .where(BookingRecord.interviewer_id == interviewer_id)
                .order_by(BookingRecord.start_time.asc())
            ).all()
            return ScheduleState(config=config, bookings=[_booking_from_record(r) for r in records])
