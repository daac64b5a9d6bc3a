# app/base/db.py

from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Integer,
    String,
    UniqueConstraint,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow_naive() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class InterviewerConfigRecord(Base):
    __tablename__ = "interviewer_configs"

    interviewer_id = Column(String, primary_key=True)
    max_interviews_per_week = Column(Integer, nullable=False)
    rules = Column(JSON, nullable=False, default=list)  # [{dayOfWeek, timeRanges: [{start, end}]}]
    updated_at = Column(DateTime, nullable=False, default=utcnow_naive, onupdate=utcnow_naive)


class BookingRecord(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        # last line of defence against double booking
        UniqueConstraint("interviewer_id", "start_time", name="uq_bookings_interviewer_start"),
    )

    id = Column(String, primary_key=True, index=True)
    interviewer_id = Column(String, nullable=False, index=True)
    candidate_name = Column(String, nullable=False)
    candidate_email = Column(String, nullable=False, index=True)
    start_time = Column(DateTime, nullable=False)  # naive UTC
    end_time = Column(DateTime, nullable=False)  # naive UTC
    week_number = Column(Integer, nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow_naive)


def make_engine(database_url: str) -> Engine:
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, future=True)

    engine = create_engine(
        database_url,
        connect_args={"check_same_thread": False, "timeout": 30},
        future=True,
    )

    # pysqlite defers BEGIN to the first write. Every transaction here opens
    # holding the database write lock instead, across processes too.
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine
