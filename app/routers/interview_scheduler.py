from fastapi import APIRouter, Depends, Query, Request, status
from typing import List, Optional
import logging

from app.base.config import settings
from app.base.models import (
    Booking,
    CancelBookingResponse,
    CreateBookingRequest,
    InterviewerConfig,
    SlotPage,
    StatusResponse,
)
from app.services.interview_scheduler_service import InterviewSchedulerService

router = APIRouter(tags=["Interview Scheduler"])
logger = logging.getLogger("scheduler")


def get_scheduler(request: Request) -> InterviewSchedulerService:
    return request.app.state.scheduler


# === Interviewer configuration ===

@router.get("/config", response_model=InterviewerConfig)
def get_config(scheduler: InterviewSchedulerService = Depends(get_scheduler)):
    return scheduler.get_config()


@router.put("/config", response_model=StatusResponse)
def update_config(config: InterviewerConfig, scheduler: InterviewSchedulerService = Depends(get_scheduler)):
    """Full replace of the availability rules and weekly cap."""
    scheduler.update_config(config)
    return StatusResponse(status="updated")


@router.post("/reset", response_model=StatusResponse)
def reset_schedule(scheduler: InterviewSchedulerService = Depends(get_scheduler)):
    scheduler.reset()
    return StatusResponse(status="reset")


# === Slots ===

@router.get("/slots", response_model=SlotPage)
def list_slots(
    cursor: Optional[str] = Query(None, description="nextCursor from the previous page"),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
    scheduler: InterviewSchedulerService = Depends(get_scheduler),
):
    """
    Free one-hour slots over the next two weeks, ascending. Pages are not
    snapshotted, so bookings made between two fetches can shift results.
    """
    return scheduler.list_slots(cursor=cursor, limit=limit)


# === Bookings ===

@router.get("/bookings", response_model=List[Booking])
def list_bookings(
    email: Optional[str] = Query(None, description="Only bookings of this candidate (case-insensitive)"),
    scheduler: InterviewSchedulerService = Depends(get_scheduler),
):
    if email is not None:
        return scheduler.list_bookings_by_candidate(email)
    return scheduler.list_bookings()


@router.post("/bookings", response_model=Booking, status_code=status.HTTP_201_CREATED)
def create_booking(req: CreateBookingRequest, scheduler: InterviewSchedulerService = Depends(get_scheduler)):
    logger.info(f"[BookRequest] start={req.start_time.isoformat()} email={req.candidate_email}")
    return scheduler.create_booking(req.start_time, req.candidate_name, req.candidate_email)


@router.delete("/bookings/{booking_id}", response_model=CancelBookingResponse)
def cancel_booking(booking_id: str, scheduler: InterviewSchedulerService = Depends(get_scheduler)):
    removed = scheduler.cancel_booking(booking_id)
    return CancelBookingResponse(status="cancelled" if removed else "not_found", booking_id=booking_id)
