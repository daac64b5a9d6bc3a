from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request, Security, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import APIKeyHeader
from prometheus_fastapi_instrumentator import Instrumentator

from app.base.config import settings
from app.base.error_handlers import register_exception_handlers
from app.base.logging_config import app_logger as logger, init_sentry
from app.base.models import default_interviewer_config
from app.routers import interview_scheduler
from app.services.interview_scheduler_service import InterviewSchedulerService
from app.services.schedule_store import ScheduleStore
from app.utils.time_utils import Clock

# --- API key header config ---
api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)

def verify_api_key(key: str = Security(api_key_header)):
    if settings.ENABLE_API_KEY_SECURITY and key != settings.API_KEY:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid or missing API key")


def build_store() -> ScheduleStore:
    return ScheduleStore(
        settings.DATABASE_URL,
        lock_timeout=settings.STORE_LOCK_TIMEOUT_SECONDS,
        default_config=lambda: default_interviewer_config(settings.DEFAULT_MAX_INTERVIEWS_PER_WEEK),
    )


def create_app(store: Optional[ScheduleStore] = None, clock: Optional[Clock] = None) -> FastAPI:
    store = store or build_store()

    # --- Store lifecycle: opened at startup, closed at shutdown ---
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_sentry()
        store.open()
        app.state.scheduler = InterviewSchedulerService(store, config=settings, clock=clock)
        logger.info(f"🚀 {settings.PROJECT_NAME} started ({settings.ENVIRONMENT})")
        try:
            yield
        finally:
            store.close()
            logger.info(f"🛑 {settings.PROJECT_NAME} stopped")

    # --- FastAPI app instance ---
    app = FastAPI(
        title="AutoSchedule Interview Scheduling API",
        version=settings.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # --- CORS config ---
    origins = [
        "http://localhost:3000",     # Local React dev
    ]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Prometheus metrics ---
    if settings.ENABLE_PROMETHEUS:
        Instrumentator().instrument(app).expose(app)

    # --- Logging middleware ---
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info(f"📥 {request.method} request to {request.url}")
        response = await call_next(request)
        logger.info(f"📤 Response: {response.status_code} for {request.url}")
        return response

    register_exception_handlers(app)

    # --- API Routers ---
    app.include_router(
        interview_scheduler.router,
        prefix="/calendar",
        tags=["Calendar"],
        dependencies=[Depends(verify_api_key)],
    )

    # --- System endpoints ---
    @app.get("/health", tags=["System"])
    def health_check():
        return {"status": "ok" if store.is_open else "starting"}

    @app.get("/version", tags=["System"])
    def version_check():
        return {
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
            "timezone": settings.SCHEDULER_TIMEZONE,
        }

    return app


app = create_app()
