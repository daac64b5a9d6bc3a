import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

from app.base.config import settings


def get_formatter(use_json: bool, service: str) -> logging.Formatter:
    if use_json:
        return JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={"levelname": "level"},
            static_fields={"service": service, "environment": settings.ENVIRONMENT.lower()},
        )
    return logging.Formatter(
        fmt=f"%(asctime)s | %(levelname)s | %(name)s | [svc={service}] | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

def setup_logger(
    name: str,
    log_file: Optional[str] = None,
    level: Optional[str] = None,
    use_json: Optional[bool] = None,
    service: Optional[str] = None
) -> logging.Logger:
    """
    Sets up a logger with rotating file + stream handler.
    Unset arguments fall back to LOG_LEVEL, ENABLE_JSON_LOGS and SERVICE_NAME.
    """
    level = (level or settings.LOG_LEVEL).upper()
    use_json = settings.ENABLE_JSON_LOGS if use_json is None else use_json
    service = service or settings.SERVICE_NAME

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False  # Avoid double logging in root

    # Clear old handlers
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = get_formatter(use_json, service)

    # === Stream Handler (STDOUT) ===
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    # === File Handler (Rotating) ===
    if log_file:
        log_dir = Path(settings.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(str(log_dir / log_file), maxBytes=10 * 1024 * 1024, backupCount=5)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def init_sentry() -> bool:
    """Forward ERROR records to Sentry when SENTRY_DSN is configured."""
    if not settings.SENTRY_DSN:
        return False

    import sentry_sdk
    from sentry_sdk.integrations.logging import LoggingIntegration

    sentry_logging = LoggingIntegration(
        level=logging.ERROR,
        event_level=logging.ERROR
    )
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT.lower(),
        integrations=[sentry_logging],
        traces_sample_rate=0.05,
        send_default_pii=False
    )
    app_logger.info("[Logging] Sentry integration initialized.")
    return True

# === Preconfigured loggers ===
app_logger = setup_logger("app", log_file="app.log")
scheduler_logger = setup_logger("scheduler", log_file="scheduler.log")
booking_logger = setup_logger("booking", log_file="booking.log")

# Usage:
# logger = logging.getLogger("scheduler")
# logger.info("[Slots] page served", extra={"service": settings.SERVICE_NAME})
