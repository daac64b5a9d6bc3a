from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import traceback

from app.base.errors import ConflictError, InvalidRequest, StoreUnavailableError
from app.base.metrics import scheduler_exception_counter

logger = logging.getLogger("app")

def register_exception_handlers(app):
    @app.exception_handler(InvalidRequest)
    async def invalid_request_handler(request: Request, exc: InvalidRequest):
        logger.warning(f"[InvalidRequest] {exc.message} | Path={request.url.path}")
        scheduler_exception_counter.labels(type="invalid_request").inc()
        return JSONResponse(status_code=422, content=exc.to_dict())

    @app.exception_handler(ConflictError)
    async def conflict_handler(request: Request, exc: ConflictError):
        # expected outcome of a race, not a fault
        logger.info(f"[Conflict] {exc.code} | Path={request.url.path}")
        scheduler_exception_counter.labels(type=exc.code).inc()
        return JSONResponse(status_code=409, content=exc.to_dict())

    @app.exception_handler(StoreUnavailableError)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
        logger.warning(f"[StoreUnavailable] {exc.message} | Path={request.url.path}")
        scheduler_exception_counter.labels(type="store_unavailable").inc()
        return JSONResponse(status_code=503, content=exc.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(f"[HTTPException] {exc.detail} | Path={request.url.path}")
        scheduler_exception_counter.labels(type="http").inc()
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail, "status_code": exc.status_code},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"[ValidationError] Path={request.url.path} | {exc.errors()}")
        scheduler_exception_counter.labels(type="validation").inc()
        return JSONResponse(
            status_code=422,
            content={"error": "Invalid request parameters", "details": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"[UnhandledError] {str(exc)}\n{traceback.format_exc()}")
        scheduler_exception_counter.labels(type="unhandled").inc()
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
        )
