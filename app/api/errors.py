"""Exception handlers mapping pipeline errors onto HTTP responses."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.domain.exceptions import AuthError, CityInsightsError, InvalidRequestError, UpstreamError
from app.logging import get_logger

logger = get_logger(__name__, component="api")

UPSTREAM_FAILURE_MESSAGE = "Failed to fetch data from upstream services."
INTERNAL_ERROR_MESSAGE = "Something broke!"


async def handle_invalid_request(request: Request, exc: InvalidRequestError) -> JSONResponse:
    logger.info(
        f"Rejected request: {exc}",
        extra={"event": "api.request.rejected", "reason": exc.reason.value, "path": request.url.path},
    )
    return JSONResponse(status_code=400, content={"error": str(exc)})


async def handle_pipeline_error(request: Request, exc: CityInsightsError) -> JSONResponse:
    extra = {
        "event": "api.request.upstream_failed",
        "error_type": type(exc).__name__,
        "path": request.url.path,
    }
    if isinstance(exc, (AuthError, UpstreamError)):
        extra["reason"] = exc.reason.value
    if isinstance(exc, UpstreamError) and exc.detail:
        extra["detail"] = exc.detail

    logger.error(f"Upstream failure: {exc}", extra=extra)
    return JSONResponse(status_code=502, content={"error": UPSTREAM_FAILURE_MESSAGE})


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.critical(
        f"Unhandled error: {exc}",
        extra={"event": "api.request.failed", "error_type": type(exc).__name__, "path": request.url.path},
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR_MESSAGE})


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the handlers; the most specific exception type wins."""
    app.add_exception_handler(InvalidRequestError, handle_invalid_request)
    app.add_exception_handler(CityInsightsError, handle_pipeline_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
