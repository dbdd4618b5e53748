"""FastAPI exception handlers producing ``{"error": ...}`` bodies."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from propr.api.responses import PrettyJSONResponse
from propr.errors.exceptions import ProPRError

logger = logging.getLogger(__name__)


def error_response(request: Request, status_code: int, message: str, code: str) -> PrettyJSONResponse:
    trace_id = getattr(request.state, "trace_id", "unknown")
    return PrettyJSONResponse(
        status_code=status_code,
        content={"error": message, "code": code, "traceId": trace_id},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all custom exception handlers on the FastAPI app."""

    @app.exception_handler(ProPRError)
    async def propr_error_handler(request: Request, exc: ProPRError):
        if exc.status_code == 401:
            logger.warning(
                "Rejected %s %s: %s",
                request.method, request.url.path, exc.code,
            )
        return error_response(request, exc.status_code, exc.message, exc.code)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # Unknown routes and unsupported methods look the same to callers
        if exc.status_code in (404, 405):
            return error_response(request, 404, "Not found", "NOT_FOUND")
        return error_response(request, exc.status_code, str(exc.detail), "HTTP_ERROR")

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        fields = sorted({str(err["loc"][-1]) for err in exc.errors() if err.get("loc")})
        return error_response(
            request, 422, f"Invalid request: {', '.join(fields) or 'malformed input'}", "VALIDATION_ERROR",
        )
