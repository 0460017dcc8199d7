"""
API Middleware.

RequestIDMiddleware tags every request, LatencyMiddleware reports wall time,
ErrorHandlerMiddleware turns the orchestration error taxonomy into JSON
envelopes with a matching HTTP status.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from taskforge.config.errors import ErrorCode, TaskForgeError

logger = logging.getLogger(__name__)

RequestHandler = Callable[[Request], Awaitable[Response]]

_STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.REGISTRATION_FAILED: 409,
    ErrorCode.NO_CANDIDATE: 422,
    # Upstream model or queue gave up
    ErrorCode.PROCESSING_FAILED: 502,
    ErrorCode.QUEUE_EXHAUSTED: 502,
    ErrorCode.OUTPUT_INVALID: 502,
    ErrorCode.MODEL_UNAVAILABLE: 503,
    ErrorCode.TASK_TIMEOUT: 504,
}


def error_code_to_status(code: ErrorCode) -> int:
    """HTTP status for an error code; anything unmapped is a 500."""
    return _STATUS_BY_CODE.get(code, 500)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


def _envelope(error: dict[str, Any], request_id: str, status: int) -> JSONResponse:
    return JSONResponse(status_code=status, content={"error": error, "request_id": request_id})


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Reuse the caller's X-Request-ID or mint one, and echo it back."""

    async def dispatch(self, request: Request, call_next: RequestHandler) -> Response:
        request.state.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        response = await call_next(request)
        response.headers["X-Request-ID"] = request.state.request_id
        return response


class LatencyMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestHandler) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        response.headers["X-Response-Time-Ms"] = f"{elapsed_ms:.2f}"
        logger.info(
            "%s %s -> %d in %.2fms [%s]",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            _request_id(request),
        )
        return response


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Map TaskForgeError to its status; hide everything else behind a 500."""

    async def dispatch(self, request: Request, call_next: RequestHandler) -> Response:
        try:
            return await call_next(request)
        except TaskForgeError as e:
            status = error_code_to_status(e.code)
            log = logger.warning if status < 500 else logger.error
            log("%s on %s: %s [%s]", e.code.value, request.url.path, e.message, _request_id(request))
            return _envelope(e.to_dict(), _request_id(request), status)
        except Exception:
            logger.exception("Unhandled error on %s [%s]", request.url.path, _request_id(request))
            error = {
                "code": ErrorCode.INTERNAL_ERROR.value,
                "message": "Internal server error",
                "details": {},
            }
            return _envelope(error, _request_id(request), 500)
