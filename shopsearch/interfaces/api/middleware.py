"""
API Middleware - Search request tracing and taxonomy error responses.

Provides:
- SearchTraceMiddleware: request id, latency and the search sequence the
  route reports, logged once per request with the query text
- ErrorHandlerMiddleware: ShopSearchError -> JSON body; backend and storage
  outages are marked retryable and carry Retry-After
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from shopsearch.config.errors import ErrorCode, ShopSearchError

logger = logging.getLogger(__name__)

SEQUENCE_HEADER = "X-Search-Sequence"
CACHE_HEADER = "X-Search-Cache"
RETRY_AFTER_SECONDS = 5

STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.SEARCH_INVALID_QUERY: 400,
    ErrorCode.SEARCH_REMOTE_UNAVAILABLE: 503,
    ErrorCode.STORAGE_READ_FAILED: 503,
    ErrorCode.STORAGE_WRITE_FAILED: 503,
}
RETRYABLE_CODES = frozenset(
    {
        ErrorCode.SEARCH_REMOTE_UNAVAILABLE,
        ErrorCode.STORAGE_READ_FAILED,
        ErrorCode.STORAGE_WRITE_FAILED,
    }
)

CallNext = Callable[[Request], Awaitable[Response]]


class SearchTraceMiddleware(BaseHTTPMiddleware):
    """Tag requests with an id and log each search with its latency."""

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()

        response = await call_next(request)

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time-Ms"] = f"{elapsed_ms:.2f}"

        logger.info(
            "%s %s q=%r status=%d seq=%s cache=%s latency_ms=%.2f request_id=%s",
            request.method,
            request.url.path,
            request.query_params.get("q", ""),
            response.status_code,
            response.headers.get(SEQUENCE_HEADER, "-"),
            response.headers.get(CACHE_HEADER, "-"),
            elapsed_ms,
            request_id,
        )
        return response


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Convert ShopSearchError (and anything unexpected) to a JSON error body."""

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        try:
            return await call_next(request)
        except ShopSearchError as e:
            return error_response(request, e)
        except Exception:
            logger.exception(
                "Unhandled error on %s request_id=%s",
                request.url.path,
                getattr(request.state, "request_id", "unknown"),
            )
            return error_response(
                request, ShopSearchError(ErrorCode.INTERNAL_ERROR, "Internal server error")
            )


def error_response(request: Request, error: ShopSearchError) -> JSONResponse:
    """Build the error body; retryable outages get a Retry-After hint."""
    request_id = getattr(request.state, "request_id", "unknown")
    status = STATUS_BY_CODE.get(error.code, 500)
    retryable = error.code in RETRYABLE_CODES

    if status < 500:
        logger.warning("%s on %s: %s", error.code.value, request.url.path, error.message)
    elif error.code != ErrorCode.INTERNAL_ERROR:
        logger.error(
            "%s on %s: %s details=%s request_id=%s",
            error.code.value,
            request.url.path,
            error.message,
            error.details,
            request_id,
        )

    headers = {"Retry-After": str(RETRY_AFTER_SECONDS)} if retryable else None
    return JSONResponse(
        status_code=status,
        content={"error": error.to_dict(), "retryable": retryable, "request_id": request_id},
        headers=headers,
    )
