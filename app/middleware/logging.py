import logging
import time
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.lib.logger import configure_logger
from app.services.screening.identity import derive_client_identity, merge_headers

logger = configure_logger(__name__)


def quota_state(response: Response) -> Optional[str]:
    """``remaining/limit`` for anonymous screening responses, else None."""
    limit = response.headers.get("x-ratelimit-limit")
    if limit is None:
        return None
    return f"{response.headers.get('x-ratelimit-remaining', '?')}/{limit}"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Access log with the caller's rate-limit key and anonymous quota.

    Rate-limited requests are tagged ``rate_limited``; 5xx responses log at
    WARNING.
    """

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

        status = response.status_code
        if status == 429:
            event_type = "rate_limited"
        elif status >= 500:
            event_type = "request_failed"
        else:
            event_type = "http_request"

        logger.log(
            logging.WARNING if status >= 500 else logging.INFO,
            f"{'✓' if status < 400 else '✗'} {request.method} {request.url.path}",
            extra={
                "event_type": event_type,
                "request": {"method": request.method, "path": request.url.path},
                "response": {"status_code": status, "process_time_ms": elapsed_ms},
                "client_id": derive_client_identity(
                    merge_headers(request.headers.items()),
                    request.client.host if request.client else None,
                ),
                "quota": quota_state(response),
            },
        )
        return response
