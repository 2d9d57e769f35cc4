"""In-memory, per-process rate limiting for anonymous screening requests."""

import asyncio
import math
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from app.lib.logger import configure_logger
from app.services.screening.exceptions import RateLimitError

logger = configure_logger(__name__)


@dataclass
class RateLimitRecord:
    count: int
    reset_time: float


@dataclass
class RateLimitResult:
    allowed: bool
    remaining: int
    reset_time: Optional[float] = None


class ScreeningRateLimiter:
    """Fixed-window request counter keyed by client identity.

    Each identity gets ``max_requests`` requests per window; the window starts
    with the first request and is re-armed by the first request after it
    ends. A client can therefore burst up to twice the limit around a window
    boundary.

    ``check`` has no await points, so on a single event loop every call runs
    to completion before another request can observe the same record.
    """

    def __init__(
        self,
        max_requests: int = 5,
        window_seconds: float = 15 * 60,
        sweep_interval_seconds: float = 60,
        clock: Callable[[], float] = time.time,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.sweep_interval_seconds = sweep_interval_seconds
        self._clock = clock
        self._records: Dict[str, RateLimitRecord] = {}
        self._sweep_task: Optional[asyncio.Task] = None

    def __len__(self) -> int:
        return len(self._records)

    def check(self, client_id: str) -> RateLimitResult:
        """Count a request for ``client_id`` and report whether it is allowed."""
        now = self._clock()
        record = self._records.get(client_id)

        if record is None or now > record.reset_time:
            self._records[client_id] = RateLimitRecord(
                count=1, reset_time=now + self.window_seconds
            )
            return RateLimitResult(allowed=True, remaining=self.max_requests - 1)

        if record.count >= self.max_requests:
            return RateLimitResult(
                allowed=False, remaining=0, reset_time=record.reset_time
            )

        record.count += 1
        return RateLimitResult(
            allowed=True, remaining=self.max_requests - record.count
        )

    def peek(self, client_id: str) -> RateLimitResult:
        """Report the quota ``client_id`` would see, without counting a request."""
        record = self._records.get(client_id)
        if record is None or self._clock() > record.reset_time:
            return RateLimitResult(allowed=True, remaining=self.max_requests)

        remaining = max(self.max_requests - record.count, 0)
        return RateLimitResult(
            allowed=remaining > 0, remaining=remaining, reset_time=record.reset_time
        )

    def retry_after(self, reset_time: Optional[float]) -> int:
        """Whole seconds until ``reset_time``, or a full window if unknown."""
        if reset_time is None:
            return int(self.window_seconds)
        return max(1, math.ceil(reset_time - self._clock()))

    def enforce(self, client_id: str) -> RateLimitResult:
        """Like ``check`` but raises RateLimitError when the request is denied."""
        result = self.check(client_id)
        if not result.allowed:
            raise RateLimitError(
                retry_after=self.retry_after(result.reset_time),
                limit=self.max_requests,
            )
        return result

    def sweep_expired(self) -> int:
        """Delete every record whose window has ended."""
        now = self._clock()
        expired = [
            client_id
            for client_id, record in self._records.items()
            if now > record.reset_time
        ]
        for client_id in expired:
            del self._records[client_id]
        if expired:
            logger.debug(
                f"Swept {len(expired)} expired rate limit records",
                extra={"event_type": "rate_limit_sweep", "active": len(self._records)},
            )
        return len(expired)

    async def start(self) -> None:
        """Start the periodic sweep task."""
        if self._sweep_task is None:
            self._sweep_task = asyncio.create_task(self._run_sweep())
            logger.info(
                "Rate limiter sweep task started",
                extra={"interval_seconds": self.sweep_interval_seconds},
            )

    async def stop(self) -> None:
        """Cancel the sweep task and wait for it to finish."""
        if self._sweep_task is None:
            return
        self._sweep_task.cancel()
        try:
            await self._sweep_task
        except asyncio.CancelledError:
            pass
        self._sweep_task = None
        logger.info("Rate limiter sweep task stopped")

    async def _run_sweep(self) -> None:
        while True:
            await asyncio.sleep(self.sweep_interval_seconds)
            try:
                self.sweep_expired()
            except Exception as e:
                logger.error(f"Error in rate limiter sweep task: {str(e)}")
