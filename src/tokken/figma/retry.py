"""Shared retry policy for design-tool API calls."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TypeVar

from tokken.core.errors import FigmaAPIError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


@dataclass
class RetryPolicy:
    """
    Retry transient API failures with linear backoff.

    Rate limiting (429) waits ``base_delay * attempt * 2`` seconds; server
    errors (5xx) wait ``base_delay * attempt``. Any other failure, including
    transport errors, is raised on the first attempt. After ``max_attempts``
    the last error is re-raised.

    ``sleep`` is injectable so tests do not wait.
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    sleep: Sleep = field(default=asyncio.sleep, repr=False)

    def delay_for(self, error: FigmaAPIError, attempt: int) -> float | None:
        """Seconds to wait before retrying after ``attempt`` (1-based), or None."""
        if not error.is_transient:
            return None
        if error.status_code == 429:
            return self.base_delay * attempt * 2
        return self.base_delay * attempt

    async def run(self, call: Callable[[], Awaitable[T]], description: str = "request") -> T:
        attempt = 1
        while True:
            try:
                return await call()
            except FigmaAPIError as e:
                delay = self.delay_for(e, attempt)
                if delay is None or attempt >= self.max_attempts:
                    raise
                logger.warning(
                    "%s failed with status %s, retrying in %.1fs (attempt %d/%d)",
                    description,
                    e.status_code,
                    delay,
                    attempt,
                    self.max_attempts,
                )
                await self.sleep(delay)
                attempt += 1
