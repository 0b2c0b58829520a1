import time
from typing import Callable, Final

from cratesapi.logger import log

__all__ = [
    "RATE_LIMIT",
    "RateLimiter",
]


# One request per second is the smallest interval tolerated by the crates.io
# crawler policy, see https://crates.io/data-access
RATE_LIMIT: Final = 1.0


class RateLimiter:
    """
    Enforce a minimum delay between consecutive requests of one client.

    The state is per instance, separate clients or processes do not coordinate.
    Not safe for unsynchronized use from several threads: the check, sleep and
    update sequence of acquire() is not atomic.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._clock = clock
        self._sleep = sleep
        self.last_request: float | None = None

    def acquire(self) -> None:
        """Block until a request may be sent, then record it as sent."""
        if self.last_request is not None:
            elapsed = self._clock() - self.last_request
            while elapsed < RATE_LIMIT:
                remaining = RATE_LIMIT - elapsed
                log.debug("Rate limited, sleeping %.3f seconds", remaining)
                self._sleep(remaining)
                elapsed = self._clock() - self.last_request
        self.last_request = self._clock()
