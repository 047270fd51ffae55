"""Login throttling keyed by client address."""

import math
import time

import structlog
from limits import parse
from limits.storage import MemoryStorage, Storage
from limits.strategies import FixedWindowRateLimiter

from tasktracker.errors import TooManyRequestsError

logger = structlog.get_logger(__name__)

LOGIN_NAMESPACE = "login"


class LoginRateLimiter:
    """Allows ``attempts`` logins per client within a fixed window.

    A client's window starts at its first attempt. Rejected attempts do not
    extend it.
    """

    def __init__(self, attempts: int, window_seconds: int, storage: Storage | None = None) -> None:
        self.limit = parse(f"{attempts} per {window_seconds} seconds")
        self._limiter = FixedWindowRateLimiter(storage or MemoryStorage())

    def hit(self, client: str) -> None:
        """Count an attempt, raise TooManyRequestsError if the client is over its limit."""
        if self._limiter.hit(self.limit, LOGIN_NAMESPACE, client):
            return

        stats = self._limiter.get_window_stats(self.limit, LOGIN_NAMESPACE, client)
        retry_after = max(math.ceil(stats.reset_time - time.time()), 1)
        logger.warning("rate_limit_exceeded", client=client, retry_after=retry_after)
        raise TooManyRequestsError(retry_after=retry_after)
