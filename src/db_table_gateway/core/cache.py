"""Time-based cache for a table record count."""

import time
from typing import Callable, Optional

from db_table_gateway.models.cache import CachePolicy

Clock = Callable[[], float]


class RecordCountCache:
    """Holds the last known record count until the policy lifetime elapses.

    Not synchronized; meant for a single caller.
    """

    def __init__(
        self,
        policy: Optional[CachePolicy] = None,
        clock: Clock = time.monotonic,
    ):
        """
        Initialize the cache.

        Args:
            policy: Expiration policy (default: always expired)
            clock: Source of the current time in seconds
        """
        self.policy = policy or CachePolicy()
        self.clock = clock
        self._count: Optional[int] = None
        self._cached_at = 0.0

    def get(self) -> Optional[int]:
        """Return the cached count, or None if it is missing or expired."""
        if self._count is None:
            return None
        if self._cached_at > self.clock() - self.policy.lifetime:
            return self._count
        return None

    def store(self, count: int) -> None:
        self._count = count
        self._cached_at = self.clock()

    def invalidate(self) -> None:
        self._count = None
        self._cached_at = self.clock()
