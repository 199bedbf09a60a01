"""
Time-bounded cache for rendered sitemap XML.
"""

import time
from typing import Callable, Optional


class RenderCache:
    """
    Holds one rendered document for ``ttl`` seconds.
    A ttl of 0 disables caching: ``get`` always misses.
    """

    def __init__(self, ttl: float = 0, clock: Callable[[], float] = time.time):
        self.ttl = ttl or 0
        self._clock = clock
        self._value = ""
        self._set_at: Optional[float] = None

    def is_valid(self) -> bool:
        if not self.ttl or not self._value or self._set_at is None:
            return False
        return self._set_at + self.ttl >= self._clock()

    def get(self) -> Optional[str]:
        """Cached value, or None when empty or expired."""
        if self.is_valid():
            return self._value
        return None

    def set(self, value: str) -> str:
        self._value = value
        self._set_at = self._clock()
        return value

    def invalidate(self):
        self._value = ""
        self._set_at = None
