"""Login rate limiting."""

import logging
import time
from collections import deque
from threading import Lock
from typing import Callable, Optional

from app.exceptions import RateLimitError
from app.models.config import RateLimitSettings

logger = logging.getLogger("homelab")


class LoginRateLimiter:
    """
    Sliding-window limit on failed logins per client key.

    Every attempt is counted when it starts. A successful login clears the
    key's history, so only failures remain in the window.
    """

    def __init__(self, settings: Optional[RateLimitSettings] = None, clock: Callable[[], float] = time.monotonic):
        self.settings = settings or RateLimitSettings()
        self._clock = clock
        self._attempts: dict[str, deque[float]] = {}
        self._lock = Lock()

    @staticmethod
    def client_key(ip_address: Optional[str], user_agent: Optional[str]) -> str:
        return f"{ip_address or 'unknown'}:{(user_agent or 'unknown')[:50]}"

    def _sweep(self, now: float) -> None:
        # Timestamps are appended in order, so the newest is last.
        cutoff = now - self.settings.window_seconds
        stale = [key for key, attempts in self._attempts.items() if not attempts or attempts[-1] <= cutoff]
        for key in stale:
            del self._attempts[key]

    def attempt(self, key: str) -> None:
        """
        Check the limit and reserve one attempt for the key.

        Raises:
            RateLimitError: If the key has used up its attempts
        """
        with self._lock:
            now = self._clock()
            self._sweep(now)
            attempts = self._attempts.get(key)
            if attempts is None:
                attempts = self._attempts[key] = deque(maxlen=self.settings.max_attempts)
            cutoff = now - self.settings.window_seconds
            while attempts and attempts[0] <= cutoff:
                attempts.popleft()
            if len(attempts) >= self.settings.max_attempts:
                logger.warning(f"Login rate limit exceeded for {key}")
                raise RateLimitError()
            attempts.append(now)

    def reset(self, key: str) -> None:
        with self._lock:
            self._attempts.pop(key, None)

    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._attempts)
