"""
AnonBBS Rate Limiter

Limits how many posts one identity may make per window of logical ticks.
Windows are hard cutoffs: the quota resets completely at each boundary.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .crypto import IdentityHasher

logger = logging.getLogger(__name__)


DEFAULT_WINDOW_LENGTH = 86400
DEFAULT_MAX_POSTS_PER_WINDOW = 10
LOCK_STRIPES = 64


@dataclass(frozen=True)
class RatePolicy:
    """Window length and per-window quota, swapped as one value."""
    window_length: int
    max_posts_per_window: int


class RateLimiter:
    """
    Per-identity post quota over fixed tick windows.

    Counters are keyed by (identity fingerprint, window index) and created
    lazily. A new window index starts at zero, so nothing is ever reset
    explicitly. Check-and-consume for one identity runs under that
    identity's lock stripe.
    """

    def __init__(
        self,
        window_length: int = DEFAULT_WINDOW_LENGTH,
        max_posts_per_window: int = DEFAULT_MAX_POSTS_PER_WINDOW,
        hasher: Optional[IdentityHasher] = None
    ):
        """
        Initialize rate limiter.

        Args:
            window_length: Ticks per window
            max_posts_per_window: Posts allowed per identity per window
            hasher: Identity fingerprinting; a random-keyed one when omitted
        """
        self._policy = RatePolicy(window_length, max_posts_per_window)
        self.hasher = hasher or IdentityHasher()

        # {(fingerprint, window_index): count}
        self._counters: Dict[Tuple[str, int], int] = {}

        # Fingerprints hash onto a fixed set of locks
        self._locks = [threading.Lock() for _ in range(LOCK_STRIPES)]

        logger.debug(f"RateLimiter initialized: {self._policy}")

    @property
    def window_length(self) -> int:
        return self._policy.window_length

    @property
    def max_posts_per_window(self) -> int:
        return self._policy.max_posts_per_window

    def configure(self, window_length: int, max_posts_per_window: int):
        """
        Replace the policy. Existing counters are kept as they are; if the
        window length changes, ticks simply map to different window indexes.
        """
        self._policy = RatePolicy(window_length, max_posts_per_window)
        logger.info(f"Rate limits updated: {self._policy}")

    def window_index(self, tick: int) -> int:
        """Return the window a tick falls into."""
        return tick // self._policy.window_length

    def _lock_for(self, fingerprint: str) -> threading.Lock:
        return self._locks[int(fingerprint[:8], 16) % LOCK_STRIPES]

    def _key(self, identity: str, tick: int) -> Tuple[str, int]:
        return self.hasher.fingerprint(identity), self.window_index(tick)

    def check(self, identity: str, tick: int) -> bool:
        """
        Check whether identity has quota left in the current window.

        Does not consume anything.
        """
        key = self._key(identity, tick)
        with self._lock_for(key[0]):
            return self._counters.get(key, 0) < self._policy.max_posts_per_window

    def consume(self, identity: str, tick: int) -> int:
        """Record one post for identity in the current window; return new count."""
        key = self._key(identity, tick)
        with self._lock_for(key[0]):
            count = self._counters.get(key, 0) + 1
            self._counters[key] = count
        return count

    def try_consume(self, identity: str, tick: int) -> bool:
        """
        Atomically check quota and record one post.

        Returns:
            True if the post was admitted, False if rate limited
        """
        policy = self._policy
        fingerprint = self.hasher.fingerprint(identity)
        key = (fingerprint, tick // policy.window_length)

        with self._lock_for(fingerprint):
            count = self._counters.get(key, 0)
            if count >= policy.max_posts_per_window:
                logger.warning(f"Rate limit exceeded for {fingerprint[:8]} (window {key[1]})")
                return False
            self._counters[key] = count + 1

        return True

    def get_count(self, identity: str, tick: int) -> int:
        """Return posts consumed by identity in the current window."""
        key = self._key(identity, tick)
        with self._lock_for(key[0]):
            return self._counters.get(key, 0)

    def cleanup(self, tick: int) -> int:
        """
        Remove counters for windows before the current one.

        Call periodically; tick must be the current logical tick.

        Returns:
            Number of counters removed
        """
        current = self.window_index(tick)

        stale = [key for key in list(self._counters) if key[1] < current]
        for key in stale:
            with self._lock_for(key[0]):
                self._counters.pop(key, None)

        if stale:
            logger.debug(f"Cleaned up {len(stale)} stale rate limit counters")

        return len(stale)

    def get_stats(self) -> dict:
        """Return rate limiter statistics."""
        keys = list(self._counters)
        identities = len({key[0] for key in keys})
        counters = len(keys)

        return {
            "active_identities": identities,
            "counters": counters,
            "window_length": self._policy.window_length,
            "max_posts_per_window": self._policy.max_posts_per_window,
        }
