"""
AnonBBS Main Board Class

Owns every store and exposes the public operations. Caller identity and
the logical tick come from outside on every call; the board never
resolves identities or advances the clock itself.
"""

import logging
import threading
from collections import Counter
from typing import Callable, Optional, TypeVar

from ..config import Config
from ..db.models import Message, ServiceSettings
from .categories import CategoryRegistry
from .crypto import IdentityHasher
from .errors import BBSError
from .messages import MessageStore
from .rate_limiter import RateLimiter
from .sequence import IDAllocator
from .service import ServiceController
from .threads import ReplyThreading

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AnonBBS:
    """
    Main AnonBBS class - ties the board components together.

    Responsibilities:
    - Build the id sequence, rate limiter, stores and controller from config
    - Route public operations to the owning component
    - Keep simple operation statistics
    """

    def __init__(self, config: Config):
        """
        Initialize AnonBBS with configuration.

        Args:
            config: Loaded configuration object
        """
        if not config.bbs.admin:
            raise ValueError("bbs.admin must be configured")

        self.config = config

        self.ids = IDAllocator()
        self.rate_limiter = RateLimiter(
            window_length=config.rate_limits.window_length,
            max_posts_per_window=config.rate_limits.max_posts_per_window,
            hasher=IdentityHasher.from_hex(config.privacy.identity_hash_key)
        )
        self.service = ServiceController(
            admin=config.bbs.admin,
            rate_limiter=self.rate_limiter,
            ids=self.ids,
            service_fee=config.fees.service_fee
        )
        self.messages = MessageStore(self.service, self.ids, self.rate_limiter)
        self.threads = ReplyThreading(self.messages)
        self.categories = CategoryRegistry(self.service)

        # Statistics
        self.stats = BBSStats()

        logger.info(f"AnonBBS created: {config.bbs.name}")

    def _write(self, kind: str, operation: Callable[[], T]) -> T:
        """Run a write, counting successes and rejections."""
        try:
            result = operation()
        except BBSError as e:
            self.stats.record_rejected(e.code)
            logger.debug(f"{kind} rejected: {e.code}")
            raise
        self.stats.record_accepted(kind)
        return result

    # === Administration ===

    def initialize(self, caller: str):
        self.service.initialize(caller)

    def pause(self, caller: str):
        self.service.pause(caller)

    def resume(self, caller: str):
        self.service.resume(caller)

    def update_fee(self, caller: str, new_fee: int):
        self.service.update_fee(caller, new_fee)

    def update_rate_limits(self, caller: str, window_length: int, max_per_window: int):
        self.service.update_rate_limits(caller, window_length, max_per_window)

    def register_category(self, caller: str, name: str) -> bool:
        return self.categories.register_category(caller, name)

    @property
    def service_fee(self) -> int:
        return self.service.service_fee

    @property
    def is_initialized(self) -> bool:
        return self.service.is_initialized

    def settings(self) -> ServiceSettings:
        return self.service.settings()

    # === Posting ===

    def post(
        self,
        caller: str,
        tick: int,
        content: str,
        category: Optional[str] = None,
        encrypted: bool = False
    ) -> int:
        return self._write(
            "post",
            lambda: self.messages.post(caller, tick, content, category, encrypted)
        )

    def post_plain(self, tick: int, content: str) -> int:
        return self._write("post_plain", lambda: self.messages.post_plain(tick, content))

    def post_bulk(self, tick: int, content_a: str, content_b: str) -> tuple[int, int]:
        return self._write(
            "post_bulk",
            lambda: self.messages.post_bulk(tick, content_a, content_b)
        )

    def reply(
        self,
        caller: str,
        tick: int,
        content: str,
        parent_id: int,
        encrypted: bool = False
    ) -> int:
        return self._write(
            "reply",
            lambda: self.threads.reply(caller, tick, content, parent_id, encrypted)
        )

    # === Reading ===

    def get(self, message_id: int) -> Optional[Message]:
        return self.messages.get(message_id)

    def exists(self, message_id: int) -> bool:
        return self.messages.exists(message_id)

    def count(self) -> int:
        return self.messages.count()

    def last_id(self) -> int:
        return self.messages.last_id()

    def count_range(self, start: int, end: int) -> int:
        return self.messages.count_range(start, end)

    def list_recent(self, limit: int = 20, category: Optional[str] = None) -> list[Message]:
        return self.messages.list_recent(limit, category)

    def get_replies(self, parent_id: int) -> Optional[list[int]]:
        return self.threads.get_replies(parent_id)

    def get_depth(self, message_id: int) -> int:
        return self.threads.get_depth(message_id)

    def depth_of(self, message_id: int) -> Optional[int]:
        return self.threads.depth_of(message_id)

    def get_thread(self, root_id: int) -> list[Message]:
        return self.threads.get_thread(root_id)

    def has_category(self, name: str) -> bool:
        return self.categories.has_category(name)

    def list_categories(self) -> list[str]:
        return self.categories.list_categories()

    def get_rate_count(self, caller: str, tick: int) -> int:
        """Posts consumed by caller in the window containing tick."""
        return self.rate_limiter.get_count(caller, tick)

    # === Maintenance ===

    def cleanup(self, tick: int) -> int:
        """Drop rate limit counters from past windows."""
        return self.rate_limiter.cleanup(tick)

    def get_stats(self) -> dict:
        """Return board statistics."""
        return {
            "name": self.config.bbs.name,
            "state": self.service.state.value,
            "messages": len(self.messages),
            "next_id": self.ids.peek(),
            "service_fee": self.service.service_fee,
            "categories": len(self.categories.list_categories()),
            **self.stats.snapshot(),
            "rate_limiter": self.rate_limiter.get_stats(),
        }


class BBSStats:
    """Statistics tracking for the board."""

    def __init__(self):
        self.accepted: Counter = Counter()
        self.rejected: Counter = Counter()
        self._lock = threading.Lock()

    def record_accepted(self, kind: str):
        with self._lock:
            self.accepted[kind] += 1

    def record_rejected(self, code: str):
        with self._lock:
            self.rejected[code] += 1

    def snapshot(self) -> dict:
        """Copy both counters at one instant."""
        with self._lock:
            return {
                "accepted": dict(self.accepted),
                "rejected": dict(self.rejected),
            }

    def __str__(self) -> str:
        counts = self.snapshot()
        return (
            f"accepted={sum(counts['accepted'].values())}, "
            f"rejected={sum(counts['rejected'].values())}"
        )
