"""
AnonBBS Message Store

Root message posting and read access to every stored message.
Nothing is ever deleted or edited, so ids below count() always exist.
"""

import logging
import threading
from typing import Callable, Dict, Iterable, Optional

from ..db.models import Message
from .errors import (
    InvalidCategoryError,
    InvalidLengthError,
    InvalidRangeError,
    NoMessagesError,
    RateLimitExceededError,
)
from .rate_limiter import RateLimiter
from .sequence import IDAllocator
from .service import ServiceController

logger = logging.getLogger(__name__)


# Content bounds, in code points
MIN_CONTENT_LENGTH = 10
MAX_CONTENT_LENGTH = 500  # exclusive
MAX_CATEGORY_LENGTH = 50
DEFAULT_LIST_LIMIT = 20


def validate_content(content: str):
    """Raise InvalidLengthError unless MIN <= len(content) < MAX."""
    length = len(content)
    if length < MIN_CONTENT_LENGTH or length >= MAX_CONTENT_LENGTH:
        raise InvalidLengthError(
            f"Content must be {MIN_CONTENT_LENGTH}-{MAX_CONTENT_LENGTH - 1} "
            f"characters (got {length})"
        )


def validate_category(category: Optional[str]):
    """Raise InvalidCategoryError for a category over MAX_CATEGORY_LENGTH."""
    if category is not None and len(category) > MAX_CATEGORY_LENGTH:
        raise InvalidCategoryError(
            f"Category must be at most {MAX_CATEGORY_LENGTH} characters"
        )


class MessageStore:
    """
    Stores messages keyed by allocated id.

    Write path for root posts: service gate, rate limit (post only),
    validation, quota consumption, then id allocation and insert under
    the store lock.
    """

    def __init__(
        self,
        service: ServiceController,
        ids: IDAllocator,
        rate_limiter: RateLimiter
    ):
        self.service = service
        self.ids = ids
        self.rate_limiter = rate_limiter

        self._messages: Dict[int, Message] = {}
        self._lock = threading.Lock()

    # === Writes ===

    def post(
        self,
        caller: str,
        tick: int,
        content: str,
        category: Optional[str] = None,
        encrypted: bool = False
    ) -> int:
        """
        Post a rate-limited root message.

        Args:
            caller: Identity charged for the post; never stored
            tick: Current logical tick
            content: Message text
            category: Optional category tag
            encrypted: Caller-asserted tag, stored as given

        Returns:
            Allocated message id

        Raises:
            NotInitializedError, RateLimitExceededError, InvalidLengthError
        """
        self.service.require_active()

        if not self.rate_limiter.check(caller, tick):
            raise RateLimitExceededError("Post limit reached for this window")

        validate_content(content)
        validate_category(category)

        # Another post by the same caller may have taken the last slot
        # since the check above
        if not self.rate_limiter.try_consume(caller, tick):
            raise RateLimitExceededError("Post limit reached for this window")

        message_id = self.insert(lambda new_id: Message(
            id=new_id,
            content=content,
            timestamp=tick,
            category=category,
            encrypted=encrypted,
        ))

        logger.info(f"Message {message_id} posted")
        return message_id

    def post_plain(self, tick: int, content: str) -> int:
        """
        Post an untagged root message.

        No category, not encrypted, and no rate limiting.
        """
        self.service.require_active()
        validate_content(content)

        message_id = self.insert(
            lambda new_id: Message(id=new_id, content=content, timestamp=tick)
        )

        logger.info(f"Message {message_id} posted (plain)")
        return message_id

    def post_bulk(self, tick: int, content_a: str, content_b: str) -> tuple[int, int]:
        """
        Post two root messages at once, or neither.

        Both contents are validated before any id is allocated. The two ids
        are consecutive. Not rate limited.
        """
        self.service.require_active()
        validate_content(content_a)
        validate_content(content_b)

        with self._lock:
            id_a, id_b = self.ids.next_ids(2)
            self._messages[id_a] = Message(id=id_a, content=content_a, timestamp=tick)
            self._messages[id_b] = Message(id=id_b, content=content_b, timestamp=tick)

        logger.info(f"Messages {id_a}, {id_b} posted (bulk)")
        return id_a, id_b

    def insert(self, build: Callable[[int], Message]) -> int:
        """
        Allocate an id and store the message built for it.

        Allocation and insert happen under the store lock, so readers
        going through count() and last_id() never see an id that is not
        stored yet.
        """
        with self._lock:
            message_id = self.ids.next_id()
            self._messages[message_id] = build(message_id)
        return message_id

    # === Reads ===

    def get(self, message_id: int) -> Optional[Message]:
        """Get message by id."""
        return self._messages.get(message_id)

    def exists(self, message_id: int) -> bool:
        return message_id in self._messages

    def count(self) -> int:
        """Return the next id to be issued."""
        with self._lock:
            return self.ids.peek()

    def last_id(self) -> int:
        """
        Return the most recently allocated id.

        Raises:
            NoMessagesError: nothing was ever posted
        """
        with self._lock:
            issued = self.ids.peek()
        if issued == 0:
            raise NoMessagesError("No messages posted yet")
        return issued - 1

    def count_range(self, start: int, end: int) -> int:
        """
        Return the span ``end - start`` of a valid id range.

        Valid means start <= end and end < count(). Ids are never deleted,
        so the span is exact without consulting storage.
        """
        if start > end or end >= self.count():
            raise InvalidRangeError(f"Invalid range {start}..{end}")
        return end - start

    def list_recent(
        self,
        limit: int = DEFAULT_LIST_LIMIT,
        category: Optional[str] = None
    ) -> list[Message]:
        """
        List root messages, newest first.

        Args:
            limit: Maximum number of messages
            category: Only messages tagged with this category
        """
        result = []
        for message_id in sorted(list(self._messages), reverse=True):
            message = self._messages[message_id]
            if not message.is_root:
                continue
            if category is not None and message.category != category:
                continue
            result.append(message)
            if len(result) >= limit:
                break
        return result

    def get_many(self, message_ids: Iterable[int]) -> list[Message]:
        """Get existing messages for the given ids, in the given order."""
        return [
            self._messages[message_id]
            for message_id in message_ids
            if message_id in self._messages
        ]

    def __len__(self) -> int:
        return len(self._messages)
