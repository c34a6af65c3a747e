"""
AnonBBS Reply Threading

Replies to stored messages, with bounded depth and a bounded number of
replies per parent.
"""

import logging
import threading
from collections import defaultdict
from typing import Dict, Optional

from ..db.models import Message
from .errors import (
    InvalidReplyDepthError,
    MessageNotFoundError,
    RateLimitExceededError,
    TooManyRepliesError,
)
from .messages import MessageStore, validate_content

logger = logging.getLogger(__name__)


# Depths 0 (root) through MAX_REPLY_DEPTH - 1 are allowed
MAX_REPLY_DEPTH = 5
MAX_REPLIES = 20


class ReplyThreading:
    """
    Parent/child links layered on the message store.

    Each parent keeps an append-only list of child ids in reply order.
    The list is created on the first reply and never shrinks. All replies
    to one parent are serialized on that parent's lock, which keeps the
    cap check, id allocation and append together.
    """

    def __init__(self, store: MessageStore):
        self.store = store
        self.service = store.service
        self.rate_limiter = store.rate_limiter

        # {parent_id: [child_id, ...]}
        self._replies: Dict[int, list[int]] = {}
        self._parent_locks: Dict[int, threading.Lock] = defaultdict(threading.Lock)
        self._guard = threading.Lock()

    def _lock_for(self, parent_id: int) -> threading.Lock:
        # Only the reply path creates locks, and only for stored parents
        with self._guard:
            return self._parent_locks[parent_id]

    def reply(
        self,
        caller: str,
        tick: int,
        content: str,
        parent_id: int,
        encrypted: bool = False
    ) -> int:
        """
        Reply to an existing message.

        Replies never carry a category.

        Returns:
            Allocated message id

        Raises:
            NotInitializedError, RateLimitExceededError, MessageNotFoundError,
            InvalidReplyDepthError, InvalidLengthError, TooManyRepliesError
        """
        self.service.require_active()

        if not self.rate_limiter.check(caller, tick):
            raise RateLimitExceededError("Post limit reached for this window")

        parent = self.store.get(parent_id)
        if parent is None:
            raise MessageNotFoundError(f"Message {parent_id} not found")

        depth = parent.reply_depth + 1
        if depth >= MAX_REPLY_DEPTH:
            raise InvalidReplyDepthError(
                f"Replies may nest at most {MAX_REPLY_DEPTH - 1} levels"
            )

        validate_content(content)

        with self._lock_for(parent_id):
            children = self._replies.get(parent_id)
            if children is not None and len(children) >= MAX_REPLIES:
                raise TooManyRepliesError(
                    f"Message {parent_id} already has {MAX_REPLIES} replies"
                )

            if not self.rate_limiter.try_consume(caller, tick):
                raise RateLimitExceededError("Post limit reached for this window")

            message_id = self.store.insert(lambda new_id: Message(
                id=new_id,
                content=content,
                timestamp=tick,
                reply_to=parent_id,
                reply_depth=depth,
                encrypted=encrypted,
            ))

            if children is None:
                children = self._replies[parent_id] = []
            children.append(message_id)

        logger.info(f"Reply {message_id} posted to {parent_id} (depth {depth})")
        return message_id

    def get_replies(self, parent_id: int) -> Optional[list[int]]:
        """
        Return child ids in reply order.

        None if no reply was ever made to parent_id.
        """
        # Lists are only appended to, under the parent lock
        children = self._replies.get(parent_id)
        return list(children) if children is not None else None

    def get_depth(self, message_id: int) -> int:
        """
        Return a message's reply depth, or 0 if it does not exist.

        A missing message and a root both report 0; use depth_of() or
        MessageStore.exists() to tell them apart.
        """
        depth = self.depth_of(message_id)
        return depth if depth is not None else 0

    def depth_of(self, message_id: int) -> Optional[int]:
        """Return a message's reply depth, or None if it does not exist."""
        message = self.store.get(message_id)
        return message.reply_depth if message else None

    def get_thread(self, root_id: int) -> list[Message]:
        """
        Return a message and all its descendants, depth first in reply order.

        Raises:
            MessageNotFoundError: root_id does not exist
        """
        root = self.store.get(root_id)
        if root is None:
            raise MessageNotFoundError(f"Message {root_id} not found")

        thread = []
        pending = [root_id]
        while pending:
            message_id = pending.pop()
            thread.extend(self.store.get_many([message_id]))
            children = self.get_replies(message_id) or []
            pending.extend(reversed(children))

        return thread
