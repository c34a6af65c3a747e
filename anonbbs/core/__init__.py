"""AnonBBS Core Module - Board, stores, rate limiting and threading."""

from .bbs import AnonBBS
from .categories import CategoryRegistry
from .crypto import IdentityHasher
from .messages import MessageStore
from .rate_limiter import RateLimiter
from .sequence import IDAllocator
from .service import ServiceController
from .threads import ReplyThreading

__all__ = [
    "AnonBBS",
    "CategoryRegistry",
    "IdentityHasher",
    "MessageStore",
    "RateLimiter",
    "IDAllocator",
    "ServiceController",
    "ReplyThreading",
]
