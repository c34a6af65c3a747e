"""
AnonBBS Data Models

Dataclasses representing stored entities.
"""

from dataclasses import dataclass
from typing import Optional
from enum import Enum


class ServiceState(Enum):
    """Service lifecycle enumeration."""
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    PAUSED = "paused"


@dataclass(frozen=True)
class Message:
    """
    Bulletin message.

    There is no author field to fill in: ``sender`` is always None.
    """
    id: int
    content: str
    timestamp: int  # logical tick at creation
    category: Optional[str] = None
    reply_to: Optional[int] = None
    reply_depth: int = 0
    encrypted: bool = False

    @property
    def sender(self) -> None:
        return None

    @property
    def is_root(self) -> bool:
        return self.reply_to is None


@dataclass(frozen=True)
class ServiceSettings:
    """Snapshot of the service scalar state."""
    state: ServiceState
    id_counter: int
    service_fee: int
    rate_window_length: int
    max_posts_per_window: int

    @property
    def initialized(self) -> bool:
        return self.state is ServiceState.ACTIVE
