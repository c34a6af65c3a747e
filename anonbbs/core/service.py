"""
AnonBBS Service Controller

Lifecycle (initialize, pause, resume), the nominal service fee and the
rate limit settings. Every admin operation is gated on the identity that
created the board.
"""

import logging
import threading

from ..db.models import ServiceState, ServiceSettings
from .errors import (
    AlreadyInitializedError,
    InvalidSettingError,
    NotInitializedError,
    OwnerOnlyError,
    ServicePausedError,
)
from .rate_limiter import RateLimiter
from .sequence import IDAllocator

logger = logging.getLogger(__name__)


class ServiceController:
    """
    Administrative state for the board.

    The lifecycle has three states. Writers only see the conflated view
    exposed by ``require_active``: anything other than ACTIVE rejects with
    NotInitializedError (or its ServicePausedError subclass when paused).
    """

    def __init__(
        self,
        admin: str,
        rate_limiter: RateLimiter,
        ids: IDAllocator,
        service_fee: int = 0
    ):
        """
        Initialize controller.

        Args:
            admin: Administrator identity, fixed for the board's lifetime
            rate_limiter: Limiter whose policy this controller manages
            ids: Shared id allocator (read for settings snapshots)
            service_fee: Initial nominal fee
        """
        if not admin:
            raise ValueError("Administrator identity is required")

        self._admin = admin
        self.rate_limiter = rate_limiter
        self.ids = ids
        self._service_fee = service_fee
        self._state = ServiceState.UNINITIALIZED
        self._lock = threading.RLock()

    @property
    def admin(self) -> str:
        return self._admin

    @property
    def state(self) -> ServiceState:
        return self._state

    @property
    def is_initialized(self) -> bool:
        """True only while the board accepts writes."""
        return self._state is ServiceState.ACTIVE

    @property
    def service_fee(self) -> int:
        return self._service_fee

    def is_admin(self, caller: str) -> bool:
        return caller == self._admin

    def _require_admin(self, caller: str, action: str):
        if not self.is_admin(caller):
            logger.warning(f"Rejected non-admin {action}")
            raise OwnerOnlyError(f"Only the administrator may {action}")

    def require_active(self):
        """Raise unless the board is accepting writes."""
        state = self._state
        if state is ServiceState.ACTIVE:
            return
        if state is ServiceState.PAUSED:
            raise ServicePausedError("Service is paused")
        raise NotInitializedError("Service is not initialized")

    def initialize(self, caller: str):
        """One-time switch from UNINITIALIZED to ACTIVE."""
        with self._lock:
            self._require_admin(caller, "initialize")
            if self._state is not ServiceState.UNINITIALIZED:
                raise AlreadyInitializedError("Service already initialized")
            self._state = ServiceState.ACTIVE

        logger.info("Service initialized")

    def pause(self, caller: str):
        """Stop accepting writes. Stored data is untouched; no-op unless active."""
        with self._lock:
            self._require_admin(caller, "pause")
            if self._state is not ServiceState.ACTIVE:
                return
            self._state = ServiceState.PAUSED

        logger.info("Service paused")

    def resume(self, caller: str):
        """
        Accept writes again.

        Like the single readiness flag it replaces, resume also brings an
        uninitialized board up; a later initialize() then reports
        AlreadyInitializedError.
        """
        with self._lock:
            self._require_admin(caller, "resume")
            if self._state is ServiceState.ACTIVE:
                return
            self._state = ServiceState.ACTIVE

        logger.info("Service resumed")

    def update_fee(self, caller: str, new_fee: int):
        """Set the nominal fee. No transfer happens here."""
        with self._lock:
            self._require_admin(caller, "update the fee")
            if new_fee < 0:
                raise InvalidSettingError("Fee cannot be negative")
            self._service_fee = new_fee

        logger.info(f"Service fee set to {new_fee}")

    def update_rate_limits(self, caller: str, window_length: int, max_per_window: int):
        """Replace window length and quota; applies to the next check."""
        with self._lock:
            self._require_admin(caller, "update rate limits")
            if window_length < 1:
                raise InvalidSettingError("Window length must be at least 1 tick")
            if max_per_window < 0:
                raise InvalidSettingError("Posts per window cannot be negative")
            self.rate_limiter.configure(window_length, max_per_window)

    def settings(self) -> ServiceSettings:
        """Return a snapshot of the scalar service state."""
        with self._lock:
            return ServiceSettings(
                state=self._state,
                id_counter=self.ids.peek(),
                service_fee=self._service_fee,
                rate_window_length=self.rate_limiter.window_length,
                max_posts_per_window=self.rate_limiter.max_posts_per_window,
            )
