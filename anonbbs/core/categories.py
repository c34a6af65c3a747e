"""
AnonBBS Category Registry

Advisory set of known category names. Posting does not require a
category to be registered.
"""

import logging
import threading

from .errors import InvalidCategoryError, OwnerOnlyError
from .messages import MAX_CATEGORY_LENGTH
from .service import ServiceController

logger = logging.getLogger(__name__)


class CategoryRegistry:
    """Presence set of category names, written by the administrator only."""

    def __init__(self, service: ServiceController):
        self.service = service
        self._categories: set[str] = set()
        self._lock = threading.Lock()

    def register_category(self, caller: str, name: str) -> bool:
        """
        Register a category name (admin only).

        Returns:
            True if added, False if it was already registered
        """
        if not self.service.is_admin(caller):
            raise OwnerOnlyError("Only the administrator may register categories")

        if not name or len(name) > MAX_CATEGORY_LENGTH:
            raise InvalidCategoryError(
                f"Category name must be 1-{MAX_CATEGORY_LENGTH} characters"
            )

        with self._lock:
            if name in self._categories:
                return False
            self._categories.add(name)

        logger.info(f"Category registered: {name}")
        return True

    def has_category(self, name: str) -> bool:
        return name in self._categories

    def list_categories(self) -> list[str]:
        """Return registered category names, sorted."""
        with self._lock:
            return sorted(self._categories)
