"""
AnonBBS Identity Fingerprinting

Rate limiting needs a stable per-caller key, but the board should never
hold raw caller identities. Identities are reduced to a keyed
HMAC-SHA256 fingerprint before they reach any store.
"""

import secrets
import logging
from typing import Optional

from cryptography.hazmat.primitives import hashes, hmac

logger = logging.getLogger(__name__)


class IdentityHasher:
    """
    Keyed fingerprinting of caller identities.

    The key lives only in memory unless supplied from configuration, so
    fingerprints cannot be reversed or correlated across processes.
    """

    KEY_LENGTH = 32
    FINGERPRINT_LENGTH = 16  # bytes kept from the digest

    def __init__(self, key: Optional[bytes] = None):
        """
        Initialize hasher.

        Args:
            key: HMAC key; a random key is generated when omitted
        """
        if key is None:
            key = secrets.token_bytes(self.KEY_LENGTH)
        elif len(key) < 16:
            raise ValueError("Identity hash key must be at least 16 bytes")

        self._key = key
        logger.debug("IdentityHasher initialized")

    @classmethod
    def from_hex(cls, key_hex: str) -> "IdentityHasher":
        """Build a hasher from a hex key; empty string means random key."""
        if not key_hex:
            return cls()
        return cls(bytes.fromhex(key_hex))

    def fingerprint(self, identity: str) -> str:
        """Return the hex fingerprint of an identity."""
        h = hmac.HMAC(self._key, hashes.SHA256())
        h.update(identity.encode("utf-8"))
        return h.finalize()[:self.FINGERPRINT_LENGTH].hex()

