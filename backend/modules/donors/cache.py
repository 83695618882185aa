"""
Per-session donor profile cache.

Entries are hints, never authority: they may be stale, may belong to a
deleted row, and are always re-resolved from the store when a downstream
write rejects them.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from pydantic import ValidationError as PydanticValidationError

from shared.models import AuthenticatedUser
from modules.profiles.models import DonorProfile

logger = logging.getLogger(__name__)

CacheKey = tuple[str, str]


@dataclass
class _CacheEntry:
    snapshot: dict[str, Any]
    stored_at: float


class DonorProfileCache:
    """
    Donor profiles keyed by (account ID, session ID).

    Snapshots are stored as plain dicts, the way a client session would
    hold them, and re-validated on every read. An entry that no longer
    parses into a DonorProfile with an ID is evicted and reported as a miss.
    """

    def __init__(
        self,
        ttl_seconds: int = 900,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[CacheKey, _CacheEntry] = {}

    @staticmethod
    def _key(account: AuthenticatedUser) -> CacheKey:
        return (account.id, account.session_id or "")

    def get(self, account: AuthenticatedUser) -> Optional[DonorProfile]:
        key = self._key(account)
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._clock() - entry.stored_at >= self._ttl:
            logger.debug(f"Donor cache entry for account {account.id} expired")
            del self._entries[key]
            return None

        try:
            return DonorProfile.model_validate(entry.snapshot)
        except PydanticValidationError:
            logger.warning(f"Evicting malformed donor cache entry for account {account.id}")
            del self._entries[key]
            return None

    def put(self, account: AuthenticatedUser, profile: DonorProfile) -> None:
        self.seed(account, profile.model_dump(mode="json"))

    def seed(self, account: AuthenticatedUser, snapshot: dict[str, Any]) -> None:
        """Store a raw snapshot, e.g. one carried over from a client session."""
        self._purge_expired()
        self._entries[self._key(account)] = _CacheEntry(
            snapshot=dict(snapshot),
            stored_at=self._clock(),
        )

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if now - entry.stored_at >= self._ttl]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug(f"Purged {len(expired)} expired donor cache entries")

    def invalidate(self, account: AuthenticatedUser) -> None:
        self._entries.pop(self._key(account), None)

    def invalidate_account(self, account_id: str) -> int:
        """Drop entries for every session of an account. Returns the count dropped."""
        keys = [key for key in self._entries if key[0] == account_id]
        for key in keys:
            del self._entries[key]
        return len(keys)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
