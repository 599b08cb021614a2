"""In-memory cache of fetched user records.

The repository is the application-level cache that traversals report to.
It is callable with the traversal observer signature, so it can be passed
directly as ``on_node_fetched``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass, field

from .models import Identity, UserRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CachedUser:
    """A cached record and how completely it was fetched."""

    record: UserRecord
    fully_fetched: bool
    updated_at: float  # Unix timestamp


@dataclass
class UserRepository:
    """User records keyed by identity."""

    users: dict[Identity, CachedUser] = field(default_factory=dict)

    def update(self, identity: Identity, record: UserRecord, fully_fetched: bool) -> None:
        """Store or replace the record for ``identity``."""
        self.users[identity] = CachedUser(
            record=record,
            fully_fetched=fully_fetched,
            updated_at=time.time(),
        )

    __call__ = update

    def get(self, identity: Identity) -> CachedUser | None:
        return self.users.get(identity)

    def remove(self, identity: Identity) -> None:
        self.users.pop(identity, None)

    async def fetch(
        self,
        identity: Identity,
        fetch: Callable[[Identity], Awaitable[UserRecord | None]],
    ) -> UserRecord | None:
        """Fetch one record and store it as fully fetched."""
        record = await fetch(identity)
        if record is None:
            return None
        self.update(record.id, record, True)
        logger.debug(f"Fetched user {identity}")
        return record

    def find_by_profile(self, profile: str) -> UserRecord | None:
        """First cached record whose public profile matches, ignoring case."""
        wanted = profile.lower()
        for cached in self.users.values():
            if cached.record.profile.lower() == wanted:
                return cached.record
        return None

    def __contains__(self, identity: object) -> bool:
        return identity in self.users

    def __len__(self) -> int:
        return len(self.users)

    def __iter__(self) -> Iterator[Identity]:
        return iter(self.users)
