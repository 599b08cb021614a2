"""Presentation preferences behind an injected key-value store.

Aliases (the account id a user typed for an identity) and saved node
positions belong to the embedding application, not to the graph engine.
They are kept in whatever ``KeyValueStore`` the application hands in.

Key scheme:
    nearid-<identity>   account id alias
    pos-<identity>      JSON ``{"x": float, "y": float}``
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, runtime_checkable

from ..models import Identity

logger = logging.getLogger(__name__)

ALIAS_PREFIX = "nearid-"
POSITION_PREFIX = "pos-"


# ---------------------------------------------------------------------------
# Store protocol and backends
# ---------------------------------------------------------------------------


@runtime_checkable
class KeyValueStore(Protocol):
    """Async string key-value store."""

    async def get_item(self, key: str) -> str | None: ...

    async def set_item(self, key: str, value: str) -> None: ...

    async def remove_item(self, key: str) -> None: ...


@dataclass
class MemoryStore:
    """Store kept in a dict; lost on exit."""

    data: dict[str, str] = field(default_factory=dict)

    async def get_item(self, key: str) -> str | None:
        return self.data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self.data[key] = value

    async def remove_item(self, key: str) -> None:
        self.data.pop(key, None)


@dataclass
class JsonFileStore:
    """Store persisted as one JSON object in a file.

    The file is read once on first access and rewritten on every change.
    """

    path: Path
    _data: dict[str, str] | None = None
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    def _load(self) -> dict[str, str]:
        if self._data is None:
            if self.path.exists():
                with open(self.path) as f:
                    self._data = json.load(f)
            else:
                self._data = {}
        return self._data

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(self._data, f, indent=2, sort_keys=True)

    async def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    async def set_item(self, key: str, value: str) -> None:
        async with self._lock:
            self._load()[key] = value
            self._save()

    async def remove_item(self, key: str) -> None:
        async with self._lock:
            if self._load().pop(key, None) is not None:
                self._save()


@dataclass
class PrefixedStore:
    """Namespaces another store's keys as ``<prefix>_<key>``."""

    inner: KeyValueStore
    prefix: str

    def _key(self, key: str) -> str:
        return f"{self.prefix}_{key}"

    async def get_item(self, key: str) -> str | None:
        return await self.inner.get_item(self._key(key))

    async def set_item(self, key: str, value: str) -> None:
        await self.inner.set_item(self._key(key), value)

    async def remove_item(self, key: str) -> None:
        await self.inner.remove_item(self._key(key))


# ---------------------------------------------------------------------------
# Typed preferences
# ---------------------------------------------------------------------------


@dataclass
class PreferenceStore:
    """Aliases and node positions on top of a KeyValueStore."""

    store: KeyValueStore = field(default_factory=MemoryStore)

    async def get_alias(self, identity: Identity) -> str | None:
        return await self.store.get_item(ALIAS_PREFIX + identity)

    async def set_alias(self, identity: Identity, account_id: str) -> None:
        await self.store.set_item(ALIAS_PREFIX + identity, account_id)

    async def remove_alias(self, identity: Identity) -> None:
        await self.store.remove_item(ALIAS_PREFIX + identity)

    async def get_position(self, identity: Identity) -> tuple[float, float] | None:
        raw = await self.store.get_item(POSITION_PREFIX + identity)
        if raw is None:
            return None
        try:
            data = json.loads(raw)
            return float(data["x"]), float(data["y"])
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Ignoring unreadable position for {identity}: {e}")
            return None

    async def set_position(self, identity: Identity, x: float, y: float) -> None:
        await self.store.set_item(POSITION_PREFIX + identity, json.dumps({"x": x, "y": y}))

    async def remove_position(self, identity: Identity) -> None:
        await self.store.remove_item(POSITION_PREFIX + identity)
