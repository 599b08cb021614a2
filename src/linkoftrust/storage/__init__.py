"""Linkoftrust Storage - injected key-value stores for presentation state.

Example usage:
    from linkoftrust.storage import JsonFileStore, PreferenceStore, PrefixedStore

    store = PrefixedStore(JsonFileStore(Path("~/.linkoftrust/prefs.json").expanduser()), "testnet")
    prefs = PreferenceStore(store)
    await prefs.set_alias(identity, "alice.testnet")
"""

from .preferences import (
    ALIAS_PREFIX,
    POSITION_PREFIX,
    JsonFileStore,
    KeyValueStore,
    MemoryStore,
    PreferenceStore,
    PrefixedStore,
)

__all__ = [
    "ALIAS_PREFIX",
    "POSITION_PREFIX",
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "PrefixedStore",
    "PreferenceStore",
]
