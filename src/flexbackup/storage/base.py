"""Key/value storage protocol for persisted backups.

flexbackup does not persist anything itself. Hosts hand it an object that
implements ``KeyValueStorage`` (a browser-style session store, a file, a
cache client, ...). ``InMemoryStorage`` is provided for tests and embedding.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class KeyValueStorage(Protocol):
    """Protocol for string key/value stores.

    Implementations may raise any exception on failure; the storage bridge
    treats every failure as "nothing persisted" and falls back to the state
    it already has.
    """

    def get(self, key: str) -> str | None:
        """Return the value stored under ``key``, or None if absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...

    def remove(self, key: str) -> None:
        """Delete ``key`` if present."""
        ...


class InMemoryStorage:
    """Dict-backed KeyValueStorage.

    Example:
        >>> storage = InMemoryStorage()
        >>> storage.set("session", "{}")
        >>> storage.get("session")
        '{}'
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        logger.debug(f"Stored {len(value)} characters under '{key}'")

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)
