"""Bridges between the backup engine and a key/value storage.

Backups are stored as JSON text. Loading never lets a persistence failure
escape: a missing key, an unreadable store, malformed JSON or a codec that
chokes on corrupt data all leave the caller with the state it already had.
Codec tree configuration errors (cycles, unknown dependencies) still raise,
since they would break every load, persisted or not.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from typing import Any

from flexbackup.backup import CodecTree, create_backup, load_backup
from flexbackup.errors import ConfigurationError, StorageError
from flexbackup.storage.base import KeyValueStorage
from flexbackup.undo import UndoableState

logger = logging.getLogger(__name__)


def save_to_storage(
    storage: KeyValueStorage,
    key: str,
    state: Mapping[str, Any],
    tree: CodecTree,
) -> None:
    """Save a backup of ``state`` to ``storage`` under ``key``.

    Args:
        storage: Storage to save to.
        key: Key to save it under.
        state: State to back up.
        tree: Codec tree to use when saving.

    Raises:
        StorageError: If the backup cannot be created, serialized or written.
        ConfigurationError: If ``tree`` itself is unusable.
    """
    try:
        backup = create_backup(state, tree)
    except ConfigurationError:
        raise
    except Exception as e:
        raise StorageError(
            message=f"Could not back up state for '{key}': {e}",
            storage_key=key,
            cause=e,
        ) from e

    try:
        payload = json.dumps(backup)
    except (TypeError, ValueError) as e:
        raise StorageError(
            message=f"Backup for '{key}' is not JSON serializable: {e}",
            storage_key=key,
            cause=e,
        ) from e

    try:
        storage.set(key, payload)
    except Exception as e:
        raise StorageError(
            message=f"Could not write backup to '{key}': {e}",
            storage_key=key,
            cause=e,
        ) from e


def load_from_storage(
    state: Mapping[str, Any],
    storage: KeyValueStorage,
    key: str,
    tree: CodecTree,
) -> Mapping[str, Any]:
    """Load a state saved with ``save_to_storage``.

    Args:
        state: Existing state; returned unchanged when nothing can be loaded.
        storage: Storage to load from.
        key: Storage key.
        tree: Codec tree the backup was saved with.

    Raises:
        ConfigurationError: If ``tree`` itself is unusable.
    """
    try:
        payload = storage.get(key)
    except Exception as e:
        logger.error(f"Error reading state from storage key {key}: {e}")
        return state

    if not payload:
        logger.debug(f"No backup stored under '{key}'")
        return state

    try:
        backup = json.loads(payload)
    except ValueError as e:
        logger.error(f"Error parsing state from storage key {key}: {e}")
        return state

    if not isinstance(backup, dict):
        logger.error(f"Backup under storage key {key} is not an object; ignoring it")
        return state

    try:
        return load_backup(state, tree, backup)
    except ConfigurationError:
        raise
    except Exception as e:
        logger.error(f"Error loading state from storage key {key}: {e}")
        return state


class PersistingTransition:
    """Transition wrapper that saves a backup after every call.

    Wraps any ``(state, action) -> state`` function, including an
    ``UndoableTransition`` (its envelope's host state is what gets saved).
    Save failures are logged and never interrupt the transition.

    Example:
        >>> persist = PersistingTransition(undoable, tree, storage, "session")
        >>> env = persist(None, "init")
    """

    def __init__(
        self,
        transition: Callable[[Any, Any], Any],
        tree: CodecTree,
        storage: KeyValueStorage,
        key: str,
    ) -> None:
        self.transition = transition
        self.tree = tree
        self.storage = storage
        self.key = key

    def __call__(self, state: Any, action: Any) -> Any:
        result = self.transition(state, action)

        live = result.state if isinstance(result, UndoableState) else result
        try:
            save_to_storage(self.storage, self.key, live, self.tree)
        except StorageError as e:
            logger.warning(f"Could not persist state to '{self.key}': {e}")

        return result

    def load_initial(self, initial_state: Mapping[str, Any]) -> Mapping[str, Any]:
        """Load ``initial_state`` overlaid with whatever is persisted."""
        return load_from_storage(initial_state, self.storage, self.key, self.tree)
