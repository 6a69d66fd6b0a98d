"""Persisting backups through a pluggable key/value storage."""

from flexbackup.storage.base import InMemoryStorage, KeyValueStorage
from flexbackup.storage.session import PersistingTransition, load_from_storage, save_to_storage

__all__ = [
    "InMemoryStorage",
    "KeyValueStorage",
    "PersistingTransition",
    "load_from_storage",
    "save_to_storage",
]
