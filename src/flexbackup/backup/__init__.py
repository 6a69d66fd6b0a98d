"""Declarative backup and restore of state trees."""

from flexbackup.backup.codec import COPY, Codec, CodecNode, CodecTree
from flexbackup.backup.engine import DependencyLoader, create_backup, load_backup

__all__ = [
    "COPY",
    "Codec",
    "CodecNode",
    "CodecTree",
    "DependencyLoader",
    "create_backup",
    "load_backup",
]
