"""Backup creation and dependency-aware restore.

``create_backup`` projects a state tree onto a codec tree, producing the
minimal snapshot needed to rebuild it. ``load_backup`` reverses that, letting
each slice's loader pull sibling slices on demand through a
``DependencyLoader`` regardless of declaration order.

Example:
    >>> snapshot = create_backup(state, tree)
    >>> restored = load_backup({}, tree, snapshot)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from flexbackup.backup.codec import Codec, CodecTree
from flexbackup.errors import (
    CircularDependencyError,
    CodecTreeError,
    DuplicateLoadError,
    ErrorContext,
    UnknownSliceError,
)

logger = logging.getLogger(__name__)


def create_backup(state: Mapping[str, Any] | None, tree: CodecTree) -> dict[str, Any]:
    """Create a snapshot of ``state`` following ``tree``.

    Only keys declared in the tree are visited, in declaration order; state
    keys absent from the tree are left out of the snapshot.

    Args:
        state: State tree (or slice) to back up. ``None`` is treated as empty.
        tree: Codec tree describing what to store.

    Returns:
        A fresh snapshot shaped like ``tree``.
    """
    state = state or {}
    stored: dict[str, Any] = {}

    for key, node in tree.items():
        if isinstance(node, Codec):
            stored[key] = node.save(state.get(key))
        elif isinstance(node, CodecTree):
            stored[key] = create_backup(state.get(key) or {}, node)
        else:
            raise CodecTreeError(node=node, context=ErrorContext(key=key))

    return stored


class DependencyLoader:
    """Per-call helper that lets one slice's loader reach its siblings.

    One instance exists per ``load_backup`` call (and per nesting level). It
    owns the loaded/in-progress bookkeeping, so concurrent or re-entrant
    ``load_backup`` calls never share state.
    """

    def __init__(
        self,
        base_state: Mapping[str, Any],
        tree: CodecTree,
        snapshot: Mapping[str, Any],
        path: tuple[str, ...] = (),
    ) -> None:
        self._base_state = base_state
        self._tree = tree
        self._snapshot = snapshot
        self._path = path
        self._loaded_keys: set[str] = set()
        self._load_queue: list[str] = []
        self._loaded: dict[str, Any] = {}

    @property
    def loaded(self) -> dict[str, Any]:
        """Copy of the slices loaded so far."""
        return dict(self._loaded)

    def needs(self, key: str) -> Any:
        """Return the loaded value of sibling slice ``key``, loading it first if needed.

        Raises:
            UnknownSliceError: If ``key`` is not declared in this codec tree.
            CircularDependencyError: If loading ``key`` re-enters a slice
                that is still loading.
        """
        self._load_key(key)
        return self._loaded[key]

    def update(self, key: str, patch: Any) -> None:
        """Adjust the loaded value of sibling slice ``key``.

        A mapping ``patch`` is shallow-merged into the current value; any
        other value replaces it.
        """
        self._load_key(key)
        current = self._loaded[key]
        if isinstance(patch, Mapping) and (current is None or isinstance(current, Mapping)):
            self._loaded[key] = {**(current or {}), **patch}
        else:
            self._loaded[key] = patch
        logger.debug(f"Slice '{self._describe(key)}' updated by a sibling loader")

    def load_all(self) -> dict[str, Any]:
        """Load every declared slice and merge the result over the base state."""
        for key in self._tree:
            self._load_key(key)
        return {**self._base_state, **self._loaded}

    def _load_key(self, key: str) -> None:
        if key in self._loaded_keys:
            return

        if key not in self._tree:
            raise UnknownSliceError(key=key, context=ErrorContext(slice_path=self._path, key=key))

        if key in self._load_queue:
            start = self._load_queue.index(key)
            cycle = [self._describe(k) for k in self._load_queue[start:]]
            cycle.append(self._describe(key))
            raise CircularDependencyError(
                cycle=cycle,
                context=ErrorContext(slice_path=self._path, key=key),
            )

        self._load_queue.append(key)
        try:
            node = self._tree[key]
            if isinstance(node, Codec):
                value = node.load(self._snapshot.get(key), self)
            elif isinstance(node, CodecTree):
                value = load_backup(
                    self._base_state.get(key) or {},
                    node,
                    self._snapshot.get(key) or {},
                    _path=self._path + (key,),
                )
            else:
                raise CodecTreeError(node=node, context=ErrorContext(slice_path=self._path, key=key))
        finally:
            self._load_queue.pop()

        if key in self._loaded_keys:
            raise DuplicateLoadError(key=self._describe(key), context=ErrorContext(slice_path=self._path, key=key))
        self._loaded[key] = value
        self._loaded_keys.add(key)

    def _describe(self, key: str) -> str:
        return ".".join(self._path + (key,))


def load_backup(
    base_state: Mapping[str, Any] | None,
    tree: CodecTree,
    snapshot: Mapping[str, Any] | None,
    *,
    _path: tuple[str, ...] = (),
) -> dict[str, Any]:
    """Rebuild state from a snapshot.

    Slices are loaded in declaration order unless a loader pulls a sibling
    earlier via ``deps.needs()`` or ``deps.update()``. Every slice is loaded
    exactly once.

    Args:
        base_state: State to load into. Keys not declared in ``tree`` keep
            their value from here.
        tree: Codec tree the snapshot was created with.
        snapshot: Snapshot produced by ``create_backup``.

    Returns:
        A new state mapping; ``base_state`` is not modified.

    Raises:
        CircularDependencyError: If slice loaders depend on each other in a cycle.
        UnknownSliceError: If a loader depends on an undeclared slice.
    """
    deps = DependencyLoader(base_state or {}, tree, snapshot or {}, _path)
    return deps.load_all()
