"""Codecs and codec trees.

A codec tree declares which parts of a state tree are backed up and how. Each
key maps to either a ``Codec`` (a save/load pair for one slice) or a nested
``CodecTree`` governing a sub-mapping of the state. The two node kinds are
distinct types so a stored payload that happens to have a ``save`` field is
never mistaken for a codec.

Example:
    >>> tree = CodecTree({
    ...     "document": Codec(save=lambda doc: doc["text"],
    ...                       load=lambda text, deps: {"text": text}),
    ...     "settings": CodecTree({"theme": COPY}),
    ... })
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from flexbackup.errors import CodecTreeError, ErrorContext

if TYPE_CHECKING:
    from flexbackup.backup.engine import DependencyLoader

SaveFunction = Callable[[Any], Any]
LoadFunction = Callable[[Any, "DependencyLoader"], Any]


@dataclass(frozen=True)
class Codec:
    """Save/load pair for one slice.

    Attributes:
        save: Converts the slice into its stored form. Returning ``None``
            means "explicitly not backed up" and is stored as-is.
        load: Rebuilds the slice from its stored form (which may be ``None``).
            Receives the call's ``DependencyLoader`` as second argument so it
            can read or adjust sibling slices.
    """

    save: SaveFunction
    load: LoadFunction

    def __post_init__(self) -> None:
        if not callable(self.save) or not callable(self.load):
            raise CodecTreeError(
                message="Codec save and load must both be callable",
                node=(self.save, self.load),
            )


def _copy_save(value: Any) -> Any:
    return value


def _copy_load(stored: Any, deps: DependencyLoader) -> Any:
    return stored


COPY = Codec(save=_copy_save, load=_copy_load)
"""Codec that stores the slice value unchanged."""

CodecNode = Union[Codec, "CodecTree"]


class CodecTree(Mapping[str, CodecNode]):
    """Immutable mapping of state keys to codec nodes.

    Iteration follows declaration order, which is the order ``create_backup``
    visits slices and the default order ``load_backup`` loads them in.
    """

    __slots__ = ("_nodes",)

    def __init__(self, nodes: Mapping[str, CodecNode] | None = None) -> None:
        checked: dict[str, CodecNode] = {}
        for key, node in (nodes or {}).items():
            if not isinstance(key, str):
                raise CodecTreeError(
                    message=f"Codec tree keys must be strings, got {key!r}",
                    node=node,
                )
            if not isinstance(node, (Codec, CodecTree)):
                raise CodecTreeError(
                    message=(
                        f"Node for '{key}' must be a Codec or CodecTree, "
                        f"got {type(node).__name__}"
                    ),
                    node=node,
                    context=ErrorContext(key=key),
                )
            checked[key] = node
        self._nodes = checked

    @classmethod
    def from_mapping(cls, nodes: Mapping[str, Any]) -> CodecTree:
        """Build a codec tree from nested plain mappings.

        Plain mappings become nested ``CodecTree``s; ``Codec`` and
        ``CodecTree`` values are kept. Anything else raises ``CodecTreeError``.
        """
        converted: dict[str, CodecNode] = {}
        for key, node in nodes.items():
            if isinstance(node, (Codec, CodecTree)):
                converted[key] = node
            elif isinstance(node, Mapping):
                converted[key] = cls.from_mapping(node)
            else:
                raise CodecTreeError(
                    message=(
                        f"Node for '{key}' must be a Codec, CodecTree or mapping, "
                        f"got {type(node).__name__}"
                    ),
                    node=node,
                    context=ErrorContext(key=key),
                )
        return cls(converted)

    def __getitem__(self, key: str) -> CodecNode:
        return self._nodes[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return f"CodecTree({list(self._nodes)!r})"
