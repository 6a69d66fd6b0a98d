"""Delta strategies used by the diff history.

The history engine never inspects deltas itself; it only asks a strategy to
diff, patch, reverse and clone. Any object implementing ``DeltaStrategy``
can replace the default JSON Patch implementation, for example a structural
hashing strategy for very large states.
"""

from __future__ import annotations

import copy
from typing import Any, NamedTuple, Protocol, runtime_checkable

import jsonpatch
import jsonpointer

from flexbackup.errors import ErrorContext, HistoryError


@runtime_checkable
class DeltaStrategy(Protocol):
    """Protocol for the diff/patch/reverse/clone primitive.

    The contract every implementation must honor:
    - ``patch(clone(a), diff(a, b)) == b``
    - ``patch(clone(b), reverse(diff(a, b))) == a``
    - ``clone`` returns an independent copy that ``patch`` may mutate.
    """

    def diff(self, left: Any, right: Any) -> Any:
        """Create a delta that turns ``left`` into ``right``."""
        ...

    def patch(self, target: Any, delta: Any) -> Any:
        """Apply ``delta`` to ``target`` (may mutate it) and return the result."""
        ...

    def reverse(self, delta: Any) -> Any:
        """Return the inverse of ``delta``."""
        ...

    def clone(self, value: Any) -> Any:
        """Return an independent deep copy of ``value``."""
        ...


class JsonPatchDelta(NamedTuple):
    """Pair of RFC 6902 operation lists.

    ``forward`` turns the left document into the right one and ``backward``
    undoes it. Being a tuple of plain lists, the delta serializes to JSON as
    a two-element array, and that form is accepted back by the strategy.
    """

    forward: list[dict[str, Any]]
    backward: list[dict[str, Any]]

    @property
    def is_empty(self) -> bool:
        return not self.forward and not self.backward


class JsonPatchStrategy:
    """Delta strategy built on the ``jsonpatch`` library.

    Both directions are computed at diff time, so ``reverse`` is a swap
    rather than a new diff.
    """

    def diff(self, left: Any, right: Any) -> JsonPatchDelta:
        forward = jsonpatch.make_patch(left, right).patch
        backward = jsonpatch.make_patch(right, left).patch
        return JsonPatchDelta(copy.deepcopy(forward), copy.deepcopy(backward))

    def patch(self, target: Any, delta: Any) -> Any:
        forward, _ = self._unpack(delta)
        try:
            return jsonpatch.apply_patch(target, copy.deepcopy(forward), in_place=True)
        except (jsonpatch.JsonPatchException, jsonpointer.JsonPointerException) as e:
            raise HistoryError(
                message=f"Could not apply delta: {e}",
                cause=e,
                context=ErrorContext(extra={"operations": len(forward)}),
            ) from e

    def reverse(self, delta: Any) -> JsonPatchDelta:
        forward, backward = self._unpack(delta)
        return JsonPatchDelta(backward, forward)

    def clone(self, value: Any) -> Any:
        return copy.deepcopy(value)

    @staticmethod
    def _unpack(delta: Any) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
        try:
            forward, backward = delta
        except (TypeError, ValueError) as e:
            raise HistoryError(
                message=f"Expected a (forward, backward) delta pair, got {type(delta).__name__}",
                cause=e,
            ) from e
        return list(forward), list(backward)


DEFAULT_STRATEGY: DeltaStrategy = JsonPatchStrategy()
