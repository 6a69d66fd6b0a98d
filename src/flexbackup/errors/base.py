"""Custom exception hierarchy for flexbackup.

flexbackup separates two classes of problems:

- Fatal configuration errors: the codec tree cannot be used as declared
  (a load cycle, an unknown dependency, a malformed node). Continuing would
  silently produce wrong state, so these are raised.
- Recoverable runtime conditions: undoing past the start of history or
  redoing past its end. These are not exceptions; the undoable transition
  logs them and reports them through ``UndoableState.outcome``.

All flexbackup errors inherit from FlexBackupError and include:
- error_code: A unique ErrorCode enum for categorization
- context: ErrorContext with the slice path being processed
- suggestions: List of actionable steps to resolve the issue

Example:
    try:
        state = load_backup(base, tree, snapshot)
    except CircularDependencyError as e:
        print(f"Error: {e}")
        print(f"Cycle: {' -> '.join(e.cycle)}")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for flexbackup.

    Error codes are organized by category:
    - E1xx: Codec tree configuration errors
    - E2xx: Backup load errors
    - E3xx: History / delta errors
    - E4xx: Storage errors
    - E9xx: Unknown/internal errors
    """

    # Configuration errors (E1xx)
    INVALID_CODEC_TREE = "E101"
    INVALID_SETTINGS = "E102"

    # Load errors (E2xx)
    LOAD_FAILED = "E200"
    CIRCULAR_DEPENDENCY = "E201"
    DUPLICATE_LOAD = "E202"
    UNKNOWN_SLICE = "E203"

    # History errors (E3xx)
    INVALID_DELTA = "E301"

    # Storage errors (E4xx)
    STORAGE_FAILED = "E401"

    # Unknown/internal errors (E9xx)
    UNKNOWN = "E999"

    @property
    def category(self) -> str:
        """Get the error category name."""
        code_num = int(self.value[1:])
        if code_num < 200:
            return "configuration"
        elif code_num < 300:
            return "load"
        elif code_num < 400:
            return "history"
        elif code_num < 500:
            return "storage"
        else:
            return "unknown"


@dataclass
class ErrorContext:
    """Structured context for error logging and debugging.

    Attributes:
        slice_path: Keys leading from the root codec tree to the nested
            tree being processed when the error occurred.
        key: The slice key being processed, if any.
        extra: Additional context-specific information.
        timestamp: When the error occurred.

    Example:
        context = ErrorContext(slice_path=("settings",), key="theme")
    """

    slice_path: tuple[str, ...] = ()
    key: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        """Convert context to dictionary for serialization."""
        result = {
            "slice_path": list(self.slice_path) or None,
            "key": self.key,
            "extra": self.extra or None,
            "timestamp": self.timestamp.isoformat(),
        }
        return {k: v for k, v in result.items() if v is not None}

    def format_location(self) -> str:
        """Format the error location as a readable string."""
        parts = list(self.slice_path)
        if self.key:
            parts.append(self.key)
        return ".".join(parts) if parts else "root"


class FlexBackupError(Exception):
    """Base exception for all flexbackup errors.

    Attributes:
        error_code: Unique ErrorCode for this error type
        message: Human-readable error description
        context: ErrorContext with the slice being processed
        suggestions: List of actionable steps to resolve the issue
        recoverable: Whether continuing after the error is safe
        cause: The underlying exception (if any)
    """

    error_code: ErrorCode = ErrorCode.UNKNOWN
    default_message: str = "An unexpected error occurred"
    default_suggestions: list[str] = []
    recoverable: bool = True

    def __init__(
        self,
        message: str | None = None,
        error_code: ErrorCode | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
        recoverable: bool | None = None,
        suggestions: list[str] | None = None,
        **extra_context: Any,
    ) -> None:
        self.message = message or self.default_message
        self.error_code = error_code or self.error_code
        self.context = context or ErrorContext()
        self.cause = cause
        if recoverable is not None:
            self.recoverable = recoverable
        self._suggestions = suggestions

        if extra_context:
            self.context.extra.update(extra_context)

        super().__init__(self.message)

    @property
    def suggestions(self) -> list[str]:
        """Get actionable suggestions for resolving this error."""
        if self._suggestions is not None:
            return self._suggestions
        return self.default_suggestions.copy()

    def __str__(self) -> str:
        parts = [f"[{self.error_code.value}] {self.message}"]

        location = self.context.format_location()
        if location != "root":
            parts.append(f"at {location}")

        return " | ".join(parts)

    def format_verbose(self) -> str:
        """Format error with full details including suggestions."""
        lines = [
            f"Error [{self.error_code.value}]: {self.message}",
            f"Location: {self.context.format_location()}",
        ]

        if self.cause is not None:
            lines.append(f"Caused by: {type(self.cause).__name__}: {self.cause}")

        if self.suggestions:
            lines.append("")
            lines.append("Suggestions:")
            for suggestion in self.suggestions:
                lines.append(f"  - {suggestion}")

        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error_code": self.error_code.value,
            "error_type": self.__class__.__name__,
            "message": self.message,
            "recoverable": self.recoverable,
            "suggestions": self.suggestions,
            "context": self.context.to_dict(),
            "cause": str(self.cause) if self.cause else None,
        }


class ConfigurationError(FlexBackupError):
    """The codec tree or settings cannot be used as declared."""

    error_code = ErrorCode.INVALID_CODEC_TREE
    default_message = "Invalid configuration"
    recoverable = False


class CodecTreeError(ConfigurationError):
    """A codec tree node is neither a Codec nor a nested tree.

    Codec trees are tagged explicitly: leaves must be ``Codec`` instances and
    interior nodes ``CodecTree`` instances (or plain dicts passed through
    ``CodecTree.from_mapping``).
    """

    error_code = ErrorCode.INVALID_CODEC_TREE
    default_message = "Invalid codec tree node"
    default_suggestions = [
        "Wrap save/load pairs in Codec(save=..., load=...)",
        "Use CodecTree.from_mapping() to build nested trees from plain dicts",
    ]

    def __init__(
        self,
        message: str | None = None,
        node: Any = None,
        **kwargs: Any,
    ) -> None:
        self.node = node
        super().__init__(message=message, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["node"] = repr(self.node)
        return result


class ConfigValidationError(ConfigurationError):
    """Settings validation failed."""

    error_code = ErrorCode.INVALID_SETTINGS
    default_message = "Invalid settings"
    default_suggestions = [
        "Check the field name and value mentioned in the error",
        "Control action tags must be distinct and must not contain the moment marker",
    ]

    def __init__(
        self,
        message: str | None = None,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ) -> None:
        self.field = field
        self.value = value
        super().__init__(message=message, **kwargs)

    def __str__(self) -> str:
        base = super().__str__()
        if self.field:
            base = f"{base} (field: {self.field})"
        return base

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["field"] = self.field
        result["value"] = repr(self.value)
        return result


class LoadError(ConfigurationError):
    """Backup load failed because of the codec tree's dependency graph."""

    error_code = ErrorCode.LOAD_FAILED
    default_message = "Backup load failed"


class CircularDependencyError(LoadError):
    """A slice's load step transitively depends on itself.

    The ``cycle`` attribute holds the complete dependency path, starting and
    ending with the re-entered key, e.g. ``["a", "b", "a"]``.
    """

    error_code = ErrorCode.CIRCULAR_DEPENDENCY
    default_message = "Circular dependency between slice loaders"
    default_suggestions = [
        "Break the cycle so at most one side of each pair calls needs()/update()",
        "Move shared data into its own slice that both sides depend on",
    ]

    def __init__(
        self,
        message: str | None = None,
        cycle: list[str] | None = None,
        **kwargs: Any,
    ) -> None:
        self.cycle = list(cycle or [])
        if message is None and self.cycle:
            message = f"Circular dependency detected: {' -> '.join(self.cycle)}"
        super().__init__(message=message, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["cycle"] = self.cycle
        return result


class DuplicateLoadError(LoadError):
    """A slice was loaded twice within one load_backup call."""

    error_code = ErrorCode.DUPLICATE_LOAD
    default_message = "Slice loaded more than once"

    def __init__(
        self,
        message: str | None = None,
        key: str | None = None,
        **kwargs: Any,
    ) -> None:
        self.key = key
        if message is None and key is not None:
            message = f"Slice '{key}' was loaded more than once"
        super().__init__(message=message, **kwargs)


class UnknownSliceError(LoadError):
    """A loader asked for a slice that the codec tree does not declare."""

    error_code = ErrorCode.UNKNOWN_SLICE
    default_message = "Unknown slice"
    default_suggestions = [
        "Declare the slice in the same codec tree as the loader that needs it",
        "Dependencies resolve among siblings only; nested slices are not visible",
    ]

    def __init__(
        self,
        message: str | None = None,
        key: str | None = None,
        **kwargs: Any,
    ) -> None:
        self.key = key
        if message is None and key is not None:
            message = f"Slice '{key}' is not declared in the codec tree"
        super().__init__(message=message, **kwargs)


class HistoryError(FlexBackupError):
    """A delta could not be applied or reversed."""

    error_code = ErrorCode.INVALID_DELTA
    default_message = "Invalid history delta"
    recoverable = False


class StorageError(FlexBackupError):
    """A persistence collaborator failed to read or write a backup."""

    error_code = ErrorCode.STORAGE_FAILED
    default_message = "Storage operation failed"

    def __init__(
        self,
        message: str | None = None,
        storage_key: str | None = None,
        **kwargs: Any,
    ) -> None:
        self.storage_key = storage_key
        super().__init__(message=message, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["storage_key"] = self.storage_key
        return result
