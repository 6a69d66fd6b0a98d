"""flexbackup error handling.

Provides the exception hierarchy with error codes and structured context.
"""

from flexbackup.errors.base import (
    CircularDependencyError,
    CodecTreeError,
    ConfigurationError,
    ConfigValidationError,
    DuplicateLoadError,
    ErrorCode,
    ErrorContext,
    FlexBackupError,
    HistoryError,
    LoadError,
    StorageError,
    UnknownSliceError,
)

__all__ = [
    "CircularDependencyError",
    "CodecTreeError",
    "ConfigurationError",
    "ConfigValidationError",
    "DuplicateLoadError",
    "ErrorCode",
    "ErrorContext",
    "FlexBackupError",
    "HistoryError",
    "LoadError",
    "StorageError",
    "UnknownSliceError",
]
