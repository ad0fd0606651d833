"""Custom exception hierarchy for widgetdeck.

Exception Hierarchy:
    WidgetDeckError (base)
    ├── LayoutError - layout surface / scope problems
    │   └── UnknownScopeError
    ├── PersistenceError - key-value storage backends
    │   ├── StorageReadError
    │   └── StorageWriteError (retryable)
    └── ConfigurationError - settings / environment issues

The public layout operations never raise these for user-level mistakes
(unknown ids, duplicate adds, failed writes). They surface at the storage
and configuration seams, where callers decide what to do with them.

Usage:
    from widgetdeck.exceptions import StorageWriteError

    try:
        path.write_text(payload)
    except OSError as e:
        raise StorageWriteError("Failed to write layouts", path=str(path)) from e
"""

from typing import Any, Optional


class WidgetDeckError(Exception):
    """Base exception for all widgetdeck errors.

    Attributes:
        message: Human-readable error description
        context: Additional context about the error (e.g., keys, paths)
        retryable: Whether this error might succeed on retry
    """

    def __init__(
        self,
        message: str,
        *,
        retryable: bool = False,
        **context: Any,
    ) -> None:
        self.message = message
        self.context = context
        self.retryable = retryable
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context."""
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


# =============================================================================
# Layout Errors
# =============================================================================


class LayoutError(WidgetDeckError):
    """Base exception for layout surface errors."""

    pass


class UnknownScopeError(LayoutError):
    """A layout scope name did not match any known surface."""

    def __init__(
        self,
        message: str = "Unknown layout scope",
        *,
        scope: Optional[str] = None,
        **context: Any,
    ) -> None:
        if scope is not None:
            context["scope"] = scope
        super().__init__(message, **context)


# =============================================================================
# Persistence Errors
# =============================================================================


class PersistenceError(WidgetDeckError):
    """Base exception for key-value storage errors."""

    pass


class StorageReadError(PersistenceError):
    """Failed to read from the backing store."""

    def __init__(
        self,
        message: str = "Failed to read from storage",
        *,
        key: Optional[str] = None,
        path: Optional[str] = None,
        **context: Any,
    ) -> None:
        if key:
            context["key"] = key
        if path:
            context["path"] = path
        super().__init__(message, **context)


class StorageWriteError(PersistenceError):
    """Failed to write to the backing store - may succeed on a later write."""

    def __init__(
        self,
        message: str = "Failed to write to storage",
        *,
        key: Optional[str] = None,
        path: Optional[str] = None,
        **context: Any,
    ) -> None:
        if key:
            context["key"] = key
        if path:
            context["path"] = path
        super().__init__(message, retryable=True, **context)


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(WidgetDeckError):
    """Configuration or settings error."""

    def __init__(
        self,
        message: str = "Configuration error",
        *,
        setting: Optional[str] = None,
        **context: Any,
    ) -> None:
        if setting:
            context["setting"] = setting
        super().__init__(message, **context)
