"""LoggerProtocol definition for structured logging.

Backend-agnostic structured logging port. Implementations MUST keep logs
structured (message + key-value context) and safe: no passwords, tokens,
token fingerprints or password hashes ever appear in context.

Usage:
    from src.core.container import get_logger

    logger = get_logger()
    logger.info("Session created", user_id=str(user_id), session_id=str(session_id))

    scoped = logger.bind(component="cleanup_scheduler")
    scoped.warning("Cleanup scheduler already running")
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Protocol for structured logging adapters.

    Supports the five standard levels plus context binding.
    """

    def debug(self, message: str, /, **context: Any) -> None:
        ...

    def info(self, message: str, /, **context: Any) -> None:
        ...

    def warning(self, message: str, /, **context: Any) -> None:
        ...

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log an error-level message with optional exception details.

        Args:
            message: Human-readable message (avoid f-strings; use context).
            error: Optional exception instance; implementations add
                error_type and error_message fields.
            **context: Structured key-value context fields.
        """
        ...

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        ...

    def bind(self, **context: Any) -> LoggerProtocol:
        """Return new logger with permanently bound context.

        The original logger is unchanged.
        """
        ...

    def with_context(self, **context: Any) -> LoggerProtocol:
        """Alias for bind()."""
        ...
