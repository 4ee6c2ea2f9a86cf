"""
Centralized error handling utilities.

## Quick Reference

| Scenario | Use This |
|----------|----------|
| Member type cannot be bound | `UnsupportedValueTypeError` |
| Handler takes too many parameters | `UnsupportedSignatureError` |
| Same declaration used twice | `DuplicateDeclarationError` |
| Two remaining-arguments captures | `AmbiguousRemainingArgumentsError` |
| Model cannot be constructed | `MissingModelError` |
| Binding executed twice | `BindingStateError` |

### Handling Patterns

| Pattern | Code |
|---------|------|
| Critical section with auto-logging | `with ErrorContext("bind Model"): ...` |
| Show an error to the user | `message, hint = format_error_for_display(e)` |

## Layers

Configuration errors are raised while a command tree is built and surface
immediately. Parse errors belong to click and are rendered on the command's
error stream. Errors raised by model setters, handlers and hooks are never
caught here: they reach the caller of `execute` unchanged.
"""

import logging

from .base import ClibindError

logger = logging.getLogger(__name__)


class ErrorContext:
    """
    Log the start, completion or failure of an operation.

    Failures are logged with the error's technical message and always
    propagate to the caller.

    Example:
        ```python
        with ErrorContext("bind GreetingModel", logger):
            node = bind_model(GreetingModel)
        ```
    """

    def __init__(self, operation: str, logger_instance: logging.Logger | None = None):
        self.operation = operation
        self.logger = logger_instance or logger

    def __enter__(self):
        self.logger.debug(f"Starting: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is None:
            self.logger.debug(f"Completed: {self.operation}")
        elif isinstance(exc_val, ClibindError):
            self.logger.error(f"Failed to {self.operation}: {exc_val.technical_message}")
        else:
            self.logger.error(f"Failed to {self.operation}: {exc_val}", exc_info=True)
        return False


def format_error_for_display(error: Exception) -> tuple[str, str | None]:
    """Return ``(message, recovery_hint)`` for showing ``error`` to a user."""
    if isinstance(error, ClibindError):
        return error.user_message, error.recovery_hint
    return f"{type(error).__name__}: {error}", None
