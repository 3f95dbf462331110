"""Unified exception hierarchy for the legacy permission & inheritance engine.

All errors inherit from LegacyError. This module provides:
- Base exception hierarchy with stable error codes
- ErrorRegistry for protocol mapping
- gRPC error handler decorator for host services

Usage:
    from legacycore.exceptions import (
        LegacyError,
        RuleNotFoundError,
        IllegalStateTransitionError,
        grpc_error_handler,
    )

Host applications may define thin subclasses for their own errors:
    @register_error("QUOTA_EXCEEDED")
    class QuotaExceededError(LegacyError):
        code = "QUOTA_EXCEEDED"
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, TypeVar, cast

__all__ = [
    # Base hierarchy
    "LegacyError",
    "NotFoundError",
    "RuleNotFoundError",
    "StatusNotFoundError",
    "ContentNotFoundError",
    "InvalidArgumentError",
    "IllegalStateTransitionError",
    "PermissionDeniedError",
    "ConfigurationError",
    "StorageError",
    "DuplicateStatusError",
    # Registry
    "ErrorRegistry",
    "error_registry",
    "register_error",
    # gRPC helpers
    "get_grpc_status_code",
    "grpc_error_handler",
]

logger = logging.getLogger(__name__)


# ---- Exception Hierarchy ----------------------------------------------------


class LegacyError(Exception):
    """Base exception for the engine.

    Attributes:
        code: Stable error code string for protocol mapping (e.g. "NOT_FOUND").
        message: Human-readable error description.
        details: Additional context as keyword arguments.
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(self, message: str | None = None, code: str | None = None, **kwargs: Any) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.details = kwargs
        super().__init__(self.message)


class NotFoundError(LegacyError):
    """A rule, status record, or content item does not exist."""

    code: str = "NOT_FOUND"
    message: str = "Resource not found"


class RuleNotFoundError(NotFoundError):
    """Inheritance rule lookup failed."""

    def __init__(self, rule_id: Any) -> None:
        super().__init__(f"Inheritance rule not found: {rule_id}", rule_id=rule_id)


class StatusNotFoundError(NotFoundError):
    """No inheritance status exists for the (recipient, content, rule) triple."""

    def __init__(self, recipient_id: Any, content_id: Any, rule_id: Any) -> None:
        super().__init__(
            f"Inheritance status not found for recipient {recipient_id}, "
            f"content {content_id}, rule {rule_id}",
            recipient_id=recipient_id,
            content_id=content_id,
            rule_id=rule_id,
        )


class ContentNotFoundError(NotFoundError):
    """Content item lookup failed."""

    def __init__(self, content_id: Any) -> None:
        super().__init__(f"Content not found: {content_id}", content_id=content_id)


class InvalidArgumentError(LegacyError):
    """Malformed request, rejected before any state change."""

    code: str = "INVALID_ARGUMENT"
    message: str = "Invalid argument"


class IllegalStateTransitionError(LegacyError):
    """Requested lifecycle transition is not allowed from the current state."""

    code: str = "ILLEGAL_STATE_TRANSITION"
    message: str = "Illegal state transition"

    def __init__(self, current: Any, target: Any, *, entity: str = "record", **kwargs: Any) -> None:
        super().__init__(
            f"Cannot move {entity} from {_state_name(current)} to {_state_name(target)}",
            current=_state_name(current),
            target=_state_name(target),
            **kwargs,
        )


class PermissionDeniedError(LegacyError):
    """Actor is not allowed to perform a creator-only mutation."""

    code: str = "PERMISSION_DENIED"
    message: str = "Permission denied"


class ConfigurationError(LegacyError):
    """Invalid or missing configuration."""

    code: str = "CONFIGURATION_ERROR"


class StorageError(LegacyError):
    """Repository or storage layer failure."""

    code: str = "STORAGE_ERROR"


class DuplicateStatusError(StorageError):
    """Uniqueness violation on (content_id, recipient_id, rule_id).

    Raised by repositories on insert; the processor treats it as
    "already materialized".
    """

    code: str = "DUPLICATE_STATUS"
    message: str = "Inheritance status already exists"


def _state_name(state: Any) -> str:
    return str(getattr(state, "value", state))


# ---- Error Registry for Protocol Mapping ------------------------------------

_E = TypeVar("_E", bound=type[LegacyError])


class ErrorRegistry:
    """Registry for mapping internal errors to external protocol codes."""

    def __init__(self) -> None:
        self._errors: dict[str, type[LegacyError]] = {}

    def register(self, code: str, error_cls: type[LegacyError]) -> None:
        self._errors[code] = error_cls

    def get(self, code: str) -> type[LegacyError] | None:
        return self._errors.get(code)

    def all(self) -> dict[str, type[LegacyError]]:
        return dict(self._errors)


error_registry = ErrorRegistry()


def register_error(code: str) -> Callable[[_E], _E]:
    """Decorator to register a custom error type.

    Usage:
        @register_error("MY_CUSTOM_ERROR")
        class MyCustomError(LegacyError):
            code = "MY_CUSTOM_ERROR"
    """

    def decorator(cls: _E) -> _E:
        error_registry.register(code, cls)
        return cls

    return cast(Callable[[_E], _E], decorator)


# Register base errors
error_registry.register("INTERNAL_ERROR", LegacyError)
error_registry.register("NOT_FOUND", NotFoundError)
error_registry.register("INVALID_ARGUMENT", InvalidArgumentError)
error_registry.register("ILLEGAL_STATE_TRANSITION", IllegalStateTransitionError)
error_registry.register("PERMISSION_DENIED", PermissionDeniedError)
error_registry.register("CONFIGURATION_ERROR", ConfigurationError)
error_registry.register("STORAGE_ERROR", StorageError)
error_registry.register("DUPLICATE_STATUS", DuplicateStatusError)


# ---- gRPC Error Handling Utilities ------------------------------------------


def get_grpc_status_code(error: LegacyError) -> Any:
    """Map LegacyError to gRPC status code.

    Returns grpc.StatusCode value for the given error type.
    Import grpc locally to avoid hard dependency at module level.
    """
    import grpc

    error_to_status = {
        "NOT_FOUND": grpc.StatusCode.NOT_FOUND,
        "INVALID_ARGUMENT": grpc.StatusCode.INVALID_ARGUMENT,
        "ILLEGAL_STATE_TRANSITION": grpc.StatusCode.FAILED_PRECONDITION,
        "PERMISSION_DENIED": grpc.StatusCode.PERMISSION_DENIED,
        "CONFIGURATION_ERROR": grpc.StatusCode.FAILED_PRECONDITION,
        "STORAGE_ERROR": grpc.StatusCode.UNAVAILABLE,
        "DUPLICATE_STATUS": grpc.StatusCode.ALREADY_EXISTS,
    }
    return error_to_status.get(error.code, grpc.StatusCode.INTERNAL)


def grpc_error_handler(method):
    """Decorator for unary gRPC service methods with proper error handling.

    Catches LegacyError and sets appropriate gRPC status codes.
    Logs errors and ensures consistent error response format.

    Usage:
        @grpc_error_handler
        async def DeclineInheritance(self, request, context):
            ...
    """

    @functools.wraps(method)
    async def wrapper(self, request, context):
        try:
            return await method(self, request, context)
        except LegacyError as e:
            status_code = get_grpc_status_code(e)
            error_message = f"[{e.code}] {e.message}"

            logger.error(
                "%s failed: %s",
                method.__name__,
                error_message,
                extra={
                    "error_code": e.code,
                    "error_details": e.details,
                },
            )

            context.set_trailing_metadata([("error-code", e.code)])
            await context.abort(status_code, error_message)
            return

        except Exception as e:
            import grpc

            logger.exception("%s unexpected error: %s", method.__name__, e)
            await context.abort(
                grpc.StatusCode.INTERNAL,
                f"Unexpected {type(e)}: {e}",
            )
            return

    return wrapper
