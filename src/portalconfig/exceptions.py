"""Exception hierarchy for the portal configuration service.

All errors inherit from PortalConfigError. This module provides:
- Base exception hierarchy with stable error codes
- ErrorRegistry for protocol mapping
- gRPC status mapping for services exposing the facade over gRPC

Read paths never raise for missing or forbidden objects: they return
None. Exceptions are reserved for misconfiguration and for failures of
the collaborators (storage, event delivery).

Storage adapters may define thin subclasses:
    class JcrStorageError(StorageError):
        pass
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar, cast

__all__ = [
    # Base hierarchy
    "PortalConfigError",
    "ConfigurationError",
    "TemplateNotFoundError",
    "UnsupportedNodeError",
    "StorageError",
    "EventDeliveryError",
    # Registry
    "ErrorRegistry",
    "error_registry",
    "register_error",
    # gRPC helpers
    "get_grpc_status_code",
]


# ---- Exception Hierarchy ----------------------------------------------------


class PortalConfigError(Exception):
    """Base exception for the portal configuration service.

    Attributes:
        code: Stable error code string for protocol mapping (e.g. "STORAGE_ERROR").
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


class ConfigurationError(PortalConfigError):
    """No template bootstrap is registered for the requested owner type."""

    code: str = "CONFIGURATION_ERROR"
    message: str = "Template bootstrap is not configured"


class TemplateNotFoundError(ConfigurationError):
    """The requested template key is not provided by any bootstrap provider."""

    code: str = "TEMPLATE_NOT_FOUND"
    message: str = "Unknown template"


class UnsupportedNodeError(PortalConfigError):
    """A configuration node outside the known node kinds was encountered."""

    code: str = "UNSUPPORTED_NODE"
    message: str = "Unsupported configuration node"


class StorageError(PortalConfigError):
    """Failure raised by a ConfigStore implementation. Never retried here."""

    code: str = "STORAGE_ERROR"
    message: str = "Configuration storage failure"


class EventDeliveryError(PortalConfigError):
    """Failure raised by an EventSink. Logged and swallowed by the facade."""

    code: str = "EVENT_DELIVERY_ERROR"
    message: str = "Event delivery failed"


# ---- Error Registry for Protocol Mapping ------------------------------------

_E = TypeVar("_E", bound=type[PortalConfigError])


class ErrorRegistry:
    """Registry for mapping internal errors to external protocol codes."""

    def __init__(self) -> None:
        self._errors: dict[str, type[PortalConfigError]] = {}

    def register(self, code: str, error_cls: type[PortalConfigError]) -> None:
        self._errors[code] = error_cls

    def get(self, code: str) -> type[PortalConfigError] | None:
        return self._errors.get(code)

    def all(self) -> dict[str, type[PortalConfigError]]:
        return dict(self._errors)


error_registry = ErrorRegistry()


def register_error(code: str) -> Callable[[_E], _E]:
    """Decorator to register a custom error type.

    Usage:
        @register_error("JCR_ERROR")
        class JcrStorageError(StorageError):
            code = "JCR_ERROR"
    """

    def decorator(cls: _E) -> _E:
        error_registry.register(code, cls)
        return cls

    return cast(Callable[[_E], _E], decorator)


# Register base errors
error_registry.register("INTERNAL_ERROR", PortalConfigError)
error_registry.register("CONFIGURATION_ERROR", ConfigurationError)
error_registry.register("TEMPLATE_NOT_FOUND", TemplateNotFoundError)
error_registry.register("UNSUPPORTED_NODE", UnsupportedNodeError)
error_registry.register("STORAGE_ERROR", StorageError)
error_registry.register("EVENT_DELIVERY_ERROR", EventDeliveryError)


# ---- gRPC Status Mapping ----------------------------------------------------


def get_grpc_status_code(error: PortalConfigError) -> int:
    """Map PortalConfigError to gRPC status code.

    Returns grpc.StatusCode value for the given error type.
    Import grpc locally to avoid hard dependency at module level.
    """
    import grpc

    error_to_status = {
        "CONFIGURATION_ERROR": grpc.StatusCode.FAILED_PRECONDITION,
        "TEMPLATE_NOT_FOUND": grpc.StatusCode.NOT_FOUND,
        "UNSUPPORTED_NODE": grpc.StatusCode.INVALID_ARGUMENT,
        "STORAGE_ERROR": grpc.StatusCode.UNAVAILABLE,
        "EVENT_DELIVERY_ERROR": grpc.StatusCode.UNAVAILABLE,
    }
    return error_to_status.get(error.code, grpc.StatusCode.INTERNAL)
