"""Error taxonomy for the client bridge."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType


class BridgeError(Exception):
    """Base class for every error raised by the bridge itself."""


class ConfigurationError(BridgeError):
    """Raised when credentials or client configuration are incomplete."""


class NoMatchingOverloadError(BridgeError):
    """Raised when no overload of an operation accepts the supplied arguments."""

    def __init__(self, operation: str, args: tuple[object, ...]) -> None:
        super().__init__(
            f"No overload of '{operation}' matches {len(args)} supplied argument(s)"
        )
        self.operation = operation
        self.args_supplied = args


class NoMatchingEnumValueError(BridgeError):
    """Raised when a value matches none of an enumeration's constants."""

    def __init__(self, enum_type: type, value: object) -> None:
        super().__init__(f"'{value}' is not a valid {enum_type.__name__}")
        self.enum_type = enum_type
        self.value = value


class UnregisteredTypeError(BridgeError):
    """Raised when no coercion is registered for a required target type."""

    def __init__(self, target_type: object) -> None:
        name = getattr(target_type, "__name__", repr(target_type))
        super().__init__(f"No coercion registered for type {name}")
        self.target_type = target_type


class DateParseError(BridgeError):
    """Raised when a string cannot be parsed with the configured date format."""

    def __init__(self, value: object, pattern: str) -> None:
        super().__init__(f"Cannot parse '{value}' as a date with pattern '{pattern}'")
        self.value = value
        self.pattern = pattern


class CoercionError(BridgeError):
    """Raised when a registered converter rejects a value."""


ERROR_RECORD_FIELDS = (
    "error-code",
    "error-type",
    "status-code",
    "request-id",
    "service-name",
    "message",
    "stack-trace",
)


class ServiceError(BridgeError):
    """A remote failure signalled by the wrapped client.

    The original exception is available as ``__cause__``; ``record`` holds the
    structured error fields.
    """

    def __init__(self, record: Mapping[str, object]) -> None:
        full = {field: record.get(field) for field in ERROR_RECORD_FIELDS}
        super().__init__(full["message"] or full["error-code"] or "Service call failed")
        self.record: Mapping[str, object] = MappingProxyType(full)

    @property
    def error_code(self) -> object:
        return self.record["error-code"]

    @property
    def error_type(self) -> object:
        return self.record["error-type"]

    @property
    def status_code(self) -> object:
        return self.record["status-code"]

    @property
    def request_id(self) -> object:
        return self.record["request-id"]

    @property
    def service_name(self) -> object:
        return self.record["service-name"]
