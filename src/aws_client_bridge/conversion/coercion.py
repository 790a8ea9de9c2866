"""Coercion of generic values into the primitive types client methods declare."""

from __future__ import annotations

import base64
import binascii
import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from pathlib import Path

from aws_client_bridge.conversion.dates import (
    as_aware,
    from_epoch_millis,
    parse_datetime,
    promote_date,
)
from aws_client_bridge.exceptions import (
    BridgeError,
    CoercionError,
    NoMatchingEnumValueError,
    UnregisteredTypeError,
)

Converter = Callable[[object], object]

logger = logging.getLogger(__name__)


def _coerce_integer(value: object) -> int:
    if isinstance(value, bool):
        # bool is an int subclass and is rejected here.
        raise ValueError("Expected integer, got boolean")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            raise ValueError(f"Cannot convert '{value}' to integer")
    if isinstance(value, (float, Decimal)):
        if value != int(value):
            raise ValueError(f"Cannot convert {value} with decimal part to integer")
        return int(value)
    raise ValueError(f"Expected integer, got {type(value).__name__}")


def _coerce_float(value: object) -> float:
    if isinstance(value, bool):
        raise ValueError("Expected number, got boolean")
    if isinstance(value, (int, float, Decimal)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            raise ValueError(f"Cannot convert '{value}' to number")
    raise ValueError(f"Expected number, got {type(value).__name__}")


def _coerce_decimal(value: object) -> Decimal:
    if isinstance(value, bool):
        raise ValueError("Expected number, got boolean")
    if isinstance(value, (int, float, str)):
        try:
            return Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"Cannot convert '{value}' to decimal")
    raise ValueError(f"Expected number, got {type(value).__name__}")


def _coerce_boolean(value: object) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lower = value.strip().lower()
        if lower in {"true", "yes", "1", "on"}:
            return True
        if lower in {"false", "no", "0", "off"}:
            return False
        raise ValueError(
            f"Cannot convert '{value}' to boolean. "
            "Valid string values: true/false, yes/no, 1/0, on/off"
        )
    if value is None:
        return False
    if isinstance(value, (int, float, Decimal)):
        return bool(value)
    raise ValueError(f"Expected boolean, got {type(value).__name__}")


def _coerce_blob(value: object) -> bytes:
    """Base64 strings decode to bytes; bytearrays are copied."""
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        try:
            return base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Invalid base64 encoding: {e}")
    raise ValueError(f"Expected base64 string or bytes, got {type(value).__name__}")


def datetime_converter(date_format: Callable[[], str]) -> Converter:
    """Build the ``datetime`` converter reading the pattern at call time."""

    def _to_datetime(value: object) -> datetime:
        if isinstance(value, datetime):
            return as_aware(value)
        if isinstance(value, date):
            return promote_date(value)
        to_pydatetime = getattr(value, "to_pydatetime", None)
        if callable(to_pydatetime):
            return as_aware(to_pydatetime())
        if isinstance(value, int) and not isinstance(value, bool):
            return from_epoch_millis(value)
        return parse_datetime(value, date_format())

    return _to_datetime


def date_converter(date_format: Callable[[], str]) -> Converter:
    to_datetime = datetime_converter(date_format)

    def _to_date(value: object) -> date:
        return to_datetime(value).date()

    return _to_date


def default_converters(date_format: Callable[[], str]) -> dict[type, Converter]:
    return {
        str: str,
        int: _coerce_integer,
        float: _coerce_float,
        Decimal: _coerce_decimal,
        bool: _coerce_boolean,
        bytes: _coerce_blob,
        Path: Path,
        datetime: datetime_converter(date_format),
        date: date_converter(date_format),
    }


def to_enum(enum_type: type[Enum], value: object) -> Enum:
    """Case-insensitive resolution of an enumeration constant."""
    raw = value.value if isinstance(value, Enum) else value
    wanted = str(raw).upper()
    for member in enum_type:
        # Some enumerations carry members without a string form.
        if member.value is None:
            continue
        if str(member.value).upper() == wanted:
            return member
    for member in enum_type:
        if member.name.upper() == wanted:
            return member
    raise NoMatchingEnumValueError(enum_type, value)


def is_enum_type(target_type: object) -> bool:
    return isinstance(target_type, type) and issubclass(target_type, Enum)


class CoercionRegistry:
    """Mapping of primitive target type to converter.

    Entries can be added or overridden, never removed. Writes replace the
    underlying dict so readers always see a complete mapping.
    """

    def __init__(self, converters: Mapping[type, Converter] | None = None) -> None:
        self._converters: dict[type, Converter] = dict(converters or {})

    def register(self, target_type: type, converter: Converter) -> None:
        self._converters = {**self._converters, target_type: converter}

    def register_all(
        self,
        coercions: Mapping[type, Converter] | Iterable[tuple[type, Converter]],
    ) -> None:
        items = coercions.items() if isinstance(coercions, Mapping) else coercions
        self._converters = {**self._converters, **dict(items)}

    def __contains__(self, target_type: object) -> bool:
        try:
            return target_type in self._converters
        except TypeError:
            return False

    def types(self) -> tuple[type, ...]:
        return tuple(self._converters)

    def is_primitive(self, target_type: object) -> bool:
        return target_type in self or is_enum_type(target_type)

    def coerce(self, value: object, target_type: type) -> object:
        """Coerce ``value`` to ``target_type``."""
        if isinstance(target_type, type) and isinstance(value, target_type):
            return value
        if is_enum_type(target_type):
            return to_enum(target_type, value)

        converter = self._converters.get(target_type) if target_type in self else None
        if converter is None:
            raise UnregisteredTypeError(target_type)
        try:
            return converter(value)
        except BridgeError:
            raise
        except (TypeError, ValueError, ArithmeticError) as exc:
            logger.debug("Coercion of %r to %s failed: %s", value, target_type, exc)
            raise CoercionError(
                f"Cannot coerce {value!r} to {getattr(target_type, '__name__', target_type)}: {exc}"
            ) from exc
