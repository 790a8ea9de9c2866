"""Conversion of returned object graphs into generic data."""

from __future__ import annotations

import datetime
from collections.abc import Callable, Collection, Mapping
from enum import Enum
from functools import singledispatch

from aws_client_bridge.conversion.dates import as_aware
from aws_client_bridge.conversion.inspector import TypeInspector, readable_fields


def unwrap_root(value: object) -> object:
    """Collapse a single-key mapping to its only value."""
    if isinstance(value, Mapping) and len(value) == 1:
        return next(iter(value.values()))
    return value


class Marshaller:
    """Walks results by runtime type; additional types can be registered."""

    def __init__(self, inspector: TypeInspector) -> None:
        self._inspector = inspector
        dispatch = singledispatch(self._marshal_object)
        dispatch.register(type(None), self._marshal_none)
        dispatch.register(str, self._marshal_text)
        dispatch.register(bytes, self._marshal_text)
        dispatch.register(bytearray, self._marshal_text)
        dispatch.register(Enum, self._marshal_enum)
        dispatch.register(Mapping, self._marshal_mapping)
        dispatch.register(Collection, self._marshal_collection)
        dispatch.register(datetime.datetime, self._marshal_datetime)
        self._dispatch = dispatch

    def register(self, cls: type, func: Callable[[object], object]) -> None:
        self._dispatch.register(cls, func)

    def marshal(self, value: object) -> object:
        return self._dispatch(value)

    def get_fields(self, obj: object) -> dict[str, object]:
        """All non-``None`` readable fields of ``obj``, marshalled."""
        fields: dict[str, object] = {}
        for accessor in readable_fields(type(obj)):
            result = self.marshal(accessor.apply(obj))
            if result is not None:
                fields[accessor.name] = result
        return fields

    def _marshal_none(self, value: None) -> None:
        return None

    def _marshal_text(self, value: object) -> object:
        if isinstance(value, Enum):
            return value.value
        return value

    def _marshal_enum(self, value: Enum) -> object:
        return self.marshal(value.value)

    def _marshal_mapping(self, value: Mapping[object, object]) -> dict[object, object] | None:
        # Empty maps are dropped like null fields.
        if not value:
            return None
        return {key: self.marshal(item) for key, item in value.items()}

    def _marshal_collection(self, value: Collection[object]) -> list[object]:
        return [self.marshal(item) for item in value]

    def _marshal_datetime(self, value: datetime.datetime) -> datetime.datetime:
        return as_aware(value)

    def _marshal_object(self, value: object) -> object:
        if self._inspector.is_model_value(value):
            return self.get_fields(value)
        return value
