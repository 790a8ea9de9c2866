"""Construction of request objects from generic data."""

from __future__ import annotations

import inspect
import logging
import typing
from collections.abc import Iterable, Mapping, Set
from typing import Any, get_args

from pydantic import BaseModel

from aws_client_bridge.conversion.coercion import CoercionRegistry
from aws_client_bridge.conversion.inspector import (
    TypeInspector,
    container_origin,
    find_writable,
    unwrap_optional,
)
from aws_client_bridge.exceptions import CoercionError

logger = logging.getLogger(__name__)

_MAX_BUILD_DEPTH = 30


def _is_passthrough(annotation: Any) -> bool:
    return (
        annotation is Any
        or annotation is inspect.Parameter.empty
        or annotation is object
        or isinstance(annotation, (str, typing.TypeVar))
    )


def _field_pairs(field_map: Mapping[object, object] | Iterable[tuple[object, object]]):
    if isinstance(field_map, Mapping):
        return field_map.items()
    return field_map


def new_instance(cls: type) -> object:
    """Create a bare instance of a model type.

    Pydantic models are created without validation; other classes get ``None``
    for every required constructor parameter.
    """
    if issubclass(cls, BaseModel):
        return cls.model_construct()
    try:
        params = inspect.signature(cls).parameters.values()
    except (TypeError, ValueError):
        return cls()
    args: list[object] = []
    kwargs: dict[str, object] = {}
    for param in params:
        if param.default is not inspect.Parameter.empty:
            continue
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
            args.append(None)
        elif param.kind is param.KEYWORD_ONLY:
            kwargs[param.name] = None
    return cls(*args, **kwargs)


class ObjectBuilder:
    def __init__(self, coercions: CoercionRegistry, inspector: TypeInspector) -> None:
        self._coercions = coercions
        self._inspector = inspector

    def build(self, target_type: Any, value: object) -> object:
        """Convert ``value`` into an instance of ``target_type``."""
        return self.convert(target_type, value)

    def populate(
        self,
        instance: object,
        field_map: Mapping[object, object] | Iterable[tuple[object, object]],
        depth: int = 0,
    ) -> object:
        """Set every field of ``instance`` named in ``field_map``.

        Keys without a matching writable accessor are skipped.
        """
        cls = type(instance)
        for key, value in _field_pairs(field_map):
            accessor = find_writable(cls, key)
            if accessor is None:
                continue
            accessor.apply(instance, self.convert(accessor.annotation, value, depth + 1))
        return instance

    def convert(self, annotation: Any, value: object, depth: int = 0) -> object:
        if depth >= _MAX_BUILD_DEPTH:
            raise CoercionError(f"Object graph nested deeper than {_MAX_BUILD_DEPTH} levels")
        annotation = unwrap_optional(annotation)
        if value is None or _is_passthrough(annotation):
            return value

        origin = container_origin(annotation)
        if origin is not None:
            return self._convert_container(annotation, origin, value, depth)

        if self._coercions.is_primitive(annotation):
            return self._coercions.coerce(value, annotation)

        if self._inspector.is_model_type(annotation):
            if isinstance(value, annotation):
                return value
            if isinstance(value, Mapping):
                return self.populate(new_instance(annotation), value, depth)
            raise CoercionError(
                f"Expected a mapping to build {annotation.__name__}, got {type(value).__name__}"
            )

        return self._coercions.coerce(value, annotation)

    def _convert_container(self, annotation: Any, origin: type, value: object, depth: int) -> object:
        args = get_args(unwrap_optional(annotation))

        if origin is dict:
            if not isinstance(value, Mapping):
                raise CoercionError(f"Expected a mapping, got {type(value).__name__}")
            key_type = args[0] if len(args) == 2 else Any
            value_type = args[-1] if args else Any
            return {
                self.convert(key_type, k, depth + 1): self.convert(value_type, v, depth + 1)
                for k, v in value.items()
            }

        if isinstance(value, (str, bytes, bytearray, Mapping)) or not isinstance(value, (Iterable, Set)):
            raise CoercionError(f"Expected a sequence, got {type(value).__name__}")

        items = list(value)
        if origin is tuple and args and Ellipsis not in args and len(args) == len(items):
            converted = [self.convert(t, item, depth + 1) for t, item in zip(args, items)]
        else:
            element_type = next((a for a in reversed(args) if a is not Ellipsis), Any)
            converted = [self.convert(element_type, item, depth + 1) for item in items]
        return origin(converted)
