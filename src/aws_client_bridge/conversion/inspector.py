"""Introspection of model types: writable and readable field accessors."""

from __future__ import annotations

import dataclasses
import inspect
import io
import logging
import types
import typing
from collections.abc import Callable, Collection, Mapping, Sequence
from dataclasses import dataclass
from functools import lru_cache
from pathlib import PurePath
from typing import Any, Union, get_args, get_origin, get_type_hints

from pydantic import BaseModel

from aws_client_bridge.domain.naming import hyphenate, match_key, strip_accessor_prefix
from aws_client_bridge.domain.operations import GenericInfo

logger = logging.getLogger(__name__)

_RAW_CONTENT_TYPES: tuple[type, ...] = (bytes, bytearray, PurePath, io.IOBase)
_CONTAINER_ORIGINS = (list, tuple, set, frozenset, dict)


@dataclass(frozen=True)
class FieldAccessor:
    """One readable or writable field of a model type.

    ``name`` is the hyphenated output name (``"enabled?"`` for boolean
    ``is_`` accessors), ``key`` the separator-insensitive match key.
    """

    name: str
    key: str
    annotation: Any
    kind: str
    apply: Callable[..., Any]


def safe_type_hints(obj: object) -> dict[str, Any]:
    try:
        return get_type_hints(obj)
    except Exception:
        # Forward references that cannot be resolved fall back to raw annotations.
        return dict(getattr(obj, "__annotations__", {}) or {})


def unwrap_optional(annotation: Any) -> Any:
    """``Optional[X]`` and ``X | None`` unwrap to ``X``."""
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(members) == 1:
            return members[0]
    return annotation


def container_origin(annotation: Any) -> Any:
    origin = get_origin(unwrap_optional(annotation))
    if origin is None:
        return None
    if isinstance(origin, type) and issubclass(origin, Mapping):
        return dict
    if origin in (list, tuple, set, frozenset):
        return origin
    if isinstance(origin, type) and issubclass(origin, (Sequence, Collection)):
        return list
    return None


def unwind_type(annotation: Any) -> Any:
    """Innermost element type of nested containers (last type argument)."""
    annotation = unwrap_optional(annotation)
    if container_origin(annotation) is None:
        return annotation
    args = [arg for arg in get_args(annotation) if arg is not Ellipsis]
    if not args:
        return Any
    return unwind_type(args[-1])


def generic_info(annotation: Any) -> GenericInfo | None:
    origin = container_origin(annotation)
    if origin is None:
        return None
    return GenericInfo(generic=annotation, raw=origin, actual=unwind_type(annotation))


def is_raw_content_type(annotation: Any) -> bool:
    annotation = unwrap_optional(annotation)
    if annotation in (typing.IO, typing.BinaryIO, typing.TextIO):
        return True
    origin = get_origin(annotation)
    if origin in (typing.IO,):
        return True
    return isinstance(annotation, type) and issubclass(annotation, _RAW_CONTENT_TYPES)


def _declared_members(cls: type) -> dict[str, Any]:
    """Class attributes across the MRO, subclass definitions first."""
    members: dict[str, Any] = {}
    for klass in cls.__mro__:
        if klass in (object, BaseModel):
            continue
        for name, member in vars(klass).items():
            members.setdefault(name, member)
    return members


def _positional_params(func: Callable[..., Any]) -> list[inspect.Parameter]:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return []
    params = list(signature.parameters.values())
    if params and params[0].name in ("self", "cls"):
        params = params[1:]
    return [p for p in params if p.kind not in (p.VAR_POSITIONAL, p.VAR_KEYWORD)]


def _annotated_fields(cls: type) -> dict[str, Any]:
    if isinstance(cls, type) and issubclass(cls, BaseModel):
        hints = safe_type_hints(cls)
        return {name: hints.get(name, info.annotation) for name, info in cls.model_fields.items()}
    if dataclasses.is_dataclass(cls):
        hints = safe_type_hints(cls)
        return {f.name: hints.get(f.name, f.type) for f in dataclasses.fields(cls)}
    hints = safe_type_hints(cls)
    return {
        name: hint
        for name, hint in hints.items()
        if not name.startswith("_") and get_origin(hint) is not typing.ClassVar
    }


def _setter(name: str) -> Callable[[object, object], None]:
    def _apply(obj: object, value: object) -> None:
        setattr(obj, name, value)

    return _apply


def _getter(name: str) -> Callable[[object], object]:
    def _apply(obj: object) -> object:
        return getattr(obj, name, None)

    return _apply


def _method_caller(name: str) -> Callable[..., object]:
    def _apply(obj: object, *args: object) -> object:
        return getattr(obj, name)(*args)

    return _apply


@lru_cache(maxsize=512)
def writable_fields(cls: type) -> tuple[FieldAccessor, ...]:
    """Writable accessors: ``set_x`` methods, property setters, annotated fields."""
    accessors: list[FieldAccessor] = []
    members = _declared_members(cls)

    for name, member in members.items():
        if name.startswith("_") or not inspect.isfunction(member):
            continue
        prefix, rest = strip_accessor_prefix(name)
        if prefix != "set":
            continue
        params = _positional_params(member)
        # Getters and setters share a name; setters take at least one argument.
        if not params:
            continue
        hints = safe_type_hints(member)
        annotation = hints.get(params[0].name, params[0].annotation)
        if annotation is inspect.Parameter.empty:
            annotation = Any
        accessors.append(
            FieldAccessor(hyphenate(rest), match_key(rest), annotation, "method", _method_caller(name))
        )

    for name, member in members.items():
        if name.startswith("_") or not isinstance(member, property) or member.fset is None:
            continue
        annotation = safe_type_hints(member.fget).get("return", Any) if member.fget else Any
        accessors.append(
            FieldAccessor(hyphenate(name), match_key(name), annotation, "property", _setter(name))
        )

    for name, annotation in _annotated_fields(cls).items():
        accessors.append(
            FieldAccessor(hyphenate(name), match_key(name), annotation, "field", _setter(name))
        )
    return tuple(accessors)


@lru_cache(maxsize=512)
def readable_fields(cls: type) -> tuple[FieldAccessor, ...]:
    """Readable accessors: ``get_x``/``is_x`` methods, properties, annotated fields.

    Later accessors with a match key already seen are dropped.
    """
    accessors: list[FieldAccessor] = []
    seen: set[str] = set()

    def _add(accessor: FieldAccessor) -> None:
        if accessor.key in seen:
            return
        seen.add(accessor.key)
        accessors.append(accessor)

    members = _declared_members(cls)
    for name, member in members.items():
        if name.startswith("_") or not inspect.isfunction(member):
            continue
        prefix, rest = strip_accessor_prefix(name)
        if prefix not in ("get", "is") or _positional_params(member):
            continue
        annotation = safe_type_hints(member).get("return", Any)
        if prefix == "is":
            if annotation is not bool:
                continue
            _add(FieldAccessor(hyphenate(rest) + "?", match_key(rest), bool, "method", _method_caller(name)))
        else:
            _add(FieldAccessor(hyphenate(rest), match_key(rest), annotation, "method", _method_caller(name)))

    for name, member in members.items():
        if name.startswith("_") or not isinstance(member, property) or member.fget is None:
            continue
        annotation = safe_type_hints(member.fget).get("return", Any)
        _add(FieldAccessor(hyphenate(name), match_key(name), annotation, "property", _getter(name)))

    for name, annotation in _annotated_fields(cls).items():
        _add(FieldAccessor(hyphenate(name), match_key(name), annotation, "field", _getter(name)))
    return tuple(accessors)


def find_writable(cls: type, key: object) -> FieldAccessor | None:
    """First writable accessor whose match key equals ``key``'s."""
    wanted = match_key(str(key))
    for accessor in writable_fields(cls):
        if accessor.key == wanted:
            return accessor
    logger.debug("No writable field for key %r on %s", key, cls.__name__)
    return None


class TypeInspector:
    """Decides which types are models of the wrapped library's object family."""

    def __init__(self, is_primitive: Callable[[object], bool], model_packages: Callable[[], tuple[str, ...]]) -> None:
        self._is_primitive = is_primitive
        self._model_packages = model_packages

    def in_family(self, cls: type) -> bool:
        module = getattr(cls, "__module__", "") or ""
        return any(
            module == package or module.startswith(package + ".")
            for package in self._model_packages()
        )

    def is_model_type(self, annotation: Any) -> bool:
        annotation = unwrap_optional(annotation)
        if not isinstance(annotation, type) or self._is_primitive(annotation):
            return False
        if annotation in _CONTAINER_ORIGINS or is_raw_content_type(annotation):
            return False
        if issubclass(annotation, BaseModel) or dataclasses.is_dataclass(annotation):
            return True
        return self.in_family(annotation)

    def is_model_value(self, value: object) -> bool:
        return self.is_model_type(type(value))
