"""Operation catalog built from a client class."""

from __future__ import annotations

import inspect
import logging
import typing
from collections.abc import Callable, Iterable, Iterator
from functools import lru_cache
from typing import Any

from aws_client_bridge.conversion.inspector import generic_info, safe_type_hints
from aws_client_bridge.domain.naming import hyphenate
from aws_client_bridge.domain.operations import MethodDescriptor, ParameterInfo

logger = logging.getLogger(__name__)

# Infrastructure methods on client classes which are never exposed.
EXCLUDED_OPERATIONS = frozenset(
    {
        "invoke",
        "init",
        "set-endpoint",
        "get-cached-response-metadata",
        "get-service-abbreviation",
    }
)


def describe_method(
    raw_name: str,
    func: Callable[..., Any],
    overload_index: int | None = None,
) -> MethodDescriptor:
    hints = safe_type_hints(func)
    params = list(inspect.signature(func).parameters.values())
    if params and params[0].name in ("self", "cls"):
        params = params[1:]

    parameters = tuple(
        ParameterInfo(
            name=param.name,
            annotation=hints.get(
                param.name,
                Any if param.annotation is inspect.Parameter.empty else param.annotation,
            ),
            kind=param.kind,
            has_default=param.default is not inspect.Parameter.empty,
        )
        for param in params
        if param.kind not in (param.VAR_POSITIONAL, param.VAR_KEYWORD)
    )
    return MethodDescriptor(
        name=hyphenate(raw_name),
        raw_name=raw_name,
        parameters=parameters,
        return_type=hints.get("return"),
        generic=generic_info(parameters[0].annotation) if parameters else None,
        overload_index=overload_index,
    )


def _declared_operations(client_class: type) -> Iterator[tuple[str, Callable[..., Any]]]:
    for name, member in vars(client_class).items():
        if name.startswith("_") or not inspect.isfunction(member):
            continue
        yield name, member


class MethodCatalog:
    """Public operations of one client class grouped by normalized name.

    Overloads are kept in discovery order: methods in definition order, and
    ``typing.overload`` signatures in registration order.
    """

    def __init__(self, client_class: type) -> None:
        self._client_class = client_class
        self._operations: dict[str, list[MethodDescriptor]] = {}
        self._build_index()

    def _build_index(self) -> None:
        for raw_name, func in _declared_operations(self._client_class):
            name = hyphenate(raw_name)
            if name in EXCLUDED_OPERATIONS:
                continue
            signatures = typing.get_overloads(func)
            if signatures:
                descriptors = [
                    describe_method(raw_name, signature, index)
                    for index, signature in enumerate(signatures)
                ]
            else:
                descriptors = [describe_method(raw_name, func)]
            self._operations.setdefault(name, []).extend(descriptors)
        logger.debug(
            "Catalogued %d operations on %s", len(self._operations), self._client_class.__name__
        )

    @property
    def client_class(self) -> type:
        return self._client_class

    def list_operations(self) -> Iterable[str]:
        return self._operations.keys()

    def find_operation(self, name: str) -> list[MethodDescriptor] | None:
        overloads = self._operations.get(hyphenate(name))
        return list(overloads) if overloads is not None else None

    def as_dict(self) -> dict[str, list[MethodDescriptor]]:
        return {name: list(overloads) for name, overloads in self._operations.items()}

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and hyphenate(name) in self._operations

    def __len__(self) -> int:
        return len(self._operations)


@lru_cache(maxsize=None)
def get_catalog(client_class: type) -> MethodCatalog:
    """Catalog for ``client_class``, built once per class."""
    return MethodCatalog(client_class)


def catalog(client_class: type) -> dict[str, list[MethodDescriptor]]:
    """Mapping of normalized operation name to its overloads."""
    return get_catalog(client_class).as_dict()
