"""Domain objects describing client operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ParameterInfo:
    name: str
    annotation: Any
    kind: Any
    has_default: bool = False


@dataclass(frozen=True)
class GenericInfo:
    """Parameterized type metadata for a container parameter.

    ``raw`` is the container origin (``list``, ``dict`` ...), ``actual`` the
    innermost element type after unwinding nested containers.
    """

    generic: Any
    raw: Any
    actual: Any


@dataclass(frozen=True)
class MethodDescriptor:
    name: str
    raw_name: str
    parameters: tuple[ParameterInfo, ...]
    return_type: Any = None
    generic: GenericInfo | None = None
    overload_index: int | None = None

    @property
    def parameter_types(self) -> tuple[Any, ...]:
        return tuple(param.annotation for param in self.parameters)

    @property
    def arity(self) -> int:
        return len(self.parameters)

    @property
    def key(self) -> str:
        if self.overload_index is None:
            return f"{self.name}:{self.raw_name}"
        return f"{self.name}:{self.raw_name}#{self.overload_index}"
