"""Selection of the overload that accepts a call's arguments.

Rules, first match wins, overloads tried in catalog order:

1. ``empty``: the overload declares no parameters and no argument is supplied.
   A call without arguments prefers such an overload over every other one.
2. ``request``: the arguments form a request-object pattern (see
   :meth:`OverloadResolver.is_request_pattern`).
3. ``named``: optional leading positional values followed by
   ``FieldKey``/value pairs. The leading values fill the first parameters, the
   keys name later declared parameters, and every required parameter is
   covered.
4. ``positional``: no argument is a ``FieldKey``, the argument count fits the
   declared parameters and the first declared parameter is not a model type.
5. ``instances``: no argument is a ``FieldKey``, the argument count fits and
   every argument is already an instance of its declared parameter type.

An argument count "fits" when it lies between the number of required
parameters and the number of declared parameters.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from aws_client_bridge.conversion.inspector import (
    TypeInspector,
    is_raw_content_type,
    unwrap_optional,
)
from aws_client_bridge.domain.naming import FieldKey, match_key
from aws_client_bridge.domain.operations import MethodDescriptor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CallShape:
    descriptor: MethodDescriptor
    mode: str


def _required_count(descriptor: MethodDescriptor) -> int:
    return sum(1 for param in descriptor.parameters if not param.has_default)


def _fits(descriptor: MethodDescriptor, count: int) -> bool:
    return _required_count(descriptor) <= count <= descriptor.arity


def split_named_arguments(args: Sequence[object]) -> tuple[tuple[object, ...], tuple[object, ...]]:
    """Split ``args`` into leading positional values and trailing key/value pairs.

    The pairs start at the first ``FieldKey``; without one they are empty.
    """
    for index, arg in enumerate(args):
        if isinstance(arg, FieldKey):
            return tuple(args[:index]), tuple(args[index:])
    return tuple(args), ()


class OverloadResolver:
    def __init__(self, inspector: TypeInspector) -> None:
        self._inspector = inspector

    def is_request_pattern(self, descriptor: MethodDescriptor, args: Sequence[object]) -> bool:
        """Whether flat key/value ``args`` should build one request object.

        True when more than one argument is supplied, the overload declares a
        parameter, the argument count is even or the last parameter takes raw
        content, some argument is a ``FieldKey``, and the first or last
        parameter is a model type. An odd-length list never matches unless the
        last parameter takes raw content.
        """
        types = descriptor.parameter_types
        if len(args) <= 1 or not types:
            return False
        if len(args) % 2 != 0 and not is_raw_content_type(types[-1]):
            return False
        if not any(isinstance(arg, FieldKey) for arg in args):
            return False
        return self._inspector.is_model_type(types[0]) or self._inspector.is_model_type(types[-1])

    def _is_named_call(self, descriptor: MethodDescriptor, args: Sequence[object]) -> bool:
        leading, pairs = split_named_arguments(args)
        if not pairs or len(pairs) % 2 != 0 or len(leading) > descriptor.arity:
            return False
        keys = pairs[0::2]
        if not all(isinstance(key, FieldKey) for key in keys):
            return False
        filled = descriptor.parameters[: len(leading)]
        if any(param.kind is inspect.Parameter.KEYWORD_ONLY for param in filled):
            return False
        declared = {
            match_key(param.name): param for param in descriptor.parameters[len(leading):]
        }
        supplied = {match_key(key) for key in keys}
        if len(supplied) != len(keys) or not supplied <= declared.keys():
            return False
        return all(
            param.has_default or key in supplied for key, param in declared.items()
        )

    def _all_instances(self, descriptor: MethodDescriptor, args: Sequence[object]) -> bool:
        for param, arg in zip(descriptor.parameters, args):
            annotation = unwrap_optional(param.annotation)
            if not isinstance(annotation, type) or not isinstance(arg, annotation):
                return False
        return True

    def match(self, descriptor: MethodDescriptor, args: Sequence[object]) -> CallShape | None:
        if not args and descriptor.arity == 0:
            return CallShape(descriptor, "empty")
        if self.is_request_pattern(descriptor, args):
            return CallShape(descriptor, "request")
        if self._is_named_call(descriptor, args):
            return CallShape(descriptor, "named")
        if _fits(descriptor, len(args)) and not any(isinstance(arg, FieldKey) for arg in args):
            if not self._inspector.is_model_type(descriptor.parameter_types[0]):
                return CallShape(descriptor, "positional")
            if self._all_instances(descriptor, args):
                return CallShape(descriptor, "instances")
        return None

    def resolve_call(
        self,
        overloads: Sequence[MethodDescriptor],
        args: Sequence[object],
    ) -> CallShape | None:
        if not args:
            for descriptor in overloads:
                if descriptor.arity == 0:
                    return CallShape(descriptor, "empty")
        for descriptor in overloads:
            shape = self.match(descriptor, args)
            if shape is not None:
                logger.debug("Resolved %s to %s (%s)", descriptor.name, descriptor.key, shape.mode)
                return shape
        return None

    def resolve(
        self,
        overloads: Sequence[MethodDescriptor],
        args: Sequence[object],
    ) -> MethodDescriptor | None:
        shape = self.resolve_call(overloads, args)
        return shape.descriptor if shape is not None else None
