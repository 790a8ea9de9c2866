"""Interning of client operations as plain functions."""

from __future__ import annotations

import importlib
import inspect
import logging
from collections.abc import Callable, Mapping, MutableMapping, Sequence
from types import ModuleType

from aws_client_bridge.catalog.methods import get_catalog
from aws_client_bridge.catalog.resolver import CallShape, split_named_arguments
from aws_client_bridge.conversion.marshaller import unwrap_root
from aws_client_bridge.credentials.context import (
    Credential,
    get_scoped_credential,
    is_credential_mapping,
)
from aws_client_bridge.domain.naming import FieldKey, match_key, to_identifier
from aws_client_bridge.domain.operations import MethodDescriptor, ParameterInfo
from aws_client_bridge.exceptions import NoMatchingOverloadError
from aws_client_bridge.execution.translator import translate_exception
from aws_client_bridge.runtime import BridgeConfig, get_default_config

Namespace = ModuleType | str | MutableMapping[str, object]

logger = logging.getLogger(__name__)


def split_arguments(
    args: Sequence[object],
    kwargs: Mapping[str, object],
) -> tuple[Credential | None, tuple[object, ...]]:
    """Separate the optional leading credential from the call arguments.

    A lone mapping argument and keyword arguments become ``FieldKey``/value
    pairs. Keyword pairs follow any positional arguments, so
    ``op("users", consistent_read=True)`` binds ``"users"`` to the first
    parameter and ``consistent_read`` by name.
    """
    remaining = list(args)
    credential: Credential | None = None
    if remaining and isinstance(remaining[0], Credential):
        credential = remaining.pop(0)
    elif remaining and is_credential_mapping(remaining[0]):
        credential = Credential.from_mapping(remaining.pop(0))

    if len(remaining) == 1 and isinstance(remaining[0], Mapping):
        pairs = remaining.pop(0)
        for key, value in pairs.items():
            remaining.extend((FieldKey(key), value))
    for key, value in kwargs.items():
        remaining.extend((FieldKey(key), value))
    return credential, tuple(remaining)


def bind_arguments(
    parameters: Sequence[ParameterInfo],
    values: Mapping[int, object],
) -> tuple[list[object], dict[str, object]]:
    """Positional and keyword arguments for the parameters given in ``values``.

    Parameters with defaults that have no value are left out; parameters after
    such a gap are passed by name.
    """
    call_args: list[object] = []
    call_kwargs: dict[str, object] = {}
    by_name = False
    for index, param in enumerate(parameters):
        if index not in values and param.has_default:
            by_name = True
            continue
        value = values.get(index)
        if param.kind is inspect.Parameter.KEYWORD_ONLY or (
            by_name and param.kind is not inspect.Parameter.POSITIONAL_ONLY
        ):
            call_kwargs[param.name] = value
        else:
            call_args.append(value)
    return call_args, call_kwargs


def _request_values(
    config: BridgeConfig,
    descriptor: MethodDescriptor,
    args: Sequence[object],
) -> dict[int, object]:
    types = descriptor.parameter_types
    pair_args = list(args)
    values: dict[int, object] = {}
    if len(pair_args) % 2 != 0:
        # Trailing raw payload, e.g. a file to upload.
        values[len(types) - 1] = config.builder.convert(types[-1], pair_args.pop())

    model_index = 0 if config.inspector.is_model_type(types[0]) else len(types) - 1
    fields = dict(zip(pair_args[0::2], pair_args[1::2]))
    values[model_index] = config.builder.build(types[model_index], fields)
    for index, param in enumerate(descriptor.parameters):
        if index not in values and not param.has_default:
            values[index] = None
    return values


def _named_values(
    config: BridgeConfig,
    descriptor: MethodDescriptor,
    args: Sequence[object],
) -> dict[int, object]:
    leading, pairs = split_named_arguments(args)
    parameters = descriptor.parameters
    values: dict[int, object] = {
        index: config.builder.convert(parameters[index].annotation, value)
        for index, value in enumerate(leading)
    }
    positions = {
        match_key(param.name): index
        for index, param in enumerate(parameters)
        if index >= len(leading)
    }
    for key, value in zip(pairs[0::2], pairs[1::2]):
        index = positions[match_key(key)]
        values[index] = config.builder.convert(parameters[index].annotation, value)
    return values


def prepare_arguments(
    config: BridgeConfig,
    shape: CallShape,
    args: Sequence[object],
) -> tuple[list[object], dict[str, object]]:
    descriptor = shape.descriptor
    if shape.mode == "empty":
        return [], {}
    if shape.mode == "request":
        values = _request_values(config, descriptor, args)
    elif shape.mode == "named":
        values = _named_values(config, descriptor, args)
    else:
        values = {
            index: config.builder.convert(param.annotation, value)
            for index, (param, value) in enumerate(zip(descriptor.parameters, args))
        }
    return bind_arguments(descriptor.parameters, values)


def _root_package(client_class: type) -> str:
    return client_class.__module__.split(".")[0]


def _check_binding(
    method: Callable[..., object],
    args: Sequence[object],
    kwargs: Mapping[str, object],
) -> None:
    """Raise ``TypeError`` before the call when the arguments do not bind."""
    try:
        signature = inspect.signature(method)
    except (TypeError, ValueError):
        # Builtins without introspectable signatures are bound by the call itself.
        return
    signature.bind(*args, **kwargs)


def invoke_operation(
    client_class: type,
    name: str,
    overloads: Sequence[MethodDescriptor],
    args: Sequence[object],
    kwargs: Mapping[str, object],
    config: BridgeConfig | None = None,
) -> object:
    """Run one bridged call of operation ``name`` on ``client_class``."""
    config = config or get_default_config()
    config.add_model_package(_root_package(client_class))

    credential, call_args = split_arguments(args, kwargs)
    effective = get_scoped_credential() or credential or config.default_credential

    shape = config.resolver.resolve_call(overloads, call_args)
    if shape is None:
        raise NoMatchingOverloadError(name, call_args)

    client = config.clients.get_client(client_class, effective)
    positional, keywords = prepare_arguments(config, shape, call_args)
    method = getattr(client, shape.descriptor.raw_name)
    _check_binding(method, positional, keywords)
    try:
        result = method(*positional, **keywords)
    except Exception as exc:
        logger.debug("%s.%s failed: %s", client_class.__name__, shape.descriptor.raw_name, exc)
        raise translate_exception(exc) from exc

    value = config.marshaller.marshal(result)
    if config.root_unwrapping:
        value = unwrap_root(value)
    return value


def _docstring(client_class: type, name: str, overloads: Sequence[MethodDescriptor]) -> str:
    lines = [f"Bridged '{name}' operation of {client_class.__name__}.", "", "Overloads:"]
    for descriptor in overloads:
        params = ", ".join(
            f"{param.name}: {getattr(param.annotation, '__name__', param.annotation)}"
            for param in descriptor.parameters
        )
        lines.append(f"    {descriptor.raw_name}({params})")
    return "\n".join(lines)


def make_operation(
    client_class: type,
    name: str,
    overloads: Sequence[MethodDescriptor],
    config: BridgeConfig | None = None,
) -> Callable[..., object]:
    """Function calling ``name`` on ``client_class`` with generic data.

    Without an explicit ``config`` the default configuration is looked up on
    every call.
    """
    captured = tuple(overloads)

    def operation(*args: object, **kwargs: object) -> object:
        return invoke_operation(client_class, name, captured, args, kwargs, config)

    operation.__name__ = to_identifier(name)
    operation.__qualname__ = to_identifier(name)
    operation.__doc__ = _docstring(client_class, name, captured)
    operation.operation_name = name
    operation.overloads = captured
    return operation


def _resolve_namespace(namespace: Namespace) -> MutableMapping[str, object]:
    if isinstance(namespace, str):
        namespace = importlib.import_module(namespace)
    if isinstance(namespace, ModuleType):
        return vars(namespace)
    return namespace


def intern_client(
    client_class: type,
    namespace: Namespace,
    config: BridgeConfig | None = None,
) -> dict[str, Callable[..., object]]:
    """Define one function per public operation of ``client_class`` in ``namespace``.

    ``namespace`` is a module, a module name, or a mutable mapping such as
    ``globals()``. Returns the functions keyed by their Python names.
    """
    target = _resolve_namespace(namespace)
    functions: dict[str, Callable[..., object]] = {}
    for name, overloads in get_catalog(client_class).as_dict().items():
        function = make_operation(client_class, name, overloads, config)
        functions[function.__name__] = function
    target.update(functions)
    logger.info("Interned %d operations of %s", len(functions), client_class.__name__)
    return functions


set_client = intern_client
