"""Expose the operations of typed service clients as functions over plain data."""

import logging

from aws_client_bridge.catalog.methods import catalog
from aws_client_bridge.credentials import Credential, with_credential
from aws_client_bridge.domain.naming import FieldKey
from aws_client_bridge.exceptions import (
    BridgeError,
    CoercionError,
    ConfigurationError,
    DateParseError,
    NoMatchingEnumValueError,
    NoMatchingOverloadError,
    ServiceError,
    UnregisteredTypeError,
)
from aws_client_bridge.execution.interning import intern_client, make_operation, set_client
from aws_client_bridge.execution.translator import ex_to_map
from aws_client_bridge.logging_utils import configure_logging
from aws_client_bridge.runtime import (
    BridgeConfig,
    coerce_value,
    defcredential,
    marshal,
    register_coercions,
    register_marshaller,
    set_date_format,
    set_default_credential,
    set_fields,
    set_root_unwrapping,
)

__all__ = [
    "BridgeConfig",
    "BridgeError",
    "CoercionError",
    "ConfigurationError",
    "Credential",
    "DateParseError",
    "FieldKey",
    "NoMatchingEnumValueError",
    "NoMatchingOverloadError",
    "ServiceError",
    "UnregisteredTypeError",
    "catalog",
    "coerce_value",
    "configure_logging",
    "defcredential",
    "ex_to_map",
    "intern_client",
    "make_operation",
    "marshal",
    "register_coercions",
    "register_marshaller",
    "set_client",
    "set_date_format",
    "set_default_credential",
    "set_fields",
    "set_root_unwrapping",
    "with_credential",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
