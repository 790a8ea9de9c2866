"""Credential utilities."""

from aws_client_bridge.credentials.context import (
    Credential,
    get_scoped_credential,
    is_credential_mapping,
    make_credential,
    reset_scoped_credential,
    set_scoped_credential,
    with_credential,
)

__all__ = [
    "Credential",
    "get_scoped_credential",
    "is_credential_mapping",
    "make_credential",
    "reset_scoped_credential",
    "set_scoped_credential",
    "with_credential",
]
