"""Credentials and their per-call scoped override."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass

from aws_client_bridge.domain.naming import match_key
from aws_client_bridge.exceptions import ConfigurationError

_ACCESS_KEY = match_key("access-key")
_SECRET_KEY = match_key("secret-key")
_ENDPOINT = match_key("endpoint")


@dataclass(frozen=True)
class Credential:
    """Immutable access key / secret key pair with an optional endpoint.

    Equal credentials hash equally, so a credential is usable as part of a
    client cache key.
    """

    access_key: str | None
    secret_key: str | None
    endpoint: str | None = None

    def __repr__(self) -> str:
        masked = f"{self.access_key[:8]}***" if self.access_key else None
        return f"Credential(access_key={masked!r}, endpoint={self.endpoint!r})"

    def __str__(self) -> str:
        return self.__repr__()

    @property
    def is_complete(self) -> bool:
        return bool(self.access_key) and bool(self.secret_key)

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> "Credential":
        """Accepts ``access-key``, ``access_key`` or ``accessKey`` style keys."""
        values = {match_key(key): value for key, value in data.items()}
        endpoint = values.get(_ENDPOINT)
        return cls(
            access_key=_as_text(values.get(_ACCESS_KEY)),
            secret_key=_as_text(values.get(_SECRET_KEY)),
            endpoint=_as_text(endpoint) if endpoint else None,
        )


def _as_text(value: object) -> str | None:
    return None if value is None else str(value)


def is_credential_mapping(value: object) -> bool:
    return isinstance(value, Mapping) and any(
        isinstance(key, str) and match_key(key) == _ACCESS_KEY for key in value
    )


def make_credential(
    access_key: str | None,
    secret_key: str | None,
    endpoint: str | None = None,
) -> Credential:
    """Build a credential, requiring the secret key."""
    if not secret_key:
        raise ConfigurationError("secret-key is required")
    return Credential(access_key=access_key, secret_key=secret_key, endpoint=endpoint or None)


_scoped_credential: ContextVar[Credential | None] = ContextVar(
    "scoped_credential",
    default=None,
)


def set_scoped_credential(credential: Credential) -> Token[Credential | None]:
    """Set the scoped credential and return the reset token."""
    return _scoped_credential.set(credential)


def reset_scoped_credential(token: Token[Credential | None]) -> None:
    _scoped_credential.reset(token)


def get_scoped_credential() -> Credential | None:
    return _scoped_credential.get()


@contextmanager
def with_credential(
    access_key: str | None,
    secret_key: str | None,
    endpoint: str | None = None,
) -> Iterator[Credential]:
    """Bind a credential for every bridged call made inside the block.

    The binding takes precedence over both the credential passed to a call and
    the process-wide default. It is confined to the current thread or task.
    """
    credential = make_credential(access_key, secret_key, endpoint)
    token = set_scoped_credential(credential)
    try:
        yield credential
    finally:
        reset_scoped_credential(token)
