"""Client factory: constructs and caches client instances per credential."""

from __future__ import annotations

import hashlib
import logging
import re
import threading
from dataclasses import dataclass

from botocore.credentials import Credentials

from aws_client_bridge.credentials.context import Credential
from aws_client_bridge.exceptions import ConfigurationError

ClientCacheKey = tuple[type, str]

logger = logging.getLogger(__name__)

_REGION_SEPARATORS = re.compile(r"[-.\s]+")


@dataclass(frozen=True)
class Region:
    """Region derived from an endpoint string.

    ``identifier`` is the upper-case enum style form (``US_WEST_2``), ``name``
    the form botocore uses (``us-west-2``).
    """

    identifier: str
    name: str

    @classmethod
    def from_endpoint(cls, endpoint: str) -> "Region":
        identifier = _REGION_SEPARATORS.sub("_", endpoint.strip()).upper()
        return cls(identifier=identifier, name=identifier.lower().replace("_", "-"))

    def __str__(self) -> str:
        return self.name


def _credential_fingerprint(credential: Credential) -> str:
    material = "\x1f".join(
        (credential.access_key or "", credential.secret_key or "", credential.endpoint or "")
    )
    return hashlib.sha256(material.encode("utf-8")).hexdigest()


def _require_complete(credential: Credential | None) -> Credential:
    if credential is None or not credential.access_key:
        raise ConfigurationError(
            "You must set a default credential before using the api, "
            "or pass a mapping with key 'access-key' as the first argument."
        )
    if not credential.secret_key:
        raise ConfigurationError(
            "You must set a default credential before using the api, "
            "or pass a mapping with key 'secret-key' as the first argument."
        )
    return credential


def _create_client(client_class: type, credential: Credential) -> object:
    aws_credentials = Credentials(credential.access_key, credential.secret_key)
    client = client_class(aws_credentials)
    if credential.endpoint:
        region = Region.from_endpoint(credential.endpoint)
        set_region = getattr(client, "set_region", None)
        if not callable(set_region):
            raise ConfigurationError(
                f"{client_class.__name__} does not support region configuration "
                f"(endpoint '{credential.endpoint}')"
            )
        set_region(region)
    logger.debug("Created %s client for %r", client_class.__name__, credential)
    return client


class ClientFactory:
    """Memoizes client instances by ``(client class, credential)``.

    Construction runs under the cache lock so concurrent first requests for one
    identity build a single instance. Entries live until ``clear()``.
    """

    def __init__(self) -> None:
        self._cache: dict[ClientCacheKey, object] = {}
        self._lock = threading.Lock()

    def get_client(self, client_class: type, credential: Credential | None) -> object:
        credential = _require_complete(credential)
        key = (client_class, _credential_fingerprint(credential))
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        with self._lock:
            cached = self._cache.get(key)
            if cached is None:
                cached = _create_client(client_class, credential)
                self._cache[key] = cached
            return cached

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)
