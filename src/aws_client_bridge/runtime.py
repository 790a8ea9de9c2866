"""Runtime configuration shared by every bridged call.

``BridgeConfig`` bundles the coercion registry, the marshaller, the
conversion toggles, the default credential and the client cache. The
module-level helpers operate on a lazily created default instance seeded
from :func:`aws_client_bridge.config.load_settings`.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from typing import Any

from aws_client_bridge.catalog.resolver import OverloadResolver
from aws_client_bridge.config import DEFAULT_DATE_FORMAT, Settings, load_settings
from aws_client_bridge.conversion.builder import ObjectBuilder
from aws_client_bridge.conversion.coercion import CoercionRegistry, Converter, default_converters
from aws_client_bridge.conversion.inspector import TypeInspector
from aws_client_bridge.conversion.marshaller import Marshaller
from aws_client_bridge.credentials.context import Credential, make_credential
from aws_client_bridge.execution.client_factory import ClientFactory

logger = logging.getLogger(__name__)


class BridgeConfig:
    def __init__(
        self,
        *,
        date_format: str = DEFAULT_DATE_FORMAT,
        root_unwrapping: bool = False,
        model_packages: tuple[str, ...] = (),
        default_credential: Credential | None = None,
    ) -> None:
        self.date_format = date_format
        self.root_unwrapping = root_unwrapping
        self.default_credential = default_credential
        self._model_packages: tuple[str, ...] = tuple(model_packages)
        self._packages_lock = threading.Lock()

        self.coercions = CoercionRegistry(default_converters(lambda: self.date_format))
        self.inspector = TypeInspector(self.coercions.is_primitive, lambda: self._model_packages)
        self.builder = ObjectBuilder(self.coercions, self.inspector)
        self.marshaller = Marshaller(self.inspector)
        self.resolver = OverloadResolver(self.inspector)
        self.clients = ClientFactory()

    @classmethod
    def from_settings(cls, settings: Settings) -> "BridgeConfig":
        credential = None
        aws = settings.aws
        if aws.access_key and aws.secret_key:
            credential = Credential(aws.access_key, aws.secret_key, aws.endpoint)
        elif aws.access_key:
            logger.warning("AWS_ACCESS_KEY_ID is set without AWS_SECRET_ACCESS_KEY; ignoring it")
        return cls(
            date_format=settings.conversion.date_format,
            root_unwrapping=settings.conversion.root_unwrapping,
            model_packages=tuple(settings.conversion.model_packages),
            default_credential=credential,
        )

    @property
    def model_packages(self) -> tuple[str, ...]:
        return self._model_packages

    def add_model_package(self, package: str) -> None:
        if package in self._model_packages:
            return
        with self._packages_lock:
            if package not in self._model_packages:
                self._model_packages = (*self._model_packages, package)

    def set_default_credential(
        self,
        access_key: str | None,
        secret_key: str | None,
        endpoint: str | None = None,
    ) -> Credential:
        self.default_credential = make_credential(access_key, secret_key, endpoint)
        return self.default_credential

    def register_coercions(self, *coercions: Any) -> None:
        """Register converters as a mapping or as alternating type/function pairs."""
        if len(coercions) == 1 and isinstance(coercions[0], Mapping):
            self.coercions.register_all(coercions[0])
            return
        if len(coercions) % 2 != 0:
            raise ValueError("register_coercions expects type/function pairs")
        self.coercions.register_all(zip(coercions[0::2], coercions[1::2]))

    def register_marshaller(self, cls: type, func: Callable[[object], object]) -> None:
        self.marshaller.register(cls, func)

    def coerce(self, value: object, target_type: type) -> object:
        return self.coercions.coerce(value, target_type)

    def build(self, target_type: Any, value: object) -> object:
        return self.builder.build(target_type, value)

    def populate(self, instance: object, field_map: Mapping[object, object]) -> object:
        return self.builder.populate(instance, field_map)

    def marshal(self, value: object) -> object:
        return self.marshaller.marshal(value)


_default_config: BridgeConfig | None = None
_default_lock = threading.Lock()


def get_default_config() -> BridgeConfig:
    global _default_config
    if _default_config is None:
        with _default_lock:
            if _default_config is None:
                _default_config = BridgeConfig.from_settings(load_settings())
    return _default_config


def reset_default_config() -> None:
    """Drop the default configuration; the next use rebuilds it from settings."""
    global _default_config
    with _default_lock:
        _default_config = None


def set_date_format(pattern: str) -> None:
    """Pattern used when strings are coerced to dates, e.g. ``"MM-dd-yyyy"``."""
    get_default_config().date_format = pattern


def set_root_unwrapping(enabled: bool) -> None:
    """Collapse single-key top-level results to their only value.

    ``{"table": {"name": "x"}}`` becomes ``{"name": "x"}``.
    """
    get_default_config().root_unwrapping = bool(enabled)


def register_coercions(*coercions: Any) -> None:
    get_default_config().register_coercions(*coercions)


def register_marshaller(cls: type, func: Callable[[object], object]) -> None:
    get_default_config().register_marshaller(cls, func)


def set_default_credential(
    access_key: str | None,
    secret_key: str | None,
    endpoint: str | None = None,
) -> Credential:
    """Credential used by calls that neither pass nor scope one."""
    return get_default_config().set_default_credential(access_key, secret_key, endpoint)


defcredential = set_default_credential


def coerce_value(value: object, target_type: type) -> object:
    return get_default_config().coerce(value, target_type)


def set_fields(instance: object, field_map: Mapping[object, object]) -> object:
    """Populate ``instance`` from ``field_map`` and return it."""
    return get_default_config().populate(instance, field_map)


def marshal(value: object) -> object:
    return get_default_config().marshal(value)


__all__ = [
    "BridgeConfig",
    "Converter",
    "coerce_value",
    "defcredential",
    "get_default_config",
    "marshal",
    "register_coercions",
    "register_marshaller",
    "reset_default_config",
    "set_date_format",
    "set_default_credential",
    "set_fields",
    "set_root_unwrapping",
]
