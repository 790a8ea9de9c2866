from __future__ import annotations

import types

import pytest

from aws_client_bridge import config
from aws_client_bridge.credentials import Credential
from aws_client_bridge.execution.interning import intern_client
from aws_client_bridge.runtime import BridgeConfig, reset_default_config
from fake_sdk.client import FakeDatabaseClient

_ENV_VARS = (
    "LOG_LEVEL",
    "LOG_FILE",
    "BRIDGE_DATE_FORMAT",
    "BRIDGE_ROOT_UNWRAPPING",
    "BRIDGE_MODEL_PACKAGES",
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_REGION",
    "AWS_DEFAULT_REGION",
)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # A developer's .env must not leak into the tests.
    monkeypatch.setattr(config, "load_dotenv", lambda **_: None)
    config._load_settings_cached.cache_clear()
    reset_default_config()
    FakeDatabaseClient.constructed.clear()
    yield
    config._load_settings_cached.cache_clear()
    reset_default_config()
    FakeDatabaseClient.constructed.clear()


@pytest.fixture
def credential() -> Credential:
    return Credential("AKIAFAKEACCESSKEY", "fake-secret-key")


@pytest.fixture
def bridge_config(credential: Credential) -> BridgeConfig:
    return BridgeConfig(model_packages=("fake_sdk",), default_credential=credential)


@pytest.fixture
def ops(bridge_config: BridgeConfig) -> types.ModuleType:
    module = types.ModuleType("fake_database_ops")
    intern_client(FakeDatabaseClient, module, config=bridge_config)
    return module
