from __future__ import annotations

import io
import typing
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from aws_client_bridge.conversion.coercion import CoercionRegistry, default_converters
from aws_client_bridge.conversion.inspector import (
    TypeInspector,
    container_origin,
    find_writable,
    generic_info,
    is_raw_content_type,
    readable_fields,
    unwind_type,
    unwrap_optional,
    writable_fields,
)
from fake_sdk.models import (
    CreateTableRequest,
    KeySchemaElement,
    KeyType,
    ProvisionedThroughput,
    TableDescription,
)


def _inspector(*packages: str) -> TypeInspector:
    registry = CoercionRegistry(default_converters(lambda: "yyyy-MM-dd"))
    return TypeInspector(registry.is_primitive, lambda: packages)


class Widget:
    """Mixes every accessor style."""

    label: str

    def __init__(self) -> None:
        self._size = 0
        self._color: str | None = None
        self._visible = True

    def setSize(self, size: int) -> None:
        self._size = size

    def getSize(self) -> int:
        return self._size

    @property
    def color(self) -> str | None:
        return self._color

    @color.setter
    def color(self, value: str) -> None:
        self._color = value

    def isVisible(self) -> bool:
        return self._visible

    def is_ready(self) -> str:
        return "not a boolean accessor"

    def get_with_argument(self, flag: bool) -> int:
        return 0


def test_unwrap_optional() -> None:
    assert unwrap_optional(Optional[int]) is int
    assert unwrap_optional(int | None) is int
    assert unwrap_optional(int | str) == int | str


def test_container_origin_and_unwinding() -> None:
    assert container_origin(list[str]) is list
    assert container_origin(typing.Mapping[str, int]) is dict
    assert container_origin(typing.Sequence[int]) is list
    assert container_origin(tuple[int, ...]) is tuple
    assert container_origin(str) is None
    assert unwind_type(list[dict[str, list[int]]]) is int
    assert unwind_type(tuple[str, ...]) is str
    assert unwind_type(list) is list


def test_generic_info() -> None:
    info = generic_info(Optional[list[KeySchemaElement]])
    assert info is not None
    assert info.raw is list
    assert info.actual is KeySchemaElement
    assert generic_info(str) is None


def test_raw_content_types() -> None:
    assert is_raw_content_type(bytes)
    assert is_raw_content_type(Path)
    assert is_raw_content_type(io.BytesIO)
    assert is_raw_content_type(typing.BinaryIO)
    assert is_raw_content_type(Optional[bytes])
    assert not is_raw_content_type(str)


def test_writable_fields_cover_methods_properties_and_annotations() -> None:
    by_key = {accessor.key: accessor for accessor in writable_fields(Widget)}
    assert by_key["size"].kind == "method"
    assert by_key["size"].annotation is int
    assert by_key["color"].kind == "property"
    assert by_key["label"].kind == "field"


def test_find_writable_ignores_separators_and_case() -> None:
    for key in ("attribute-name", "attribute_name", "AttributeName"):
        accessor = find_writable(KeySchemaElement, key)
        assert accessor is not None
        assert accessor.name == "attribute-name"
    assert find_writable(KeySchemaElement, "nonexistent") is None


def test_readable_fields_names() -> None:
    names = [accessor.name for accessor in readable_fields(Widget)]
    assert "size" in names
    assert "visible?" in names
    assert "color" in names
    assert "label" in names
    # Non-boolean is_ methods and getters with arguments are not accessors.
    assert "ready" not in names
    assert "with-argument" not in names


def test_readable_fields_of_accessor_model() -> None:
    names = {accessor.name for accessor in readable_fields(TableDescription)}
    assert names == {
        "table-name",
        "table-status",
        "item-count",
        "deletion-protection-enabled?",
        "tags",
        "creation-date-time",
        "key-schema",
    }


def test_readable_fields_of_pydantic_and_dataclass_models() -> None:
    assert [a.name for a in readable_fields(CreateTableRequest)] == [
        "table-name",
        "key-schema",
        "provisioned-throughput",
        "tags",
    ]
    assert [a.name for a in readable_fields(ProvisionedThroughput)] == [
        "read-capacity-units",
        "write-capacity-units",
    ]


class TestTypeInspector:
    def test_family_membership(self) -> None:
        inspector = _inspector("fake_sdk")
        assert inspector.is_model_type(KeySchemaElement)
        assert inspector.is_model_type(Optional[TableDescription])
        assert not _inspector().is_model_type(KeySchemaElement)

    def test_dataclasses_and_pydantic_models_are_always_models(self) -> None:
        @dataclass
        class Local:
            value: int = 0

        inspector = _inspector()
        assert inspector.is_model_type(Local)
        assert inspector.is_model_type(CreateTableRequest)

    def test_primitives_containers_and_raw_content_are_not_models(self) -> None:
        inspector = _inspector("fake_sdk", "builtins", "pathlib")
        for annotation in (str, int, KeyType, list, dict, bytes, Path, list[str], Any):
            assert not inspector.is_model_type(annotation)

    def test_is_model_value(self) -> None:
        inspector = _inspector("fake_sdk")
        assert inspector.is_model_value(KeySchemaElement())
        assert not inspector.is_model_value("text")
