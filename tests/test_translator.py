from __future__ import annotations

from unittest.mock import patch

from botocore.exceptions import ClientError

from aws_client_bridge.exceptions import ERROR_RECORD_FIELDS, ServiceError
from aws_client_bridge.execution.translator import ex_to_map, translate_exception
from fake_sdk.models import FakeServiceException


def _client_error(error_type: str | None = "Sender", status: int = 400) -> ClientError:
    error = {"Code": "ThrottlingException", "Message": "Rate exceeded"}
    if error_type is not None:
        error["Type"] = error_type
    try:
        raise ClientError(
            {"Error": error, "ResponseMetadata": {"HTTPStatusCode": status, "RequestId": "req-42"}},
            "Query",
        )
    except ClientError as exc:
        return exc


def test_client_error_record() -> None:
    record = ex_to_map(_client_error())

    assert tuple(record) == ERROR_RECORD_FIELDS
    assert record["error-code"] == "ThrottlingException"
    assert record["error-type"] == "Client"
    assert record["status-code"] == 400
    assert record["request-id"] == "req-42"
    assert record["message"] == "Rate exceeded"
    assert record["service-name"] is None
    assert "ClientError" in record["stack-trace"]


def test_error_type_falls_back_to_status_class() -> None:
    assert ex_to_map(_client_error(None, 503))["error-type"] == "Service"
    assert ex_to_map(_client_error(None, 404))["error-type"] == "Client"
    assert ex_to_map(_client_error("Receiver", 500))["error-type"] == "Service"


def test_attribute_based_exception() -> None:
    exc = FakeServiceException("busy", error_code="ClusterBusy", status_code=503, request_id="r-1")
    record = ex_to_map(exc)
    assert record["error-code"] == "ClusterBusy"
    assert record["error-type"] == "Service"
    assert record["service-name"] == "FakeDatabase"
    assert record["message"] == "busy"


def test_plain_exception_has_every_field() -> None:
    record = ex_to_map(ValueError())
    assert set(record) == set(ERROR_RECORD_FIELDS)
    assert record["error-code"] is None
    assert record["error-type"] == "Unknown"
    assert record["message"] is None
    assert record["stack-trace"].startswith("ValueError")


def test_malformed_response_does_not_raise() -> None:
    exc = _client_error()
    exc.response = {"Error": "not a mapping", "ResponseMetadata": None}
    record = ex_to_map(exc)
    assert record["error-code"] is None
    assert record["status-code"] is None
    assert record["error-type"] == "Unknown"


@patch("aws_client_bridge.execution.translator._attribute_fields", side_effect=KeyError("broken"))
@patch("aws_client_bridge.execution.translator.logger")
def test_translation_failures_are_logged_not_raised(mock_logger, _mock_fields) -> None:
    record = ex_to_map(RuntimeError("boom"))
    assert record["message"] is None
    assert record["stack-trace"]
    mock_logger.warning.assert_called_once()


def test_translate_exception_wraps_record() -> None:
    original = _client_error()
    error = translate_exception(original)
    assert isinstance(error, ServiceError)
    assert error.error_code == "ThrottlingException"
    assert error.status_code == 400
    assert error.request_id == "req-42"
    assert error.error_type == "Client"
    assert str(error) == "Rate exceeded"
    assert ex_to_map(error) == dict(error.record)
