"""Translation of wrapped-client failures into structured error records."""

from __future__ import annotations

import logging
import traceback
from collections.abc import Mapping

from botocore.exceptions import ClientError

from aws_client_bridge.exceptions import ERROR_RECORD_FIELDS, ServiceError

logger = logging.getLogger(__name__)

_ERROR_TYPES = {
    "sender": "Client",
    "client": "Client",
    "receiver": "Service",
    "server": "Service",
    "service": "Service",
}


def stack_to_string(exc: BaseException) -> str:
    """Formatted traceback of ``exc``."""
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


def _as_mapping(value: object) -> Mapping[str, object]:
    return value if isinstance(value, Mapping) else {}


def _error_type(raw: object, status_code: object) -> str:
    if raw is not None:
        mapped = _ERROR_TYPES.get(str(raw).strip().lower())
        if mapped:
            return mapped
    if isinstance(status_code, int) and not isinstance(status_code, bool):
        if 400 <= status_code < 500:
            return "Client"
        if status_code >= 500:
            return "Service"
    return "Unknown"


def _client_error_fields(exc: ClientError) -> dict[str, object]:
    response = _as_mapping(getattr(exc, "response", None))
    error = _as_mapping(response.get("Error"))
    metadata = _as_mapping(response.get("ResponseMetadata"))
    status_code = metadata.get("HTTPStatusCode")
    return {
        "error-code": error.get("Code"),
        "error-type": _error_type(error.get("Type"), status_code),
        "status-code": status_code,
        "request-id": metadata.get("RequestId"),
        "service-name": getattr(exc, "service_name", None),
        "message": error.get("Message") or str(exc),
    }


def _attribute_fields(exc: BaseException) -> dict[str, object]:
    status_code = getattr(exc, "status_code", None)
    return {
        "error-code": getattr(exc, "error_code", None),
        "error-type": _error_type(getattr(exc, "error_type", None), status_code),
        "status-code": status_code,
        "request-id": getattr(exc, "request_id", None),
        "service-name": getattr(exc, "service_name", None),
        "message": str(exc) or None,
    }


def ex_to_map(exc: BaseException) -> dict[str, object]:
    """Structured record for ``exc`` with every field present.

    Fields the failure does not carry are ``None``.
    """
    if isinstance(exc, ServiceError):
        return dict(exc.record)

    record: dict[str, object] = dict.fromkeys(ERROR_RECORD_FIELDS)
    try:
        if isinstance(exc, ClientError):
            record.update(_client_error_fields(exc))
        else:
            record.update(_attribute_fields(exc))
    except Exception as translate_exc:
        logger.warning("Partial error record for %s: %s", type(exc).__name__, translate_exc)
    try:
        record["stack-trace"] = stack_to_string(exc)
    except Exception as format_exc:
        logger.warning("Cannot format stack trace for %s: %s", type(exc).__name__, format_exc)
    return record


def translate_exception(exc: BaseException) -> ServiceError:
    """Wrap a wrapped-client failure; raise the result ``from exc``."""
    return ServiceError(ex_to_map(exc))
