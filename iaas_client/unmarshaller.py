"""Unmarshaller - Maps JSON responses onto typed Output models.

Every response is a JSON object with at least `action` and `ret_code`.
A non-zero ret_code is a ServiceError; anything that is not such an object
is a DecodeError. Fields are matched by wire name; unknown keys are
ignored and missing keys stay absent on the Output.
"""

from __future__ import annotations

import json
import logging
from email.utils import parsedate_to_datetime
from typing import Any, TypeVar

import pydantic
from jsonschema import Draft4Validator
from pydantic import BaseModel

from iaas_client.errors import DecodeError, ServiceError
from iaas_client.models import RawResponse
from iaas_client.schema import RFC822, FieldDescriptor, FieldKind, StructDescriptor, describe

logger = logging.getLogger(__name__)

OutputT = TypeVar("OutputT", bound=BaseModel)

ENVELOPE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["action", "ret_code"],
    "properties": {
        "action": {"type": "string"},
        "ret_code": {"type": "integer"},
        "message": {"type": "string"},
    },
}

_ENVELOPE_VALIDATOR = Draft4Validator(ENVELOPE_SCHEMA)


def unmarshal(content: bytes | str, output_type: type[OutputT]) -> OutputT:
    """Decode a response body into an Output model.

    Raises:
        ServiceError: The envelope carries a non-zero ret_code.
        DecodeError: The body is not a well-formed envelope for output_type.
    """
    body = parse_body(content)
    check_envelope(body)
    return decode_struct(body, describe(output_type))


def unpack(raw: RawResponse, output_type: type[OutputT]) -> OutputT:
    """Decode a dispatcher response, taking the HTTP status into account."""
    status = raw.status_code
    ok = 200 <= status < 300

    logger.info("Response: HTTP %d in %.1fms", status, raw.elapsed_ms)
    logger.debug("Response body: %s", raw.content[:4096].decode("utf-8", errors="replace"))

    try:
        body = parse_body(raw.content)
    except DecodeError as e:
        if ok:
            raise DecodeError(str(e), status_code=status) from e
        raise DecodeError(f"HTTP {status} without a JSON envelope", status_code=status) from e

    check_envelope(body, status_code=status)
    if not ok:
        raise DecodeError(f"HTTP {status} with a successful ret_code", status_code=status)

    return decode_struct(body, describe(output_type))


def parse_body(content: bytes | str) -> dict[str, Any]:
    """Parse a response body that must be a JSON object."""
    if not content:
        raise DecodeError("Empty response body")
    try:
        body = json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(f"Invalid JSON in response: {e}") from e

    if not isinstance(body, dict):
        raise DecodeError(f"Response must be a JSON object, got {type(body).__name__}")
    return body


def check_envelope(body: dict[str, Any], status_code: int | None = None) -> None:
    """Raise ServiceError for a non-zero ret_code, DecodeError for a broken envelope."""
    ret_code = body.get("ret_code")
    if isinstance(ret_code, int) and not isinstance(ret_code, bool) and ret_code != 0:
        message = body.get("message")
        raise ServiceError(
            ret_code,
            message if isinstance(message, str) else "",
            action=body.get("action") if isinstance(body.get("action"), str) else None,
        )

    errors = sorted(_ENVELOPE_VALIDATOR.iter_errors(body), key=lambda e: list(e.absolute_path))
    if errors:
        raise DecodeError(f"Unexpected response envelope: {errors[0].message}", status_code=status_code)


def decode_struct(data: dict[str, Any], descriptor: StructDescriptor) -> Any:
    """Build a model from the wire keys present in data."""
    values: dict[str, Any] = {}
    for field in descriptor.response_fields:
        if field.wire_name not in data:
            continue
        values[field.attr] = _decode_value(field, data[field.wire_name], descriptor.type_name)

    try:
        return descriptor.model_type.model_validate(values)
    except pydantic.ValidationError as e:
        raise DecodeError(f"Response does not match {descriptor.type_name}: {e}") from e


def _decode_value(field: FieldDescriptor, value: Any, owner: str) -> Any:
    if value is None:
        return None

    kind = field.kind

    if kind is FieldKind.NESTED_STRUCT:
        if not isinstance(value, dict):
            raise DecodeError(f"{owner}.{field.attr}: expected an object, got {type(value).__name__}")
        return decode_struct(value, describe(field.item_type))

    if kind is FieldKind.ARRAY_OF_STRUCT:
        if not isinstance(value, list):
            raise DecodeError(f"{owner}.{field.attr}: expected an array, got {type(value).__name__}")
        item_descriptor = describe(field.item_type)
        decoded: list[Any] = []
        for item in value:
            if item is None:
                decoded.append(None)
            elif isinstance(item, dict):
                decoded.append(decode_struct(item, item_descriptor))
            else:
                raise DecodeError(
                    f"{owner}.{field.attr}: expected objects, got {type(item).__name__}"
                )
        return decoded

    if kind is FieldKind.TIMESTAMP and field.time_format == RFC822 and isinstance(value, str):
        try:
            return parsedate_to_datetime(value)
        except (TypeError, ValueError) as e:
            raise DecodeError(f"{owner}.{field.attr}: invalid RFC 822 time {value!r}") from e

    # Scalars, ISO 8601 timestamps, maps and opaque values are coerced by pydantic
    return value
