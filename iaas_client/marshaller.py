"""Marshaller - Flattens an Input model into ordered request parameters.

Output order follows the descriptor's field order. Canonical (sorted) order
is the signer's business and never written back here.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel

from iaas_client.models import Operation
from iaas_client.schema import (
    ArrayStyle,
    FieldDescriptor,
    FieldKind,
    StructDescriptor,
    describe,
    format_scalar,
    format_time,
)

Parameters = list[tuple[str, str]]


def marshal(value: BaseModel, descriptor: StructDescriptor | None = None) -> Parameters:
    """Flatten a model's request fields into (key, value) pairs.

    Read-only: the input is never modified, so marshalling the same value
    twice yields identical lists.
    """
    descriptor = descriptor or describe(type(value))
    params: Parameters = []
    for field in descriptor.request_fields:
        _emit(params, field.wire_name, field, getattr(value, field.attr))
    return params


def build_parameters(operation: Operation, value: BaseModel | None) -> Parameters:
    """Marshal an Input and prefix it with the action and scope properties."""
    params: Parameters = [("action", operation.action)]
    for key, prop in operation.properties.items():
        if prop:
            params.append((key, prop))
    if value is not None:
        params.extend(marshal(value))
    return params


def _emit(params: Parameters, key: str, field: FieldDescriptor, field_value: Any) -> None:
    if field_value is None:
        if field.default is not None:
            params.append((key, field.default))
        return

    kind = field.kind

    if kind is FieldKind.SCALAR:
        params.append((key, format_scalar(field_value)))

    elif kind is FieldKind.TIMESTAMP:
        params.append((key, format_time(field_value, field.time_format)))

    elif kind is FieldKind.ARRAY_OF_SCALAR:
        for index, item in enumerate(field_value, start=1):
            if item is None:
                continue
            item_key = key if field.array_style is ArrayStyle.REPEATED else f"{key}.{index}"
            params.append((item_key, format_scalar(item, field.time_format)))

    elif kind is FieldKind.ARRAY_OF_STRUCT:
        for index, item in enumerate(field_value, start=1):
            if item is None:
                continue
            _emit_struct(params, f"{key}.{index}", item)

    elif kind is FieldKind.NESTED_STRUCT:
        _emit_struct(params, key, field_value)

    elif kind is FieldKind.MAP:
        for map_key, map_value in field_value.items():
            if map_value is None:
                continue
            params.append((f"{key}.{map_key}", format_scalar(map_value, field.time_format)))

    elif kind is FieldKind.ANY:
        # Opaque values go out as compact JSON unless already a string
        if isinstance(field_value, str):
            params.append((key, field_value))
        else:
            params.append((key, json.dumps(field_value, separators=(",", ":"), sort_keys=True)))


def _emit_struct(params: Parameters, prefix: str, value: BaseModel) -> None:
    for sub_field in describe(type(value)).request_fields:
        _emit(params, f"{prefix}.{sub_field.wire_name}", sub_field, getattr(value, sub_field.attr))
