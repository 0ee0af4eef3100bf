"""Validator - Checks an Input model against its schema descriptor.

Fails fast on the first violation. Nested failures propagate unchanged so
the caller sees the field (and owning type) that actually caused them.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from iaas_client.errors import ParameterRequiredError, ParameterValueNotAllowedError
from iaas_client.schema import FieldDescriptor, FieldKind, StructDescriptor, describe, format_scalar


def validate(value: BaseModel, descriptor: StructDescriptor | None = None) -> None:
    """Validate a model instance.

    Args:
        value: The Input (or nested struct) to check.
        descriptor: Precomputed descriptor; derived from the value's type if None.

    Raises:
        ParameterRequiredError: A required field is absent or an empty collection.
        ParameterValueNotAllowedError: A value is outside the field's allowed set.
    """
    descriptor = descriptor or describe(type(value))

    for field in descriptor.fields:
        field_value = getattr(value, field.attr)

        if _is_absent(field, field_value):
            if field.required:
                raise ParameterRequiredError(field.attr, descriptor.type_name)
            continue

        if field.allowed_values:
            _check_allowed(field, field_value)

        if field.kind is FieldKind.NESTED_STRUCT:
            validate(field_value, describe(field.item_type))
        elif field.kind is FieldKind.ARRAY_OF_STRUCT:
            item_descriptor = describe(field.item_type)
            for item in field_value:
                if item is not None:
                    validate(item, item_descriptor)


def _is_absent(field: FieldDescriptor, field_value: Any) -> bool:
    # Required collections must be non-empty, not merely present
    if field_value is None:
        return True
    if field.is_collection and len(field_value) == 0:
        return True
    return False


def _check_allowed(field: FieldDescriptor, field_value: Any) -> None:
    if field.kind is FieldKind.ARRAY_OF_SCALAR:
        candidates = [v for v in field_value if v is not None]
    elif field.kind in (FieldKind.SCALAR, FieldKind.TIMESTAMP):
        candidates = [field_value]
    else:
        return

    for candidate in candidates:
        wire_value = format_scalar(candidate, field.time_format)
        if wire_value not in field.allowed_values:
            raise ParameterValueNotAllowedError(field.attr, wire_value, field.allowed_values)
