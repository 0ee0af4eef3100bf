"""Schema - Wire metadata and per-type schema descriptors.

Input and Output models are plain pydantic models whose fields carry a Wire
marker in their Annotated metadata:

    class CreateCacheInput(BaseModel):
        cache_size: Annotated[int | None, param("cache_size", required=True)] = None

describe() turns a model class into a StructDescriptor once and caches it,
so validation, marshalling and unmarshalling never inspect annotations per
call.
"""

from __future__ import annotations

import functools
import inspect
import types
import typing
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime
from enum import Enum
from typing import Any, Iterable, Union

from pydantic import BaseModel, ConfigDict

from iaas_client.errors import SchemaError

ISO8601 = "ISO 8601"
RFC822 = "RFC 822"

_SCALAR_TYPES = (str, int, float, bool)

# Model configs for catalogue types. Inputs are immutable and reject unknown
# fields; outputs tolerate provider additions and numeric ids sent as numbers.
INPUT_CONFIG = ConfigDict(extra="forbid", frozen=True)
OUTPUT_CONFIG = ConfigDict(extra="ignore", frozen=True, coerce_numbers_to_str=True)


class Placement(str, Enum):
    """Which side of the exchange a field belongs to."""

    REQUEST = "request"  # location:"params"
    RESPONSE = "response"  # location:"elements"


class FieldKind(str, Enum):
    """Shape of a field value."""

    SCALAR = "scalar"
    TIMESTAMP = "timestamp"
    NESTED_STRUCT = "nested_struct"
    ARRAY_OF_SCALAR = "array_of_scalar"
    ARRAY_OF_STRUCT = "array_of_struct"
    MAP = "map"
    ANY = "any"  # opaque JSON, passed through untouched


class ArrayStyle(str, Enum):
    """How an array is flattened into request parameters."""

    INDEXED = "indexed"  # key.1=a&key.2=b
    REPEATED = "repeated"  # key=a&key=b


@dataclass(frozen=True)
class Wire:
    """Wire metadata attached to a model field via Annotated."""

    name: str
    placement: Placement | None = None
    required: bool = False
    default: str | None = None
    allowed: tuple[str, ...] = ()
    style: ArrayStyle = ArrayStyle.INDEXED
    time_format: str = ISO8601


def _allowed(values: Iterable[Any] | None) -> tuple[str, ...]:
    if not values:
        return ()
    return tuple(format_scalar(v) for v in values)


def param(
    name: str,
    *,
    required: bool = False,
    default: Any = None,
    allowed: Iterable[Any] | None = None,
    style: ArrayStyle = ArrayStyle.INDEXED,
    time_format: str = ISO8601,
) -> Wire:
    """Mark a request parameter field."""
    return Wire(
        name=name,
        placement=Placement.REQUEST,
        required=required,
        default=None if default is None else format_scalar(default),
        allowed=_allowed(allowed),
        style=style,
        time_format=time_format,
    )


def element(name: str, *, allowed: Iterable[Any] | None = None, time_format: str = ISO8601) -> Wire:
    """Mark a response element field."""
    return Wire(
        name=name,
        placement=Placement.RESPONSE,
        allowed=_allowed(allowed),
        time_format=time_format,
    )


def wire(
    name: str,
    *,
    required: bool = False,
    allowed: Iterable[Any] | None = None,
    style: ArrayStyle = ArrayStyle.INDEXED,
    time_format: str = ISO8601,
) -> Wire:
    """Mark a field of a nested struct (placement follows the parent)."""
    return Wire(
        name=name,
        required=required,
        allowed=_allowed(allowed),
        style=style,
        time_format=time_format,
    )


# =============================================================================
# Descriptors
# =============================================================================


@dataclass(frozen=True)
class FieldDescriptor:
    """Static metadata for one model field."""

    attr: str
    wire_name: str
    placement: Placement | None
    required: bool
    default: str | None
    allowed_values: tuple[str, ...]
    kind: FieldKind
    array_style: ArrayStyle = ArrayStyle.INDEXED
    item_type: type[BaseModel] | None = None
    time_format: str = ISO8601

    @property
    def is_collection(self) -> bool:
        return self.kind in (FieldKind.ARRAY_OF_SCALAR, FieldKind.ARRAY_OF_STRUCT, FieldKind.MAP)


@dataclass(frozen=True)
class StructDescriptor:
    """Ordered field descriptors for one model class."""

    type_name: str
    model_type: type[BaseModel]
    fields: tuple[FieldDescriptor, ...]

    def field(self, attr: str) -> FieldDescriptor:
        for descriptor in self.fields:
            if descriptor.attr == attr:
                return descriptor
        raise KeyError(attr)

    @property
    def request_fields(self) -> tuple[FieldDescriptor, ...]:
        return tuple(f for f in self.fields if f.placement is not Placement.RESPONSE)

    @property
    def response_fields(self) -> tuple[FieldDescriptor, ...]:
        return tuple(f for f in self.fields if f.placement is not Placement.REQUEST)


@functools.lru_cache(maxsize=None)
def describe(model_type: type[BaseModel]) -> StructDescriptor:
    """Build (once) the descriptor for a model class.

    Raises:
        SchemaError: If a field has no Wire metadata or an unsupported type.
    """
    if not (inspect.isclass(model_type) and issubclass(model_type, BaseModel)):
        raise SchemaError(f"{model_type!r} is not a pydantic model")

    fields: list[FieldDescriptor] = []
    for attr, field_info in model_type.model_fields.items():
        markers = [m for m in field_info.metadata if isinstance(m, Wire)]
        if len(markers) != 1:
            raise SchemaError(
                f"{model_type.__name__}.{attr} must carry exactly one wire marker, "
                f"found {len(markers)}"
            )
        marker = markers[0]
        kind, item_type = _infer_kind(field_info.annotation, f"{model_type.__name__}.{attr}")
        fields.append(
            FieldDescriptor(
                attr=attr,
                wire_name=marker.name,
                placement=marker.placement,
                required=marker.required,
                default=marker.default,
                allowed_values=marker.allowed,
                kind=kind,
                array_style=marker.style,
                item_type=item_type,
                time_format=marker.time_format,
            )
        )

    return StructDescriptor(
        type_name=model_type.__name__,
        model_type=model_type,
        fields=tuple(fields),
    )


def _strip_optional(annotation: Any, where: str) -> Any:
    origin = typing.get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) != 1:
            raise SchemaError(f"{where}: union types are not supported ({annotation!r})")
        return args[0]
    return annotation


def _is_model(annotation: Any) -> bool:
    return inspect.isclass(annotation) and issubclass(annotation, BaseModel)


def _infer_kind(annotation: Any, where: str) -> tuple[FieldKind, type[BaseModel] | None]:
    annotation = _strip_optional(annotation, where)

    if annotation is Any:
        return FieldKind.ANY, None
    if annotation is datetime:
        return FieldKind.TIMESTAMP, None
    if _is_model(annotation):
        return FieldKind.NESTED_STRUCT, annotation
    if annotation in _SCALAR_TYPES:
        return FieldKind.SCALAR, None

    origin = typing.get_origin(annotation)
    if origin is list:
        args = typing.get_args(annotation)
        item = _strip_optional(args[0], where) if args else Any
        if item is Any:
            return FieldKind.ANY, None
        if _is_model(item):
            return FieldKind.ARRAY_OF_STRUCT, item
        if item in _SCALAR_TYPES or item is datetime:
            return FieldKind.ARRAY_OF_SCALAR, None
    elif origin is dict:
        return FieldKind.MAP, None

    raise SchemaError(f"{where}: unsupported field type {annotation!r}")


# =============================================================================
# Scalar formatting
# =============================================================================


def format_time(value: datetime, time_format: str = ISO8601) -> str:
    """Format a timestamp in a fixed, locale-independent wire format.

    Naive datetimes are treated as UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)

    if time_format == RFC822:
        return format_datetime(value, usegmt=True)
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


def format_scalar(value: Any, time_format: str = ISO8601) -> str:
    """Render a scalar the way it appears on the wire."""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, datetime):
        return format_time(value, time_format)
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)
