"""Errors - Typed failure taxonomy for the request pipeline.

Every failure along validate -> marshal -> sign -> send -> unpack surfaces
as one of four pipeline kinds (see ErrorKind). Setup problems (bad config,
models without wire metadata) have their own classes outside that set.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Sequence

import httpx
import pydantic


class ErrorKind(str, Enum):
    """Pipeline stage that produced a failure."""

    CLIENT_VALIDATION = "client_validation"
    TRANSPORT = "transport"
    SERVICE = "service"
    DECODE = "decode"


class IaaSError(Exception):
    """Base class for all iaas-client errors."""

    kind: ErrorKind | None = None


# =============================================================================
# Client-side validation (raised before any network I/O)
# =============================================================================


class ClientValidationError(IaaSError):
    """Base class for input validation failures."""

    kind = ErrorKind.CLIENT_VALIDATION


class ParameterRequiredError(ClientValidationError):
    """A required field is absent (or an empty collection)."""

    def __init__(self, field: str, owning_type: str) -> None:
        self.field = field
        self.owning_type = owning_type
        super().__init__(f"{field} is required in {owning_type}")


class ParameterValueNotAllowedError(ClientValidationError):
    """A field value is outside its declared set of allowed values."""

    def __init__(self, field: str, value: str, allowed_values: Sequence[str]) -> None:
        self.field = field
        self.value = value
        self.allowed_values = list(allowed_values)
        super().__init__(
            f"{field} value {value!r} is not allowed, "
            f"should be one of {', '.join(self.allowed_values)}"
        )


# =============================================================================
# Network and service errors
# =============================================================================


class TransportError(IaaSError):
    """Connection, timeout or gateway failure after retries were exhausted."""

    kind = ErrorKind.TRANSPORT

    def __init__(
        self,
        message: str,
        attempts: int = 1,
        status_code: int | None = None,
    ) -> None:
        self.attempts = attempts
        self.status_code = status_code
        super().__init__(message)


class ServiceError(IaaSError):
    """The API answered with a non-zero ret_code."""

    kind = ErrorKind.SERVICE

    def __init__(self, ret_code: int, message: str = "", action: str | None = None) -> None:
        self.ret_code = ret_code
        self.message = message
        self.action = action
        super().__init__(f"QingCloud API error {ret_code}: {message}")


class DecodeError(IaaSError):
    """Response body is not the expected JSON envelope."""

    kind = ErrorKind.DECODE

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


# =============================================================================
# Setup errors
# =============================================================================


class ConfigError(IaaSError):
    """Raised when configuration loading fails or required settings are missing."""


class SchemaError(IaaSError):
    """Raised when a model cannot be turned into a schema descriptor."""


class WaitTimeoutError(IaaSError):
    """Raised when a waiter gives up before its condition became true."""


class JobFailedError(IaaSError):
    """Raised when a waited-on job ends in failure or cannot be found."""

    def __init__(self, job_id: str, status: str | None) -> None:
        self.job_id = job_id
        self.status = status
        super().__init__(f"Job {job_id} {status}")


# =============================================================================
# Classification
# =============================================================================


def classify(exc: BaseException) -> ErrorKind | None:
    """Return the pipeline kind for an exception, or None if it is not one."""
    if isinstance(exc, IaaSError):
        return exc.kind
    if isinstance(exc, httpx.DecodingError):
        return ErrorKind.DECODE
    if isinstance(exc, httpx.RequestError):
        return ErrorKind.TRANSPORT
    if isinstance(exc, (json.JSONDecodeError, pydantic.ValidationError)):
        return ErrorKind.DECODE
    return None


def as_iaas_error(exc: BaseException) -> IaaSError:
    """Wrap a foreign exception into the taxonomy.

    Raises:
        TypeError: If the exception does not belong to any pipeline kind.
    """
    if isinstance(exc, IaaSError):
        return exc

    kind = classify(exc)
    if kind is ErrorKind.TRANSPORT:
        wrapped: IaaSError = TransportError(f"request error: {exc}")
    elif kind is ErrorKind.DECODE:
        wrapped = DecodeError(f"invalid response: {exc}")
    else:
        raise TypeError(f"unclassified error: {exc!r}") from exc

    wrapped.__cause__ = exc
    return wrapped
