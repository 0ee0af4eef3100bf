"""Internal data models for iaas-client.

All models use Pydantic v2 and are frozen: Config is shared read-only across
threads, Operation is created per call and never mutated.
"""

from __future__ import annotations

import re
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

LOG_LEVELS = ("debug", "info", "warn", "warning", "error", "fatal")
SIGNATURE_METHODS = ("HmacSHA256", "HmacSHA1")


# =============================================================================
# Runtime Configuration Models
# =============================================================================


class BackoffConfig(BaseModel):
    """Backoff knobs for transient transport failures."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    base: float = Field(default=1.0, ge=0, description="Delay before the first retry, seconds")
    factor: float = Field(default=2.0, ge=1, description="Multiplier applied per retry")
    max: float = Field(default=10.0, ge=0, description="Upper bound for a single delay")
    retry_statuses: tuple[int, ...] = Field(
        default=(502, 503, 504), description="Gateway statuses treated as transient"
    )


class RetryPolicy(BaseModel):
    """Resolved retry policy used by the dispatcher."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    max_retries: int = Field(default=3, ge=0, description="Retries after the first attempt")
    backoff: BackoffConfig = Field(default_factory=BackoffConfig)

    def delay(self, retry_number: int) -> float:
        """Seconds to wait before retry number `retry_number` (1-based)."""
        delay = self.backoff.base * (self.backoff.factor ** (retry_number - 1))
        return min(delay, self.backoff.max)


class Config(BaseModel):
    """Account and endpoint configuration.

    Field aliases match the keys of ~/.qingcloud/config.yaml.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    access_key_id: str = Field(default="", alias="qy_access_key_id", description="Access key ID")
    secret_access_key: str = Field(
        default="", alias="qy_secret_access_key", repr=False, description="Secret access key"
    )
    host: str = Field(default="api.qingcloud.com", description="API host")
    port: int = Field(default=443, gt=0, lt=65536, description="API port")
    protocol: Literal["http", "https"] = Field(default="https", description="URL scheme")
    uri: str = Field(default="/iaas", description="API path")
    connection_retries: int = Field(default=3, ge=0, description="Retries on transient failures")
    connection_timeout: float = Field(default=30.0, gt=0, description="Per-request timeout, seconds")
    log_level: str = Field(default="warn", description="debug, info, warn, error or fatal")
    zone: str | None = Field(default=None, description="Default zone for zone-scoped services")
    signature_method: str = Field(default="HmacSHA256", description="HmacSHA256 or HmacSHA1")
    signature_expires_in: int | None = Field(
        default=None, gt=0, description="Sign with expires=now+N instead of time_stamp"
    )
    verify_ssl: bool = Field(default=True, description="Verify the server certificate")
    retry: BackoffConfig = Field(default_factory=BackoffConfig, description="Backoff settings")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        if v.lower() not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return v.lower()

    @field_validator("signature_method")
    @classmethod
    def validate_signature_method(cls, v: str) -> str:
        if v not in SIGNATURE_METHODS:
            raise ValueError(f"signature_method must be one of {', '.join(SIGNATURE_METHODS)}")
        return v

    @property
    def endpoint(self) -> str:
        return f"{self.protocol}://{self.host}:{self.port}"

    @property
    def request_path(self) -> str:
        """URI with repeated slashes collapsed."""
        return re.sub(r"/+", "/", self.uri)

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(max_retries=self.connection_retries, backoff=self.retry)

    @property
    def has_credentials(self) -> bool:
        return bool(self.access_key_id) and bool(self.secret_access_key)


# =============================================================================
# Operation Models
# =============================================================================


class OperationDef(BaseModel):
    """Static catalogue entry for one API action."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    action: str = Field(description="API action name, e.g. CreateCache")
    method: Literal["GET", "POST"] = Field(default="GET", description="HTTP method")
    input_type: type[BaseModel] = Field(description="Input model class")
    output_type: type[BaseModel] = Field(description="Output model class")
    zone_scoped: bool = Field(default=True, description="Whether the call needs a zone")
    idempotent: bool | None = Field(
        default=None, description="Retry timeouts on this call; defaults to method == GET"
    )


class Operation(BaseModel):
    """One API call: action, method and the context it runs in."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    action: str = Field(description="API action name")
    method: Literal["GET", "POST"] = Field(default="GET", description="HTTP method")
    config: Config = Field(description="Shared account/endpoint configuration")
    properties: dict[str, str] = Field(
        default_factory=dict, description="Service scope parameters, e.g. {'zone': 'pek3a'}"
    )
    idempotent: bool = Field(description="Safe to resend after a timeout")

    @model_validator(mode="before")
    @classmethod
    def default_idempotent(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("idempotent") is None:
            data = {**data, "idempotent": data.get("method", "GET") == "GET"}
        return data


# =============================================================================
# Wire Models
# =============================================================================


class SignedRequest(BaseModel):
    """Parameters ready to send, plus the material that produced the signature."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    method: str = Field(description="HTTP method")
    path: str = Field(description="Request path")
    params: list[tuple[str, str]] = Field(description="Marshalled order + identity + signature")
    string_to_sign: str = Field(description="Canonical string the signature covers")
    signature: str = Field(description="Base64 HMAC digest")


class RawResponse(BaseModel):
    """HTTP response as returned by the dispatcher."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    status_code: int = Field(description="HTTP status code")
    headers: dict[str, str] = Field(default_factory=dict, description="Lowercase header names")
    content: bytes = Field(default=b"", description="Raw body")
    elapsed_ms: float = Field(default=0.0, description="Response time in milliseconds")
    attempts: int = Field(default=1, description="Attempts made, including retries")
