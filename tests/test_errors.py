"""Tests for iaas_client.errors classification."""

import json

import httpx
import pydantic
import pytest

from iaas_client.errors import (
    ClientValidationError,
    ConfigError,
    DecodeError,
    ErrorKind,
    IaaSError,
    JobFailedError,
    ParameterRequiredError,
    ParameterValueNotAllowedError,
    ServiceError,
    TransportError,
    as_iaas_error,
    classify,
)


class TestAttributes:
    def test_parameter_required(self):
        error = ParameterRequiredError("cache_size", "CreateCacheInput")
        assert error.field == "cache_size"
        assert error.owning_type == "CreateCacheInput"
        assert str(error) == "cache_size is required in CreateCacheInput"

    def test_value_not_allowed(self):
        error = ParameterValueNotAllowedError("step", "10m", ("5m", "15m", "2h", "1d"))
        assert error.allowed_values == ["5m", "15m", "2h", "1d"]
        assert "10m" in str(error)
        assert isinstance(error, ClientValidationError)

    def test_service_error(self):
        error = ServiceError(1400, "PermissionDenied", action="DeleteCaches")
        assert str(error) == "QingCloud API error 1400: PermissionDenied"

    def test_job_failed(self):
        error = JobFailedError("j-1", "failed")
        assert error.job_id == "j-1"
        assert error.status == "failed"


class TestClassify:
    @pytest.mark.parametrize(
        "error, kind",
        [
            (ParameterRequiredError("a", "B"), ErrorKind.CLIENT_VALIDATION),
            (ParameterValueNotAllowedError("a", "x", ["y"]), ErrorKind.CLIENT_VALIDATION),
            (TransportError("down"), ErrorKind.TRANSPORT),
            (ServiceError(1100), ErrorKind.SERVICE),
            (DecodeError("bad"), ErrorKind.DECODE),
            (httpx.ConnectError("refused"), ErrorKind.TRANSPORT),
            (httpx.ReadTimeout("slow"), ErrorKind.TRANSPORT),
            (httpx.TooManyRedirects("loop"), ErrorKind.TRANSPORT),
            (httpx.DecodingError("bad gzip"), ErrorKind.DECODE),
            (json.JSONDecodeError("Expecting value", "", 0), ErrorKind.DECODE),
        ],
    )
    def test_pipeline_kinds(self, error, kind):
        assert classify(error) is kind

    def test_validation_error_is_decode(self):
        class Model(pydantic.BaseModel):
            count: int

        with pytest.raises(pydantic.ValidationError) as exc_info:
            Model(count="many")
        assert classify(exc_info.value) is ErrorKind.DECODE

    def test_setup_errors_have_no_kind(self):
        assert classify(ConfigError("missing")) is None
        assert classify(ValueError("other")) is None


class TestAsIaaSError:
    def test_taxonomy_errors_returned_unchanged(self):
        error = ServiceError(1100)
        assert as_iaas_error(error) is error

    def test_transport_wrapped(self):
        cause = httpx.ConnectError("refused")
        wrapped = as_iaas_error(cause)
        assert isinstance(wrapped, TransportError)
        assert wrapped.__cause__ is cause

    def test_content_decoding_wrapped(self):
        cause = httpx.DecodingError("bad gzip")
        wrapped = as_iaas_error(cause)
        assert isinstance(wrapped, DecodeError)
        assert wrapped.__cause__ is cause

    def test_json_wrapped(self):
        wrapped = as_iaas_error(json.JSONDecodeError("Expecting value", "", 0))
        assert isinstance(wrapped, DecodeError)
        assert isinstance(wrapped, IaaSError)

    def test_unclassified_rejected(self):
        with pytest.raises(TypeError):
            as_iaas_error(KeyError("x"))
