"""Pytest configuration and fixtures for iaas-client tests.

This file provides:
- make_config: Config with test credentials and a zone
- json_response / envelope: Canned API responses
- RecordingTransport: httpx.MockTransport that records every request
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable
from urllib.parse import parse_qsl

import httpx
import pytest

from iaas_client.client import IaaSService
from iaas_client.dispatcher import Dispatcher
from iaas_client.log import PACKAGE_LOGGER
from iaas_client.models import BackoffConfig, Config

TEST_ACCESS_KEY_ID = "QYACCESSKEYIDEXAMPLE"
TEST_SECRET_ACCESS_KEY = "SECRETACCESSKEY"
TEST_ZONE = "pek3a"


def make_config(**overrides: Any) -> Config:
    """Create a Config for tests.

    Prefer this over constructing Config directly - it fills in credentials,
    a zone and zero backoff so retry tests never sleep for real.
    """
    values: dict[str, Any] = {
        "access_key_id": TEST_ACCESS_KEY_ID,
        "secret_access_key": TEST_SECRET_ACCESS_KEY,
        "zone": TEST_ZONE,
        "retry": BackoffConfig(base=0.0, factor=2.0, max=0.0),
    }
    values.update(overrides)
    return Config(**values)


def envelope(action: str, ret_code: int = 0, **elements: Any) -> dict[str, Any]:
    """Response body with the standard action/ret_code envelope."""
    return {"action": action, "ret_code": ret_code, **elements}


def json_response(body: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(body).encode("utf-8"))


def request_params(request: httpx.Request) -> list[tuple[str, str]]:
    """Parameters of a recorded request, from the query string or a form body."""
    if request.method == "POST":
        return parse_qsl(request.content.decode("ascii"), keep_blank_values=True)
    return parse_qsl(request.url.query.decode("ascii"), keep_blank_values=True)


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it handled.

    Usage:
        transport = RecordingTransport(lambda request: json_response(envelope("DescribeCaches")))
        dispatcher = Dispatcher(config, transport=transport)
        ...
        assert transport.requests[0].method == "GET"
    """

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            request.read()
            self.requests.append(request)
            return handler(request)

        super().__init__(record)


@pytest.fixture
def config() -> Config:
    return make_config()


@pytest.fixture
def respond_with() -> Callable[..., RecordingTransport]:
    """Factory for a transport that answers every request with the same body."""

    def factory(body: Any, status_code: int = 200) -> RecordingTransport:
        return RecordingTransport(lambda request: json_response(body, status_code))

    return factory


@pytest.fixture
def make_iaas(config: Config) -> Callable[[httpx.BaseTransport], IaaSService]:
    """Factory for an IaaSService over a mock transport; closed after the test."""
    created: list[IaaSService] = []

    def factory(transport: httpx.BaseTransport, cfg: Config | None = None) -> IaaSService:
        iaas = IaaSService(cfg or config, transport=transport)
        created.append(iaas)
        return iaas

    yield factory

    for iaas in created:
        iaas.close()


@pytest.fixture
def make_dispatcher(config: Config) -> Callable[..., Dispatcher]:
    created: list[Dispatcher] = []

    def factory(transport: httpx.BaseTransport, cfg: Config | None = None) -> Dispatcher:
        dispatcher = Dispatcher(cfg or config, transport=transport)
        created.append(dispatcher)
        return dispatcher

    yield factory

    for dispatcher in created:
        dispatcher.close()


@pytest.fixture
def package_logger() -> logging.Logger:
    """The iaas_client logger, with its level and handlers restored afterwards."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    saved_level, saved_handlers = logger.level, list(logger.handlers)
    logger.handlers = []
    yield logger
    logger.setLevel(saved_level)
    logger.handlers = saved_handlers
