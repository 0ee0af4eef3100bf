"""Tests for iaas_client.log."""

import logging

import pytest

from iaas_client.log import configure_logging


@pytest.mark.parametrize(
    "name, level",
    [
        ("debug", logging.DEBUG),
        ("INFO", logging.INFO),
        ("warn", logging.WARNING),
        ("error", logging.ERROR),
        ("fatal", logging.CRITICAL),
    ],
)
def test_levels(package_logger, name, level):
    assert configure_logging(name) is package_logger
    assert package_logger.level == level


def test_default_handler_attached_once(package_logger):
    configure_logging("info")
    configure_logging("debug")
    assert len(package_logger.handlers) == 1
    assert isinstance(package_logger.handlers[0], logging.StreamHandler)


def test_custom_handler(package_logger):
    handler = logging.NullHandler()
    configure_logging("warn", handler=handler)
    assert package_logger.handlers == [handler]


def test_unknown_level(package_logger):
    with pytest.raises(ValueError, match="Unknown log level 'loud'"):
        configure_logging("loud")
