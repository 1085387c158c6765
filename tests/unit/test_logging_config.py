"""Unit tests for the logging setup helper."""

import logging
from unittest.mock import patch

import pytest

from sealkit.logging_config import configure_logging, resolve_level


def test_configure_logging_int_level():
    with patch("sealkit.logging_config.logging.basicConfig") as mock_basic:
        configure_logging(logging.DEBUG)
    kwargs = mock_basic.call_args.kwargs
    assert kwargs["level"] == logging.DEBUG
    assert kwargs["format"] == "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


def test_configure_logging_string_level():
    with patch("sealkit.logging_config.logging.basicConfig") as mock_basic:
        configure_logging("warning")
    assert mock_basic.call_args.kwargs["level"] == logging.WARNING


def test_configure_logging_unknown_level():
    with patch("sealkit.logging_config.logging.basicConfig") as mock_basic:
        with pytest.raises(ValueError):
            configure_logging("LOUD")
    mock_basic.assert_not_called()


def test_unknown_level_message_uses_given_name():
    with pytest.raises(ValueError, match=r"^Unknown log level: LOUD$"):
        resolve_level("LOUD")


def test_resolve_level():
    assert resolve_level("info") == logging.INFO
    assert resolve_level(logging.ERROR) == logging.ERROR
