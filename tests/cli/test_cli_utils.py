import logging

import click
import pytest

from apricot_auth.cli.utils import configure_logging, format_error, get_env_flag, output_error


@pytest.mark.parametrize(
    ("value", "expected"), [("1", True), ("TRUE", True), ("yes", True), ("0", False)]
)
def test_get_env_flag(monkeypatch: pytest.MonkeyPatch, value: str, expected: bool) -> None:
    monkeypatch.setenv("APRICOT_AUTH_TEST_FLAG", value)
    assert get_env_flag("APRICOT_AUTH_TEST_FLAG") is expected


def test_get_env_flag_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("APRICOT_AUTH_TEST_FLAG", raising=False)
    assert get_env_flag("APRICOT_AUTH_TEST_FLAG", default=True) is True


def test_configure_logging_levels(restore_root_logger: logging.Logger) -> None:
    configure_logging(log_level="INFO")
    assert restore_root_logger.level == logging.INFO
    assert len(restore_root_logger.handlers) == 1

    configure_logging(debug=True, log_level="ERROR")
    assert restore_root_logger.level == logging.DEBUG


def test_configure_logging_debug_env(
    monkeypatch: pytest.MonkeyPatch, restore_root_logger: logging.Logger
) -> None:
    monkeypatch.setenv("APRICOT_AUTH_DEBUG", "1")
    configure_logging()
    assert restore_root_logger.level == logging.DEBUG


def test_format_error_debug_includes_type() -> None:
    info = format_error(ValueError("bad"), debug=True)
    assert info["error"] == "bad"
    assert info["type"] == "ValueError"


def test_output_error_aborts() -> None:
    with pytest.raises(click.Abort):
        output_error(RuntimeError("boom"))
