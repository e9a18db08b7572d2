import logging

import pytest

from calcengine import Settings, configure_logging, load_settings
from calcengine.log import LOGGER_NAME


def test_defaults():
    settings = load_settings({})
    assert settings == Settings(precision=2, max_expression_length=2000, log_level="WARNING")


def test_from_environment():
    settings = load_settings({
        "CALC_PRECISION": "4",
        "CALC_MAX_EXPRESSION_LENGTH": "50",
        "CALC_LOG_LEVEL": "debug",
    })
    assert settings.precision == 4
    assert settings.max_expression_length == 50
    assert settings.log_level == "DEBUG"


def test_blank_values_fall_back_to_defaults():
    assert load_settings({"CALC_PRECISION": " ", "CALC_LOG_LEVEL": ""}) == Settings()


@pytest.mark.parametrize("env", [
    {"CALC_PRECISION": "two"},
    {"CALC_PRECISION": "-1"},
    {"CALC_PRECISION": "101"},
    {"CALC_MAX_EXPRESSION_LENGTH": "0"},
    {"CALC_LOG_LEVEL": "LOUD"},
])
def test_invalid_values(env):
    with pytest.raises(ValueError):
        load_settings(env)


def test_reads_os_environ(monkeypatch):
    monkeypatch.setenv("CALC_PRECISION", "3")
    assert load_settings().precision == 3


@pytest.fixture
def package_logger():
    logger = logging.getLogger(LOGGER_NAME)
    handlers, level = list(logger.handlers), logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)


def test_configure_logging_is_idempotent(package_logger):
    configure_logging("INFO")
    configure_logging("debug")
    named = [h for h in package_logger.handlers if h.get_name() == "calcengine-stream"]
    assert len(named) == 1
    assert package_logger.level == logging.DEBUG


def test_configure_logging_rejects_unknown_level(package_logger):
    with pytest.raises(ValueError):
        configure_logging("LOUD")
