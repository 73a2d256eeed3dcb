"""Settings and logging configuration tests."""

import json
import logging

import pytest

from tablefetch.config import Settings, get_settings
from tablefetch.logging_config import setup_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_settings_defaults():
    settings = Settings()
    assert settings.fetch_timeout == 30.0
    assert settings.follow_redirects is True
    assert settings.csv_delimiter == ","


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("TABLEFETCH_FETCH_TIMEOUT", "5")
    monkeypatch.setenv("TABLEFETCH_PAGE_SIZE", "250")
    settings = Settings()
    assert settings.fetch_timeout == 5.0
    assert settings.page_size == 250


def test_get_settings_is_cached():
    get_settings.cache_clear()
    assert get_settings() is get_settings()
    get_settings.cache_clear()


def test_json_logging_includes_extra(capsys, restore_logging):
    setup_logging("DEBUG")
    logging.getLogger("tablefetch.test").info("fetched", extra={"url": "https://example.com", "rows": 3})

    line = capsys.readouterr().out.strip().splitlines()[-1]
    record = json.loads(line)
    assert record["message"] == "fetched"
    assert record["level"] == "INFO"
    assert record["logger"] == "tablefetch.test"
    assert record["url"] == "https://example.com"
    assert record["rows"] == 3


def test_plain_logging(capsys, restore_logging):
    setup_logging("INFO", json_output=False)
    logging.getLogger("tablefetch.test").debug("hidden")
    logging.getLogger("tablefetch.test").warning("shown")

    out = capsys.readouterr().out
    assert "hidden" not in out
    assert "WARNING" in out and "shown" in out


def test_httpx_logger_quieted(restore_logging):
    setup_logging("DEBUG")
    assert logging.getLogger("httpx").level == logging.WARNING
