"""Tests for settings and rejection logging."""

import logging

import pytest
from pydantic import ValidationError

from tidyapi_auth.config import Settings, get_settings
from tidyapi_auth.signing import create_authorization_header
from tidyapi_auth.validation import validate_request

NOW = 1700000000
BODY = '{"tidyapi":1,"method":"ping","id":"abc"}'


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def pinned_clock(monkeypatch):
    monkeypatch.setattr("tidyapi_auth.authorization.time.time", lambda: NOW)


def test_defaults(monkeypatch):
    monkeypatch.delenv("TIDYAPI_MAX_SECONDS_GAP", raising=False)
    monkeypatch.delenv("TIDYAPI_LOG_REJECTIONS", raising=False)

    settings = Settings(_env_file=None)

    assert settings.max_seconds_gap == 300
    assert settings.log_rejections is True


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("TIDYAPI_MAX_SECONDS_GAP", "60")
    monkeypatch.setenv("TIDYAPI_LOG_REJECTIONS", "false")

    settings = get_settings()

    assert settings.max_seconds_gap == 60
    assert settings.log_rejections is False
    assert get_settings() is settings


def test_negative_window_rejected():
    with pytest.raises(ValidationError):
        Settings(max_seconds_gap=-1)


def test_rejection_logged_without_secret(pinned_clock, caplog):
    header = create_authorization_header("orders", BODY, NOW, "ak1", "s3cr3t")

    with caplog.at_level(logging.INFO, logger="tidyapi_auth.validation"):
        result = validate_request("orders", header, BODY, lambda key: "wrong-secret")

    assert not result.ok
    assert "code=102" in caplog.text
    assert "access_key=ak1" in caplog.text
    assert "wrong-secret" not in caplog.text
    assert "s3cr3t" not in caplog.text


def test_rejection_logged_at_debug_when_disabled(pinned_clock, monkeypatch, caplog):
    monkeypatch.setenv("TIDYAPI_LOG_REJECTIONS", "false")

    with caplog.at_level(logging.INFO, logger="tidyapi_auth.validation"):
        validate_request("orders", "HS512 1 key sig", BODY, lambda key: "s3cr3t")

    assert "Rejected request" not in caplog.text

    with caplog.at_level(logging.DEBUG, logger="tidyapi_auth.validation"):
        validate_request("orders", "HS512 1 key sig", BODY, lambda key: "s3cr3t")

    assert "Rejected request" in caplog.text


def test_resolver_failure_logged(pinned_clock, caplog):
    header = create_authorization_header("orders", BODY, NOW, "ak1", "s3cr3t")

    def broken(access_key):
        raise RuntimeError("vault down")

    with caplog.at_level(logging.WARNING, logger="tidyapi_auth.validation"):
        validate_request("orders", header, BODY, broken)

    assert "Secret resolution failed for access_key=ak1: RuntimeError" in caplog.text


def test_success_logged_at_debug(pinned_clock, caplog):
    header = create_authorization_header("orders", BODY, NOW, "ak1", "s3cr3t")

    with caplog.at_level(logging.DEBUG, logger="tidyapi_auth.validation"):
        result = validate_request("orders", header, BODY, lambda key: "s3cr3t")

    assert result.ok
    assert "Accepted request: end_point=orders access_key=ak1 method=ping id=abc" in caplog.text


def test_dotenv_in_working_directory_ignored(tmp_path, monkeypatch):
    monkeypatch.delenv("TIDYAPI_MAX_SECONDS_GAP", raising=False)
    (tmp_path / ".env").write_text("TIDYAPI_MAX_SECONDS_GAP=7\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    assert get_settings().max_seconds_gap == 300
