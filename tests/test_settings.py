import logging

import httpx
import pydantic
import pytest

from cratesapi import Client, ClientConfigError
from cratesapi.logger import log, set_log_level
from cratesapi.settings import Settings, settings as cached_settings


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CRATESAPI_USER_AGENT", "my_crawler (help@my_crawler.com)")
    monkeypatch.setenv("CRATESAPI_BASE_URL", "http://mirror.example.com/api/v1/")
    monkeypatch.setenv("CRATESAPI_TIMEOUT", "5")
    monkeypatch.setenv("CRATESAPI_LOG_LEVEL", "debug")

    settings = Settings()

    assert settings.user_agent == "my_crawler (help@my_crawler.com)"
    assert settings.base_url == "http://mirror.example.com/api/v1"
    assert settings.timeout == 5.0

    foo = settings.model_dump()
    assert foo == {
        "user_agent": "my_crawler (help@my_crawler.com)",
        "base_url": "http://mirror.example.com/api/v1",
        "timeout": 5.0,
        "log_level": "DEBUG",
    }


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("USER_AGENT", "BASE_URL", "TIMEOUT", "LOG_LEVEL"):
        monkeypatch.delenv(f"CRATESAPI_{name}", raising=False)

    settings = Settings()

    assert settings.user_agent is None
    assert settings.base_url == "https://crates.io/api/v1"
    assert settings.timeout == 30.0
    assert settings.log_level == "INFO"


def test_client_from_settings() -> None:
    settings = Settings(user_agent="my_crawler (github.com/me/my_crawler)")
    transport = httpx.MockTransport(lambda request: httpx.Response(200))

    with Client.from_settings(settings, transport=transport) as client:
        assert client.user_agent == "my_crawler (github.com/me/my_crawler)"
        assert client.base_url == "https://crates.io/api/v1"


def test_client_from_settings_requires_user_agent() -> None:
    with pytest.raises(ClientConfigError):
        Client.from_settings(Settings(user_agent=None))


def test_client_from_settings_applies_log_level() -> None:
    settings = Settings(
        user_agent="my_crawler (help@my_crawler.com)", log_level="debug"
    )
    transport = httpx.MockTransport(lambda request: httpx.Response(200))

    try:
        with Client.from_settings(settings, transport=transport):
            assert log.level == logging.DEBUG
    finally:
        set_log_level(logging.INFO)


def test_invalid_log_level_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CRATESAPI_LOG_LEVEL", "verbose")

    with pytest.raises(pydantic.ValidationError):
        Settings()


def test_client_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CRATESAPI_USER_AGENT", "my_crawler (my_crawler.com/info)")
    monkeypatch.setenv("CRATESAPI_BASE_URL", "http://mirror.example.com/api/v1")
    monkeypatch.setenv("CRATESAPI_LOG_LEVEL", "warning")
    cached_settings.cache_clear()
    transport = httpx.MockTransport(lambda request: httpx.Response(200))

    try:
        with Client.from_settings(transport=transport) as client:
            assert client.user_agent == "my_crawler (my_crawler.com/info)"
            assert client.base_url == "http://mirror.example.com/api/v1"
            assert log.level == logging.WARNING
        assert cached_settings() is cached_settings()
    finally:
        cached_settings.cache_clear()
        set_log_level(logging.INFO)
