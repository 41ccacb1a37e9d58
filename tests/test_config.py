import pytest
from pydantic import ValidationError

from todoledger.config import Settings


def test_defaults():
    settings = Settings()
    assert settings.log_level == "INFO"
    assert settings.store.db_path == ":memory:"
    assert settings.api.port == 8000


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("TODOLEDGER_LOG_LEVEL", "debug")
    monkeypatch.setenv("TODOLEDGER_STORE_DB_PATH", "/tmp/todos.db")
    monkeypatch.setenv("TODOLEDGER_API_EVENT_PAGE_LIMIT", "50")

    settings = Settings()
    assert settings.log_level == "DEBUG"
    assert settings.store.db_path == "/tmp/todos.db"
    assert settings.api.event_page_limit == 50


def test_invalid_log_level(monkeypatch):
    monkeypatch.setenv("TODOLEDGER_LOG_LEVEL", "LOUD")
    with pytest.raises(ValidationError):
        Settings()
