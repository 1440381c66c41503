import pytest

from jobly.config import get_settings


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("API_DATABASE_URL", "API_DB_ECHO", "API_LOG_LEVEL", "API_TOKENS"):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings.database_url.startswith("postgresql+psycopg://")
    assert settings.db_echo is False
    assert settings.log_level == "INFO"
    assert settings.api_tokens == ()


def test_settings_parse_token_table(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("API_TOKENS", "abc:alice:admin, def:bob ,")
    monkeypatch.setenv("API_LOG_LEVEL", "debug")

    settings = get_settings()

    assert settings.api_tokens == (("abc", "alice", True), ("def", "bob", False))
    assert settings.log_level == "DEBUG"


def test_settings_reject_malformed_token_entry(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("API_TOKENS", "only-a-token")

    with pytest.raises(ValueError, match="only-a-token"):
        get_settings()
