"""shared.config の読み込みと失敗ケースを確認するテスト。"""

from __future__ import annotations

import pytest

from igdb_client.shared.config import LoggingSettings, get_settings
from igdb_client.shared.exceptions import ConfigurationError

ENV_KEYS = (
    "IGDB_API_ID",
    "IGDB_API_SECRET",
    "IGDB_API_ENDPOINT",
    "IGDB_API_TOKEN_URL",
    "IGDB_API_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_settings_fail_when_env_missing() -> None:
    """必須環境変数が欠けている場合 ConfigurationError が発生する。"""

    with pytest.raises(ConfigurationError) as exc_info:
        get_settings()

    assert "IGDB_API_ID" in str(exc_info.value)
    assert "IGDB_API_SECRET" in str(exc_info.value)


@pytest.mark.parametrize("empty_key", ["IGDB_API_ID", "IGDB_API_SECRET"])
def test_settings_reject_empty_credentials(monkeypatch, empty_key: str) -> None:
    """空文字列の資格情報は起動時に ConfigurationError となる。"""

    monkeypatch.setenv("IGDB_API_ID", "cid")
    monkeypatch.setenv("IGDB_API_SECRET", "secret")
    monkeypatch.setenv(empty_key, "")

    with pytest.raises(ConfigurationError, match=empty_key):
        get_settings()


def test_settings_load_from_env(monkeypatch) -> None:
    monkeypatch.setenv("IGDB_API_ID", "cid")
    monkeypatch.setenv("IGDB_API_SECRET", "secret")

    settings = get_settings()

    assert settings.id == "cid"
    assert settings.secret.get_secret_value() == "secret"
    assert str(settings.endpoint) == "https://api.igdb.com/v4"
    assert str(settings.token_url) == "https://id.twitch.tv/oauth2/token"
    assert settings.log_level == "INFO"


def test_settings_override_endpoints(monkeypatch) -> None:
    """ベース URL とトークンエンドポイントを環境変数で上書きできる。"""

    monkeypatch.setenv("IGDB_API_ID", "cid")
    monkeypatch.setenv("IGDB_API_SECRET", "secret")
    monkeypatch.setenv("IGDB_API_ENDPOINT", "https://proxy.example.com/v4")
    monkeypatch.setenv("IGDB_API_TOKEN_URL", "https://auth.example.com/token")

    settings = get_settings()

    assert str(settings.endpoint) == "https://proxy.example.com/v4"
    assert str(settings.token_url) == "https://auth.example.com/token"


def test_settings_read_dotenv_file(tmp_path) -> None:
    (tmp_path / ".env").write_text("IGDB_API_ID=file-id\nIGDB_API_SECRET=file-secret\n")

    settings = get_settings()

    assert settings.id == "file-id"
    assert settings.secret.get_secret_value() == "file-secret"


def test_settings_are_cached(monkeypatch) -> None:
    monkeypatch.setenv("IGDB_API_ID", "cid")
    monkeypatch.setenv("IGDB_API_SECRET", "secret")

    assert get_settings() is get_settings()


def test_logging_settings_do_not_require_credentials(monkeypatch) -> None:
    monkeypatch.setenv("IGDB_API_LOG_LEVEL", "DEBUG")

    assert LoggingSettings().log_level == "DEBUG"
