"""IGDB クライアントの設定ローダー。"""

from __future__ import annotations

from functools import lru_cache

from pydantic import AnyHttpUrl, Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError

ENV_PREFIX = "IGDB_API_"
DEFAULT_API_ENDPOINT = "https://api.igdb.com/v4"
DEFAULT_TOKEN_URL = "https://id.twitch.tv/oauth2/token"
# 未定義または空文字列として扱うバリデーションエラー
UNSET_ERROR_TYPES = frozenset({"missing", "string_too_short", "value_error"})


class LoggingSettings(BaseSettings):
    """資格情報なしで読み込めるロギング設定。"""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field("INFO", description="ルートロガーのログレベル")


class AppSettings(LoggingSettings):
    """`IGDB_API_*` 環境変数と `.env` から読み込む設定。"""

    id: str = Field(..., min_length=1, description="IGDB (Twitch) client id")
    secret: SecretStr = Field(..., description="IGDB (Twitch) client secret")
    endpoint: AnyHttpUrl = Field(DEFAULT_API_ENDPOINT, description="IGDB API のベース URL")
    token_url: AnyHttpUrl = Field(DEFAULT_TOKEN_URL, description="Twitch OAuth2 token endpoint")

    @field_validator("secret")
    @classmethod
    def _secret_not_empty(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value():
            msg = "must not be empty"
            raise ValueError(msg)
        return value


def _missing_variables(exc: ValidationError) -> list[str]:
    names: list[str] = []
    for error in exc.errors():
        if error.get("type") not in UNSET_ERROR_TYPES or not error.get("loc"):
            continue
        names.append(f"{ENV_PREFIX}{str(error['loc'][0]).upper()}")
    return names


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """設定をロードし、再利用する。

    LRU キャッシュによりプロセス内での重複読み込みを防ぎ、
    `pytest` などから `get_settings.cache_clear()` を呼び出すことで再読込できる。
    `IGDB_API_ID` / `IGDB_API_SECRET` が欠けている場合は ConfigurationError を送出する。
    """

    try:
        return AppSettings()
    except ValidationError as exc:
        missing = _missing_variables(exc)
        if missing:
            msg = f"Required environment variable(s) not defined or empty: {', '.join(missing)}"
            raise ConfigurationError(msg) from exc
        raise ConfigurationError(str(exc)) from exc


__all__ = [
    "AppSettings",
    "DEFAULT_API_ENDPOINT",
    "DEFAULT_TOKEN_URL",
    "ENV_PREFIX",
    "LoggingSettings",
    "get_settings",
]
