"""IGDB クライアントの例外。"""

from __future__ import annotations

from igdb_client.shared.exceptions import BaseAppError


class IGDBClientError(BaseAppError):
    """IGDB クライアント共通の例外。"""

    default_message = "IGDB API error"


class IGDBAuthError(IGDBClientError):
    """トークンエンドポイントの応答から `access_token` を取り出せなかった。"""

    default_message = "Something is wrong with the auth, please check the credentials"


class IGDBDecodeError(IGDBClientError):
    """API レスポンスを要求したメッセージ型へデコードできなかった。"""

    default_message = "Cannot decode API response"


class IGDBRequestError(IGDBClientError):
    """接続・TLS・タイムアウト・HTTP ステータスなど通信層の失敗。"""

    default_message = "Cannot request server"


class IGDBUnknownError(IGDBClientError):
    """予約済みの汎用エラー。"""

    default_message = "Unknown API error"


__all__ = [
    "IGDBAuthError",
    "IGDBClientError",
    "IGDBDecodeError",
    "IGDBRequestError",
    "IGDBUnknownError",
]
