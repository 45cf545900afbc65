"""Twitch OAuth2 (client credentials) によるアクセストークン取得とキャッシュ。"""

from __future__ import annotations

import asyncio
import json

import httpx

from igdb_client.shared.config import DEFAULT_TOKEN_URL
from igdb_client.shared.logging import get_logger

from .errors import IGDBAuthError, IGDBRequestError


class TwitchOAuthClient:
    """Twitch OAuth2 (client credentials) でアクセストークンを取得するクライアント。"""

    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        http_client: httpx.AsyncClient,
        token_url: str = DEFAULT_TOKEN_URL,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._http_client = http_client
        self._token_url = token_url

    async def fetch_app_access_token(self) -> str:
        """トークンを取得する。

        資格情報の誤りは 4xx の JSON (`access_token` なし) で返るため、ステータスは
        確認せず本文から `access_token` を取り出せるかで判定する。
        """

        try:
            response = await self._http_client.post(
                self._token_url,
                params={
                    "client_id": self._client_id,
                    "client_secret": self._client_secret,
                    "grant_type": "client_credentials",
                },
                headers={"Accept": "application/json"},
            )
        except httpx.RequestError as exc:
            msg = f"Failed to request an access token from {self._token_url}"
            raise IGDBRequestError(msg) from exc

        try:
            payload = response.json()
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            msg = f"Something is wrong with the auth, please check the credentials: {exc}"
            raise IGDBAuthError(msg) from exc

        access_token = payload.get("access_token") if isinstance(payload, dict) else None
        if not isinstance(access_token, str) or not access_token:
            detail = payload.get("message") if isinstance(payload, dict) else None
            msg = (
                "Something is wrong with the auth, `access_token` is missing from the response"
                f" (status={response.status_code}, message={detail})"
            )
            raise IGDBAuthError(msg)
        return access_token


class AccessTokenCache:
    """一度だけ取得したアクセストークンを保持し続けるキャッシュ。

    有効期限の確認や再取得は行わない。取得処理は `asyncio.Lock` で直列化するため、
    同一インスタンスへの同時アクセスでもトークン取得は一度に限られる。
    """

    def __init__(
        self,
        *,
        oauth_client: TwitchOAuthClient,
        access_token: str | None = None,
        logger=None,
    ) -> None:
        self._oauth_client = oauth_client
        self._token = access_token or None
        self._lock = asyncio.Lock()
        self._logger = logger or get_logger(__name__)

    @property
    def token(self) -> str | None:
        return self._token

    async def get_token(self) -> str:
        if self._token is not None:
            return self._token

        async with self._lock:
            if self._token is None:
                self._logger.debug("igdb_access_token_fetch")
                self._token = await self._oauth_client.fetch_app_access_token()
                self._logger.info("igdb_access_token_cached")
        return self._token


__all__ = ["AccessTokenCache", "TwitchOAuthClient"]
