"""IGDB API v4 クライアント実装。"""

from __future__ import annotations

from collections.abc import Mapping
from importlib.metadata import PackageNotFoundError, version
from typing import TypeVar

import httpx
from google.protobuf.message import DecodeError, Message
from igdb.igdbapi_pb2 import Count

from igdb_client.core.apicalypse import ApicalypseBuilder
from igdb_client.shared.config import (
    DEFAULT_API_ENDPOINT,
    DEFAULT_TOKEN_URL,
    AppSettings,
    get_settings,
)
from igdb_client.shared.logging import get_logger

from .auth import AccessTokenCache, TwitchOAuthClient
from .endpoints import EndpointResolver
from .errors import IGDBDecodeError, IGDBRequestError

M = TypeVar("M", bound=Message)

COUNT_PATH = "count"


def _library_version() -> str:
    try:
        return version("igdb-client")
    except PackageNotFoundError:  # pragma: no cover - 未インストール時
        return "0.0.0"


USER_AGENT = f"igdb-client/{_library_version()}"


class IGDBClient:
    """Apicalypse クエリを送り protobuf レスポンスを型付きで返す非同期クライアント。

    同一インスタンスのトークン取得は直列化されるが、それ以外に並行利用のための
    制御は持たない。
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        *,
        endpoint: str = DEFAULT_API_ENDPOINT,
        token_url: str = DEFAULT_TOKEN_URL,
        access_token: str | None = None,
        endpoints: Mapping[type[Message], str] | None = None,
        http_client: httpx.AsyncClient | None = None,
        logger=None,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._endpoint = endpoint.rstrip("/")
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient()
        self._logger = logger or get_logger(__name__)
        self._resolver = EndpointResolver(endpoints)
        self._token_cache = AccessTokenCache(
            oauth_client=TwitchOAuthClient(
                client_id=client_id,
                client_secret=client_secret,
                http_client=self._http_client,
                token_url=token_url,
            ),
            access_token=access_token,
            logger=self._logger,
        )

    @classmethod
    def from_env(cls, **kwargs) -> IGDBClient:
        """`IGDB_API_ID` / `IGDB_API_SECRET` から構築する。欠けていれば ConfigurationError。"""

        return build_igdb_client(**kwargs)

    @property
    def client_id(self) -> str:
        return self._client_id

    @property
    def client_secret(self) -> str:
        return self._client_secret

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def access_token(self) -> str | None:
        """キャッシュ済みのアクセストークン。初回認証前は None。"""

        return self._token_cache.token

    def with_endpoint(self, endpoint: str) -> IGDBClient:
        """プロキシ経由などでベース URL を差し替える。"""

        self._endpoint = endpoint.rstrip("/")
        return self

    def endpoint_for(self, message_type: type[Message]) -> str:
        return self._resolver.resolve(message_type)

    async def request(self, message_type: type[M], query: ApicalypseBuilder) -> M:
        return await self.request_raw(message_type, query.to_query())

    async def request_raw(self, message_type: type[M], query: str) -> M:
        url = f"{self._endpoint}/{self.endpoint_for(message_type)}"
        return await self._request_api(url, query, message_type)

    async def request_count(self, message_type: type[Message], query: ApicalypseBuilder) -> Count:
        return await self.request_count_raw(message_type, query.to_query())

    async def request_count_raw(self, message_type: type[Message], query: str) -> Count:
        url = f"{self._endpoint}/{self.endpoint_for(message_type)}/{COUNT_PATH}"
        return await self._request_api(url, query, Count)

    async def check_access_token(self) -> str:
        """未取得の場合のみトークンを取得する。取得済みなら何もしない。"""

        return await self._token_cache.get_token()

    async def _request_api(self, url: str, query: str, message_type: type[M]) -> M:
        token = await self.check_access_token()
        self._logger.debug("igdb_request", url=url, query=query)

        try:
            response = await self._http_client.post(
                url,
                content=query.encode("utf-8"),
                headers={
                    "Authorization": f"Bearer {token}",
                    "Client-ID": self._client_id,
                    "User-Agent": USER_AGENT,
                },
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            self._logger.error("igdb_request_failed", url=url, status_code=status_code)
            msg = f"IGDB API request failed (status={status_code})"
            raise IGDBRequestError(msg) from exc
        except httpx.RequestError as exc:
            self._logger.error("igdb_request_failed", url=url, error=str(exc))
            raise IGDBRequestError(f"Cannot request server: {exc}") from exc

        message = message_type()
        try:
            message.ParseFromString(response.content)
        except DecodeError as exc:
            self._logger.error(
                "igdb_decode_failed", url=url, message_type=message_type.__name__
            )
            msg = f"Cannot decode API response into {message_type.__name__}: {exc}"
            raise IGDBDecodeError(msg) from exc
        return message

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> IGDBClient:
        return self

    async def __aexit__(self, *_exc_info) -> None:
        await self.aclose()


def build_igdb_client(
    *,
    settings: AppSettings | None = None,
    http_client: httpx.AsyncClient | None = None,
    logger=None,
) -> IGDBClient:
    """環境変数 (共有設定) から IGDB クライアントを構築するファクトリ。"""

    app_settings = settings or get_settings()
    return IGDBClient(
        app_settings.id,
        app_settings.secret.get_secret_value(),
        endpoint=str(app_settings.endpoint),
        token_url=str(app_settings.token_url),
        http_client=http_client,
        logger=logger,
    )


__all__ = ["COUNT_PATH", "IGDBClient", "USER_AGENT", "build_igdb_client"]
