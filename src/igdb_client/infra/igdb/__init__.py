"""IGDB API 向け infra 層パッケージ。"""

from .auth import AccessTokenCache, TwitchOAuthClient
from .client import IGDBClient, build_igdb_client
from .endpoints import (
    EndpointResolver,
    build_endpoint_map,
    endpoint_name,
    resolve_message_type,
)
from .errors import (
    IGDBAuthError,
    IGDBClientError,
    IGDBDecodeError,
    IGDBRequestError,
    IGDBUnknownError,
)

__all__ = [
    "AccessTokenCache",
    "EndpointResolver",
    "IGDBAuthError",
    "IGDBClient",
    "IGDBClientError",
    "IGDBDecodeError",
    "IGDBRequestError",
    "IGDBUnknownError",
    "TwitchOAuthClient",
    "build_endpoint_map",
    "build_igdb_client",
    "endpoint_name",
    "resolve_message_type",
]
