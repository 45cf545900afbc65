"""メッセージ型と IGDB エンドポイント名の対応付け。"""

from __future__ import annotations

import re
from collections.abc import Mapping
from types import ModuleType

from google.protobuf.message import Message
from igdb import igdbapi_pb2

RESULT_SUFFIX = "_result"
IRREGULAR_PLURALS: Mapping[str, str] = {"Person": "people"}
# エンドポイントを持たない補助メッセージ
NON_ENDPOINT_MESSAGES = frozenset({"Count", "MultiQueryResult", "MultiQueryResultArray"})

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")


def to_snake_case(name: str) -> str:
    """`GameEngineLogo` 形式の名前を `game_engine_logo` 形式へ変換する。"""

    name = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    return _WORD_BOUNDARY.sub(r"\1_\2", name).lower()


def _type_name(message_type: type | str) -> str:
    if isinstance(message_type, str):
        return message_type
    return message_type.__name__


def endpoint_name(message_type: type | str) -> str:
    """型名の命名規則からエンドポイント名を導出する。

    `Person` は `people` とし、それ以外は snake_case 化して末尾の `_result` を除き
    `s` を付与する。

    >>> endpoint_name("GameEngineLogoResult")
    'game_engine_logos'
    """

    name = _type_name(message_type)
    if name in IRREGULAR_PLURALS:
        return IRREGULAR_PLURALS[name]

    snake = to_snake_case(name)
    snake = snake.removesuffix(RESULT_SUFFIX)
    return f"{snake}s"


def build_endpoint_map(schema: ModuleType = igdbapi_pb2) -> dict[str, str]:
    """生成済みスキーマの全メッセージについて型名→エンドポイント名の表を作る。"""

    return {
        name: endpoint_name(name)
        for name in schema.DESCRIPTOR.message_types_by_name
        if name not in NON_ENDPOINT_MESSAGES
    }


SCHEMA_ENDPOINTS: Mapping[str, str] = build_endpoint_map()


class EndpointResolver:
    """明示マッピングを優先してメッセージ型のエンドポイントを解決する。

    解決順は呼び出し側の上書き、スキーマ由来の表、命名規則による導出。
    """

    def __init__(
        self,
        overrides: Mapping[type[Message], str] | None = None,
        *,
        schema_endpoints: Mapping[str, str] = SCHEMA_ENDPOINTS,
    ) -> None:
        self._overrides = dict(overrides or {})
        self._schema_endpoints = schema_endpoints

    def resolve(self, message_type: type[Message]) -> str:
        if message_type in self._overrides:
            return self._overrides[message_type]
        name = _type_name(message_type)
        if name in self._schema_endpoints:
            return self._schema_endpoints[name]
        return endpoint_name(name)

    def register(self, message_type: type[Message], endpoint: str) -> None:
        self._overrides[message_type] = endpoint.strip("/")


def resolve_message_type(name: str, schema: ModuleType = igdbapi_pb2) -> type[Message]:
    """型名 (`GameResult`) またはエンドポイント名 (`games`) からメッセージ型を引く。"""

    candidate = getattr(schema, name, None)
    if isinstance(candidate, type) and issubclass(candidate, Message):
        return candidate

    # 同じエンドポイントに `Game` と `GameResult` が対応する場合は `*Result` を優先する
    matches = sorted(
        (type_name for type_name, endpoint in build_endpoint_map(schema).items() if endpoint == name),
        key=lambda type_name: not type_name.endswith("Result"),
    )
    if matches:
        return getattr(schema, matches[0])

    msg = f"Unknown IGDB message type or endpoint: {name}"
    raise LookupError(msg)


__all__ = [
    "EndpointResolver",
    "SCHEMA_ENDPOINTS",
    "build_endpoint_map",
    "endpoint_name",
    "resolve_message_type",
    "to_snake_case",
]
