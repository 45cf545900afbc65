from __future__ import annotations

import asyncio
import json
from collections.abc import Coroutine
from enum import Enum
from typing import Annotated, Any, TypeVar

import typer
from google.protobuf.json_format import MessageToDict
from google.protobuf.message import Message
from rich.console import Console
from rich.table import Table

from igdb_client.core.apicalypse import ApicalypseBuilder
from igdb_client.infra.igdb import (
    EndpointResolver,
    IGDBClient,
    IGDBClientError,
    build_igdb_client,
    resolve_message_type,
)
from igdb_client.shared.config import DEFAULT_API_ENDPOINT
from igdb_client.shared.exceptions import ConfigurationError
from igdb_client.shared.logging import get_logger

T = TypeVar("T")


class OutputFormat(str, Enum):
    """出力形式。"""

    TABLE = "table"
    JSON = "json"


app = typer.Typer(help="IGDB API へのクエリ実行")

TypeArgument = Annotated[
    str,
    typer.Argument(help="メッセージ型名 (GameResult) またはエンドポイント名 (games)"),
]
WhereOption = Annotated[str, typer.Option("--where", "-w", help="フィルタ句 (例: 'rating > 80')")]


def _resolve_type(name: str) -> type[Message]:
    try:
        return resolve_message_type(name)
    except LookupError as exc:
        raise typer.BadParameter(str(exc), param_hint="TYPE") from exc


def _open_client(logger) -> IGDBClient:
    try:
        return build_igdb_client(logger=logger)
    except ConfigurationError as exc:
        typer.echo(f"設定が不足しています: {exc}")
        raise typer.Exit(code=2) from exc


def _run(client: IGDBClient, call: Coroutine[Any, Any, T], logger) -> T:
    async def runner() -> T:
        async with client:
            return await call

    try:
        return asyncio.run(runner())
    except IGDBClientError as exc:
        logger.error("IGDB リクエストに失敗", error=str(exc))
        typer.echo(f"IGDB API の呼び出しに失敗しました: {exc}")
        raise typer.Exit(code=1) from exc


def _records(payload: dict[str, Any]) -> list[dict[str, Any]]:
    for value in payload.values():
        if isinstance(value, list):
            return [item for item in value if isinstance(item, dict)]
    return [payload] if payload else []


def _render_table(title: str, payload: dict[str, Any]) -> None:
    console = Console(force_terminal=False, color_system=None)
    table = Table(title=title)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="bold")
    table.add_column("Slug")

    for record in _records(payload):
        table.add_row(
            str(record.get("id", "-")),
            str(record.get("name", "-")),
            str(record.get("slug", "-")),
        )

    console.print(table)


@app.command()
def query(  # noqa: PLR0913 - CLI のため引数が多い
    type_name: TypeArgument,
    fields: Annotated[str, typer.Option("--fields", "-f", help="取得するフィールド")] = "*",
    exclude: Annotated[str, typer.Option("--exclude", "-x", help="除外するフィールド")] = "",
    where: WhereOption = "",
    limit: Annotated[int, typer.Option("--limit", "-l", min=0, max=500, help="取得件数")] = 10,
    offset: Annotated[int, typer.Option("--offset", "-o", min=0, help="取得開始位置")] = 0,
    sort: Annotated[str, typer.Option("--sort", "-s", help="ソート句 (例: 'id desc')")] = "",
    output: Annotated[
        OutputFormat,
        typer.Option("--output", case_sensitive=False, help="出力形式(table/json)"),
    ] = OutputFormat.TABLE,
) -> None:
    """Apicalypse クエリを実行し、デコード結果を表示する。"""

    message_type = _resolve_type(type_name)
    logger = get_logger("cli.api.query", message_type=message_type.__name__)
    builder = (
        ApicalypseBuilder()
        .fields(fields)
        .exclude(exclude)
        .filter(where)
        .limit(limit)
        .offset(offset)
        .sort(sort)
    )
    client = _open_client(logger)
    message = _run(client, client.request(message_type, builder), logger)

    payload = MessageToDict(message, preserving_proto_field_name=True)
    logger.info("IGDB クエリ完了", results=len(_records(payload)))
    if output is OutputFormat.JSON:
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        _render_table(f"IGDB {client.endpoint_for(message_type)}", payload)


@app.command()
def count(type_name: TypeArgument, where: WhereOption = "") -> None:
    """条件に一致する件数を表示する。"""

    message_type = _resolve_type(type_name)
    logger = get_logger("cli.api.count", message_type=message_type.__name__)
    client = _open_client(logger)
    builder = ApicalypseBuilder().filter(where)
    result = _run(client, client.request_count(message_type, builder), logger)
    typer.echo(str(result.count))


@app.command()
def endpoint(type_name: TypeArgument) -> None:
    """メッセージ型に対応するエンドポイントのパスを表示する。"""

    message_type = _resolve_type(type_name)
    path = EndpointResolver().resolve(message_type)
    typer.echo(f"{DEFAULT_API_ENDPOINT}/{path}")
