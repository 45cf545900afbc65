from __future__ import annotations

import json

import pytest
from igdb.igdbapi_pb2 import Count, GameResult
from typer.testing import CliRunner

from igdb_client.cli.app import app
from igdb_client.core.apicalypse import ApicalypseBuilder
from igdb_client.infra.igdb import IGDBRequestError
from igdb_client.shared.exceptions import ConfigurationError


class StubIGDBClient:
    def __init__(self, *, error: Exception | None = None) -> None:
        self._error = error
        self.calls: list[tuple[str, type, str]] = []
        self.closed = False

    async def __aenter__(self) -> StubIGDBClient:
        return self

    async def __aexit__(self, *_exc_info) -> None:
        self.closed = True

    def endpoint_for(self, message_type: type) -> str:
        return "games"

    async def request(self, message_type: type, query: ApicalypseBuilder) -> GameResult:
        self.calls.append(("request", message_type, query.to_query()))
        if self._error:
            raise self._error
        result = GameResult()
        result.games.add(id=1942, name="The Witcher 3: Wild Hunt", slug="the-witcher-3")
        return result

    async def request_count(self, message_type: type, query: ApicalypseBuilder) -> Count:
        self.calls.append(("count", message_type, query.to_query()))
        return Count(count=314)


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def stub_client(monkeypatch: pytest.MonkeyPatch) -> StubIGDBClient:
    client = StubIGDBClient()
    monkeypatch.setattr(
        "igdb_client.cli.commands.api.build_igdb_client", lambda **_kwargs: client
    )
    return client


def test_query_outputs_table(runner: CliRunner, stub_client: StubIGDBClient) -> None:
    result = runner.invoke(
        app,
        ["api", "query", "games", "-f", "id,name", "-w", "rating > 80", "-l", "5", "-s", "id desc"],
    )

    assert result.exit_code == 0
    assert "The Witcher 3" in result.stdout
    kind, message_type, query = stub_client.calls[0]
    assert kind == "request"
    assert message_type is GameResult
    assert query == "f id,name;w rating > 80;l 5;s id desc;"
    assert stub_client.closed


def test_query_outputs_json(runner: CliRunner, stub_client: StubIGDBClient) -> None:
    result = runner.invoke(app, ["api", "query", "GameResult", "--output", "json"])

    assert result.exit_code == 0
    json_start = result.stdout.find("{")
    payload = json.loads(result.stdout[json_start:])
    assert payload["games"][0]["name"] == "The Witcher 3: Wild Hunt"
    _, _, query = stub_client.calls[0]
    assert query == "f *;l 10;"


def test_count_prints_number(runner: CliRunner, stub_client: StubIGDBClient) -> None:
    result = runner.invoke(app, ["api", "count", "games", "--where", "rating > 90"])

    assert result.exit_code == 0
    assert result.stdout.strip().endswith("314")
    assert stub_client.calls[0] == ("count", GameResult, "w rating > 90;")


def test_endpoint_prints_resolved_path(runner: CliRunner) -> None:
    result = runner.invoke(app, ["api", "endpoint", "GameEngineLogoResult"])

    assert result.exit_code == 0
    assert result.stdout.strip() == "https://api.igdb.com/v4/game_engine_logos"


def test_unknown_type_is_rejected(runner: CliRunner, stub_client: StubIGDBClient) -> None:
    result = runner.invoke(app, ["api", "query", "no_such_things"])

    assert result.exit_code == 2
    assert stub_client.calls == []


def test_query_handles_client_error(runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
    client = StubIGDBClient(error=IGDBRequestError("connection refused"))
    monkeypatch.setattr(
        "igdb_client.cli.commands.api.build_igdb_client", lambda **_kwargs: client
    )

    result = runner.invoke(app, ["api", "query", "games"])

    assert result.exit_code == 1
    assert "IGDB API の呼び出しに失敗しました" in result.stdout


def test_missing_configuration_exits(runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_build(**_kwargs):
        raise ConfigurationError("Required environment variable(s) not defined: IGDB_API_ID")

    monkeypatch.setattr("igdb_client.cli.commands.api.build_igdb_client", failing_build)

    result = runner.invoke(app, ["api", "count", "games"])

    assert result.exit_code == 2
    assert "IGDB_API_ID" in result.stdout
