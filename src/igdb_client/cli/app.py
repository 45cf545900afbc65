from __future__ import annotations

import typer

from igdb_client.cli.commands import api
from igdb_client.shared.config import LoggingSettings
from igdb_client.shared.logging import configure_logging

app = typer.Typer(help="IGDB API クライアントの CLI")

app.add_typer(api.app, name="api", help="IGDB API へのクエリ実行")


def main() -> None:
    """エントリポイント。"""

    configure_logging(LoggingSettings().log_level)
    app()


if __name__ == "__main__":  # pragma: no cover - CLI エントリ
    main()
