"""Apicalypse クエリ文字列を組み立てるビルダー。"""

from __future__ import annotations

from dataclasses import dataclass

FIELDS_PREFIX = "f"
EXCLUDE_PREFIX = "x"
FILTER_PREFIX = "w"
LIMIT_PREFIX = "l"
OFFSET_PREFIX = "o"
SORT_PREFIX = "s"


def wrap_statement(prefix: str, statement: str | int) -> str:
    """空文字列や 0 の句は出力せず、それ以外を `"<prefix> <value>;"` に整形する。"""

    rendered = str(statement)
    if not rendered or rendered == "0":
        return ""
    return f"{prefix} {rendered};"


@dataclass(slots=True)
class ApicalypseBuilder:
    """fields/exclude/filter/limit/offset/sort の 6 句を保持するビルダー。

    各セッターは値を保存して自身を返すため、メソッドチェーンで組み立てられる。
    句の内容はエスケープも検証もしない。
    """

    filter_clause: str = ""
    limit_value: int = 0
    offset_value: int = 0
    fields_clause: str = ""
    exclude_clause: str = ""
    sort_clause: str = ""

    def filter(self, filter_: str) -> ApicalypseBuilder:
        self.filter_clause = filter_
        return self

    def limit(self, limit: int) -> ApicalypseBuilder:
        self.limit_value = limit
        return self

    def offset(self, offset: int) -> ApicalypseBuilder:
        self.offset_value = offset
        return self

    def fields(self, fields: str) -> ApicalypseBuilder:
        self.fields_clause = fields
        return self

    def exclude(self, exclude: str) -> ApicalypseBuilder:
        self.exclude_clause = exclude
        return self

    def sort(self, sort: str) -> ApicalypseBuilder:
        self.sort_clause = sort
        return self

    def to_query(self) -> str:
        return "".join(
            (
                wrap_statement(FIELDS_PREFIX, self.fields_clause),
                wrap_statement(EXCLUDE_PREFIX, self.exclude_clause),
                wrap_statement(FILTER_PREFIX, self.filter_clause),
                wrap_statement(LIMIT_PREFIX, self.limit_value),
                wrap_statement(OFFSET_PREFIX, self.offset_value),
                wrap_statement(SORT_PREFIX, self.sort_clause),
            )
        )

    def __str__(self) -> str:
        return self.to_query()


__all__ = ["ApicalypseBuilder", "wrap_statement"]
