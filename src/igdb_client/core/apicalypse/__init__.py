"""Apicalypse クエリ DSL の組み立て。"""

from .builder import ApicalypseBuilder, wrap_statement

__all__ = ["ApicalypseBuilder", "wrap_statement"]
