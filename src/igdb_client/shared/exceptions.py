"""共通例外。"""

from __future__ import annotations


class BaseAppError(Exception):
    """全レイヤで共有するベース例外。"""

    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class ConfigurationError(BaseAppError):
    """設定読み込みや不足を示すエラー。

    起動時の致命的な設定不足を表すため、クライアントのエラー体系には含めない。
    """

    default_message = "Configuration is invalid or missing"


__all__ = [
    "BaseAppError",
    "ConfigurationError",
]
