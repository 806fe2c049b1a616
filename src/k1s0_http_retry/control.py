"""ミドルウェアごとのリクエスト単位オプション"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class OptionKey:
    """オーバーライドを引くためのキー。"""

    name: str


class MiddlewareControl:
    """呼び出し単位でミドルウェアのオプションを上書きするための入れ物。"""

    def __init__(self, options: Mapping[OptionKey, Any] | None = None) -> None:
        self._options: dict[OptionKey, Any] = dict(options or {})

    def get_middleware_options(self, key: OptionKey) -> Any | None:
        """キーに対応するオプションを返す。未登録なら None。"""
        return self._options.get(key)

    def set_middleware_options(self, key: OptionKey, value: Any) -> None:
        """キーに対応するオプションを登録する。"""
        self._options[key] = value
