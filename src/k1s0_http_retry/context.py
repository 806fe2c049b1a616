"""ミドルウェアチェーンを流れるコンテキスト"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

import httpx

from .control import MiddlewareControl

RequestInfo = httpx.Request | str


@dataclass
class MiddlewareContext:
    """1 回の呼び出しで各ミドルウェアが共有する作業単位。

    request が URL 文字列の場合、メソッドとヘッダーは options の
    "method" / "headers" に保持する。
    """

    request: RequestInfo
    options: dict[str, Any] = field(default_factory=dict)
    response: httpx.Response | None = None
    middleware_control: MiddlewareControl | None = None
    cancel_event: asyncio.Event | None = None
