"""ミドルウェアチェーンの契約と組み立て"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

import httpx

from .context import MiddlewareContext
from .headers import get_request_method


class Middleware(ABC):
    """チェーンを構成するミドルウェアの抽象基底クラス。"""

    _next: Middleware | None = None

    @abstractmethod
    async def execute(self, context: MiddlewareContext) -> None:
        """コンテキストを処理する。"""
        ...

    def set_next(self, next_middleware: Middleware) -> None:
        """チェーン上の次のミドルウェアを設定する。"""
        self._next = next_middleware

    @property
    def next_middleware(self) -> Middleware | None:
        return self._next


class MiddlewareChain:
    """順序付きのミドルウェア列を構築時に連結したチェーン。"""

    def __init__(self, middlewares: Sequence[Middleware]) -> None:
        if not middlewares:
            raise ValueError("middleware chain requires at least one middleware")
        for current, following in zip(middlewares, middlewares[1:]):
            current.set_next(following)
        self._middlewares = tuple(middlewares)

    @property
    def middlewares(self) -> tuple[Middleware, ...]:
        return self._middlewares

    async def execute(self, context: MiddlewareContext) -> None:
        """先頭のミドルウェアからチェーンを実行する。"""
        await self._middlewares[0].execute(context)


class HttpxTransport(Middleware):
    """httpx.AsyncClient でリクエストを送信する終端ミドルウェア。"""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    def set_next(self, next_middleware: Middleware) -> None:
        raise ValueError("HttpxTransport must be the last middleware in the chain")

    def _build_request(self, context: MiddlewareContext) -> httpx.Request:
        if isinstance(context.request, httpx.Request):
            return context.request
        options = context.options
        return self._client.build_request(
            get_request_method(context.request, options) or "GET",
            context.request,
            headers=options.get("headers"),
            content=options.get("content"),
            json=options.get("json"),
            params=options.get("params"),
        )

    async def execute(self, context: MiddlewareContext) -> None:
        """リクエストを送信し、レスポンスをコンテキストに格納する。"""
        context.response = await self._client.send(self._build_request(context))
