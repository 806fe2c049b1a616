"""RetryHandler — 一時的な HTTP エラーに対するリトライミドルウェア"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
import structlog

from .context import MiddlewareContext, RequestInfo
from .delay import get_delay
from .exceptions import RetryCancelledError, RetryHandlerError, RetryHandlerErrorCodes
from .headers import get_request_header, get_request_method, get_response_header, set_request_header
from .middleware import Middleware
from .options import DEFAULT_RETRY_OPTIONS, RetryHandlerOptions, merge_options

logger = structlog.get_logger(__name__)

_BUFFERED_METHODS = frozenset({"PUT", "PATCH", "POST"})
_STREAM_CONTENT_TYPE = "application/octet-stream"


async def _sleep(delay: float, cancel_event: asyncio.Event | None) -> bool:
    """delay 秒待機する。キャンセルシグナルで中断された場合は True を返す。"""
    if cancel_event is None:
        await asyncio.sleep(delay)
        return False
    try:
        await asyncio.wait_for(cancel_event.wait(), timeout=delay)
    except asyncio.TimeoutError:
        return False
    return True


class RetryHandler(Middleware):
    """429/503/504 のレスポンスに対して後続チェーンを再実行するミドルウェア。"""

    RETRY_STATUS_CODES = frozenset({429, 503, 504})
    RETRY_ATTEMPT_HEADER = "Retry-Attempt"
    TRANSFER_ENCODING_HEADER = "Transfer-Encoding"
    TRANSFER_ENCODING_CHUNKED = "chunked"

    def __init__(self, options: RetryHandlerOptions = DEFAULT_RETRY_OPTIONS) -> None:
        self._options = options

    @property
    def options(self) -> RetryHandlerOptions:
        return self._options

    def is_retry(self, response: httpx.Response | None) -> bool:
        """レスポンスがリトライ対象のステータスか判定する。"""
        return response is not None and response.status_code in self.RETRY_STATUS_CODES

    def is_buffered(
        self,
        request: RequestInfo,
        options: dict[str, Any],
        response: httpx.Response | None,
    ) -> bool:
        """ペイロードを再送しても安全か判定する。"""
        if get_request_method(request, options) not in _BUFFERED_METHODS:
            return False
        if get_request_header(request, options, "Content-Type") == _STREAM_CONTENT_TYPE:
            return False
        return get_response_header(response, self.TRANSFER_ENCODING_HEADER) == self.TRANSFER_ENCODING_CHUNKED

    def _can_retry(self, context: MiddlewareContext, attempts: int, options: RetryHandlerOptions) -> bool:
        response = context.response
        return (
            attempts < options.max_retries
            and self.is_retry(response)
            and self.is_buffered(context.request, context.options, response)
            and bool(options.should_retry(options.delay, attempts, context.request, context.options, response))
        )

    def _effective_options(self, context: MiddlewareContext) -> RetryHandlerOptions:
        override = None
        if context.middleware_control is not None:
            override = context.middleware_control.get_middleware_options(RetryHandlerOptions.KEY)
        return merge_options(self._options, override)

    async def _execute_with_retry(
        self,
        next_middleware: Middleware,
        context: MiddlewareContext,
        options: RetryHandlerOptions,
    ) -> None:
        attempts = 0
        while True:
            await next_middleware.execute(context)
            if not self._can_retry(context, attempts, options):
                if attempts and self.is_retry(context.response):
                    logger.debug(
                        "retries exhausted",
                        attempts=attempts,
                        status_code=context.response.status_code,
                    )
                return
            attempts += 1
            set_request_header(context.request, context.options, self.RETRY_ATTEMPT_HEADER, str(attempts))
            delay = get_delay(context.response, attempts, options.delay, options.max_delay)
            logger.info(
                "retrying request",
                attempt=attempts,
                status_code=context.response.status_code,
                delay=delay,
            )
            cancel_event = context.cancel_event
            if (cancel_event is not None and cancel_event.is_set()) or await _sleep(delay, cancel_event):
                logger.warning("retry cancelled", attempts=attempts)
                raise RetryCancelledError(attempts)

    async def execute(self, context: MiddlewareContext) -> None:
        """後続チェーンを実行し、必要に応じてリトライする。"""
        if self._next is None:
            raise RetryHandlerError(
                code=RetryHandlerErrorCodes.NEXT_MIDDLEWARE_NOT_SET,
                message="RetryHandler has no next middleware",
            )
        await self._execute_with_retry(self._next, context, self._effective_options(context))
