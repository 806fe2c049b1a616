"""RetryHandler の設定"""

from __future__ import annotations

import dataclasses
import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar

import httpx

from .context import RequestInfo
from .control import OptionKey
from .exceptions import RetryHandlerError, RetryHandlerErrorCodes

ShouldRetry = Callable[[float, int, RequestInfo, dict[str, Any], httpx.Response], bool]

DEFAULT_DELAY = 3.0
DEFAULT_MAX_RETRIES = 3
MAX_DELAY = 180.0
MAX_MAX_RETRIES = 10


def _always_retry(
    delay: float,
    attempts: int,
    request: RequestInfo,
    options: dict[str, Any],
    response: httpx.Response,
) -> bool:
    return True


@dataclass(frozen=True)
class RetryHandlerOptions:
    """リトライポリシー設定。

    delay は指数バックオフの基準秒数、max_delay は Retry-After を含む
    すべての待機時間の上限。
    """

    KEY: ClassVar[OptionKey] = OptionKey("retry_handler")

    max_retries: int = DEFAULT_MAX_RETRIES
    delay: float = DEFAULT_DELAY
    max_delay: float = MAX_DELAY
    should_retry: ShouldRetry = field(default=_always_retry, compare=False)

    def __post_init__(self) -> None:
        if not (math.isfinite(self.delay) and math.isfinite(self.max_delay)):
            raise RetryHandlerError(
                code=RetryHandlerErrorCodes.INVALID_OPTIONS,
                message="delay and max_delay must be finite numbers",
            )
        if self.delay > MAX_DELAY and self.max_retries > MAX_MAX_RETRIES:
            raise RetryHandlerError(
                code=RetryHandlerErrorCodes.MAX_LIMIT_EXCEEDED,
                message=(
                    f"delay and max_retries exceed the limits: "
                    f"delay <= {MAX_DELAY}, max_retries <= {MAX_MAX_RETRIES}"
                ),
            )
        if self.delay > MAX_DELAY:
            raise RetryHandlerError(
                code=RetryHandlerErrorCodes.MAX_LIMIT_EXCEEDED,
                message=f"delay exceeds the limit of {MAX_DELAY} seconds",
            )
        if self.max_retries > MAX_MAX_RETRIES:
            raise RetryHandlerError(
                code=RetryHandlerErrorCodes.MAX_LIMIT_EXCEEDED,
                message=f"max_retries exceeds the limit of {MAX_MAX_RETRIES}",
            )
        if self.delay < 0 or self.max_retries < 0 or self.max_delay < 0:
            raise RetryHandlerError(
                code=RetryHandlerErrorCodes.MIN_EXPECTATION_NOT_MET,
                message="delay, max_delay and max_retries must not be negative",
            )
        if self.max_delay < self.delay:
            raise RetryHandlerError(
                code=RetryHandlerErrorCodes.INVALID_OPTIONS,
                message=f"max_delay ({self.max_delay}) must be >= delay ({self.delay})",
            )
        if not callable(self.should_retry):
            raise RetryHandlerError(
                code=RetryHandlerErrorCodes.INVALID_OPTIONS,
                message="should_retry must be callable",
            )


DEFAULT_RETRY_OPTIONS = RetryHandlerOptions()


def merge_options(
    default: RetryHandlerOptions,
    override: RetryHandlerOptions | Mapping[str, Any] | None,
) -> RetryHandlerOptions:
    """default に override を重ねた新しい設定を返す。default は変更しない。"""
    if override is None:
        return default
    if isinstance(override, RetryHandlerOptions):
        return override
    if not isinstance(override, Mapping):
        raise RetryHandlerError(
            code=RetryHandlerErrorCodes.INVALID_OPTIONS,
            message=f"Unsupported retry options override: {type(override).__name__}",
        )
    known = {f.name for f in dataclasses.fields(RetryHandlerOptions)}
    unknown = sorted(set(override) - known)
    if unknown:
        raise RetryHandlerError(
            code=RetryHandlerErrorCodes.INVALID_OPTIONS,
            message=f"Unknown retry options: {', '.join(unknown)}",
        )
    return dataclasses.replace(default, **override)
