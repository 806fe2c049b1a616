"""YAML からの RetryHandler 設定読み込み"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from .exceptions import RetryHandlerError, RetryHandlerErrorCodes
from .options import (
    DEFAULT_DELAY,
    DEFAULT_MAX_RETRIES,
    MAX_DELAY,
    MAX_MAX_RETRIES,
    RetryHandlerOptions,
    ShouldRetry,
)


class RetrySection(BaseModel):
    """リトライ設定セクション。"""

    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=0, le=MAX_MAX_RETRIES)
    delay: float = Field(default=DEFAULT_DELAY, ge=0.0, le=MAX_DELAY)
    max_delay: float = Field(default=MAX_DELAY, ge=0.0)

    @model_validator(mode="after")
    def _check_max_delay(self) -> RetrySection:
        if self.max_delay < self.delay:
            raise ValueError("max_delay must be greater than or equal to delay")
        return self

    def to_options(self, should_retry: ShouldRetry | None = None) -> RetryHandlerOptions:
        """RetryHandlerOptions に変換する。"""
        if should_retry is None:
            return RetryHandlerOptions(
                max_retries=self.max_retries,
                delay=self.delay,
                max_delay=self.max_delay,
            )
        return RetryHandlerOptions(
            max_retries=self.max_retries,
            delay=self.delay,
            max_delay=self.max_delay,
            should_retry=should_retry,
        )


def _read_yaml(path: Path) -> dict[str, Any]:
    """YAML ファイルを読み込む。"""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise RetryHandlerError(
            code=RetryHandlerErrorCodes.READ_FILE,
            message=f"Failed to read config file: {path}",
            cause=e,
        ) from e
    try:
        data: dict[str, Any] = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise RetryHandlerError(
            code=RetryHandlerErrorCodes.PARSE_YAML,
            message=f"Failed to parse YAML: {path}",
            cause=e,
        ) from e
    return data


def load_retry_options(
    path: Path,
    section: str = "retry",
    should_retry: ShouldRetry | None = None,
) -> RetryHandlerOptions:
    """設定ファイルの section を読み込んで RetryHandlerOptions を返す。

    section が存在しない場合はデフォルト値を使う。
    """
    data = _read_yaml(path)
    try:
        retry = RetrySection.model_validate(data.get(section) or {})
    except ValidationError as e:
        raise RetryHandlerError(
            code=RetryHandlerErrorCodes.VALIDATION,
            message=f"Retry config validation failed: {e}",
            cause=e,
        ) from e
    return retry.to_options(should_retry)
