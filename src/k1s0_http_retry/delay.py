"""リトライ待機時間の計算"""

from __future__ import annotations

import math
import random
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

import httpx

from .headers import get_response_header

RETRY_AFTER_HEADER = "Retry-After"


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def exponential_backoff(attempts: int) -> float:
    """試行回数に応じた指数バックオフ値 (delay 倍前) を返す。

    0.5 * (2**attempts - 1) を四捨五入し、[0, 1) のジッターを小数 3 桁で加える。
    """
    jitter = round(random.random(), 3)
    return _round_half_up(0.5 * (2**attempts - 1)) + jitter


def _parse_timestamp(value: str) -> datetime | None:
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_retry_after(value: str, now: datetime | None = None) -> float | None:
    """Retry-After の値を秒数に変換する。

    数値ならそのまま秒数、日時なら now からの差 (秒、四捨五入) を返す。
    過去の日時は 0 以下になる。解釈できない値は None。
    """
    value = value.strip()
    try:
        seconds = float(value)
    except ValueError:
        pass
    else:
        if math.isfinite(seconds):
            return seconds
    timestamp = _parse_timestamp(value)
    if timestamp is None:
        return None
    now = now or datetime.now(timezone.utc)
    return float(_round_half_up((timestamp - now).total_seconds()))


def get_delay(
    response: httpx.Response | None,
    attempts: int,
    delay: float,
    max_delay: float,
    now: datetime | None = None,
) -> float:
    """次のリトライまでの待機秒数を返す。

    Retry-After があればそれを優先し、なければ指数バックオフ * delay。
    いずれも max_delay で頭打ちにし、負値は 0 に丸める。
    """
    new_delay: float | None = None
    retry_after = get_response_header(response, RETRY_AFTER_HEADER)
    if retry_after is not None:
        new_delay = parse_retry_after(retry_after, now)
    if new_delay is None:
        new_delay = exponential_backoff(attempts) * delay
    return max(min(new_delay, max_delay), 0.0)
