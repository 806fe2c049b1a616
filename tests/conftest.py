"""共有フィクスチャ"""

from __future__ import annotations

import pytest
from k1s0_http_retry import delay as delay_module
from k1s0_http_retry import handler as handler_module


@pytest.fixture
def sleeps(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """実際には待機せず、待機時間を記録する。"""
    recorded: list[float] = []

    async def fake_sleep(delay: float, cancel_event: object) -> bool:
        recorded.append(delay)
        return False

    monkeypatch.setattr(handler_module, "_sleep", fake_sleep)
    monkeypatch.setattr(delay_module.random, "random", lambda: 0.0)
    return recorded
