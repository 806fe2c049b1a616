"""RetryHandlerOptions のユニットテスト"""

import dataclasses

import pytest
from k1s0_http_retry import (
    DEFAULT_RETRY_OPTIONS,
    RetryHandlerError,
    RetryHandlerErrorCodes,
    RetryHandlerOptions,
    merge_options,
)


def test_default_options() -> None:
    """デフォルト設定の確認。"""
    opts = RetryHandlerOptions()
    assert opts.max_retries == 3
    assert opts.delay == 3.0
    assert opts.max_delay == 180.0
    assert opts.should_retry(3.0, 0, "https://example.com", {}, None) is True


def test_options_are_frozen() -> None:
    """設定が不変であること。"""
    with pytest.raises(dataclasses.FrozenInstanceError):
        DEFAULT_RETRY_OPTIONS.max_retries = 5  # type: ignore[misc]


@pytest.mark.parametrize(
    ("kwargs", "code"),
    [
        ({"delay": 181.0, "max_delay": 200.0, "max_retries": 11}, RetryHandlerErrorCodes.MAX_LIMIT_EXCEEDED),
        ({"delay": 181.0, "max_delay": 200.0}, RetryHandlerErrorCodes.MAX_LIMIT_EXCEEDED),
        ({"max_retries": 11}, RetryHandlerErrorCodes.MAX_LIMIT_EXCEEDED),
        ({"max_retries": -1}, RetryHandlerErrorCodes.MIN_EXPECTATION_NOT_MET),
        ({"delay": -1.0}, RetryHandlerErrorCodes.MIN_EXPECTATION_NOT_MET),
        ({"delay": 10.0, "max_delay": 5.0}, RetryHandlerErrorCodes.INVALID_OPTIONS),
        ({"should_retry": "yes"}, RetryHandlerErrorCodes.INVALID_OPTIONS),
        ({"max_delay": float("nan")}, RetryHandlerErrorCodes.INVALID_OPTIONS),
        ({"delay": float("nan")}, RetryHandlerErrorCodes.INVALID_OPTIONS),
        ({"max_delay": float("inf")}, RetryHandlerErrorCodes.INVALID_OPTIONS),
    ],
)
def test_invalid_options(kwargs: dict, code: str) -> None:
    """不正な設定で RetryHandlerError が発生すること。"""
    with pytest.raises(RetryHandlerError) as exc_info:
        RetryHandlerOptions(**kwargs)
    assert exc_info.value.code == code


def test_error_str_contains_code() -> None:
    """エラー文字列にコードが含まれること。"""
    with pytest.raises(RetryHandlerError) as exc_info:
        RetryHandlerOptions(max_retries=-1)
    assert str(exc_info.value).startswith("MIN_EXPECTATION_NOT_MET: ")


def test_merge_without_override_returns_default() -> None:
    """override がなければ default がそのまま返ること。"""
    assert merge_options(DEFAULT_RETRY_OPTIONS, None) is DEFAULT_RETRY_OPTIONS


def test_merge_partial_override() -> None:
    """部分的な override が default に重ねられること。"""
    base = RetryHandlerOptions(max_retries=5, delay=1.0, max_delay=30.0)
    merged = merge_options(base, {"max_retries": 1})
    assert merged.max_retries == 1
    assert merged.delay == 1.0
    assert merged.max_delay == 30.0
    assert base.max_retries == 5


def test_merge_full_override() -> None:
    """RetryHandlerOptions の override はそのまま採用されること。"""
    override = RetryHandlerOptions(max_retries=0)
    assert merge_options(DEFAULT_RETRY_OPTIONS, override) is override


def test_merge_unknown_key() -> None:
    """未知のキーは INVALID_OPTIONS になること。"""
    with pytest.raises(RetryHandlerError) as exc_info:
        merge_options(DEFAULT_RETRY_OPTIONS, {"retries": 1})
    assert exc_info.value.code == RetryHandlerErrorCodes.INVALID_OPTIONS


def test_merge_invalid_value_is_validated() -> None:
    """override 後の値も検証されること。"""
    with pytest.raises(RetryHandlerError) as exc_info:
        merge_options(DEFAULT_RETRY_OPTIONS, {"max_retries": 20})
    assert exc_info.value.code == RetryHandlerErrorCodes.MAX_LIMIT_EXCEEDED


def test_merge_unsupported_type() -> None:
    """Mapping 以外の override は拒否されること。"""
    with pytest.raises(RetryHandlerError):
        merge_options(DEFAULT_RETRY_OPTIONS, 3)  # type: ignore[arg-type]


def test_merge_rejects_nan_max_delay() -> None:
    """override で NaN の max_delay を渡しても上限が無効化されないこと。"""
    with pytest.raises(RetryHandlerError) as exc_info:
        merge_options(DEFAULT_RETRY_OPTIONS, {"max_delay": float("nan")})
    assert exc_info.value.code == RetryHandlerErrorCodes.INVALID_OPTIONS
