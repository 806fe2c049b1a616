"""http_retry ライブラリの例外型定義"""

from __future__ import annotations


class RetryHandlerError(Exception):
    """http_retry ライブラリのエラー基底クラス。"""

    def __init__(
        self,
        code: str,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.code}: {super().__str__()}"


class RetryCancelledError(RetryHandlerError):
    """キャンセルシグナルによりリトライが中断された場合のエラー。"""

    def __init__(self, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(
            code=RetryHandlerErrorCodes.CANCELLED,
            message=f"Retry cancelled after {attempts} attempts",
        )


class RetryHandlerErrorCodes:
    """RetryHandlerError のエラーコード定数。"""

    MAX_LIMIT_EXCEEDED: str = "MAX_LIMIT_EXCEEDED"
    MIN_EXPECTATION_NOT_MET: str = "MIN_EXPECTATION_NOT_MET"
    INVALID_OPTIONS: str = "INVALID_OPTIONS"
    NEXT_MIDDLEWARE_NOT_SET: str = "NEXT_MIDDLEWARE_NOT_SET"
    CANCELLED: str = "CANCELLED"
    READ_FILE: str = "READ_FILE_ERROR"
    PARSE_YAML: str = "PARSE_YAML_ERROR"
    VALIDATION: str = "VALIDATION_ERROR"
