"""リクエスト/レスポンスヘッダーのアクセサ"""

from __future__ import annotations

from typing import Any

import httpx

from .context import RequestInfo


def get_request_method(request: RequestInfo, options: dict[str, Any] | None) -> str | None:
    """リクエストの HTTP メソッドを大文字で返す。"""
    if isinstance(request, httpx.Request):
        return request.method.upper()
    method = (options or {}).get("method")
    return method.upper() if method else None


def get_request_header(request: RequestInfo, options: dict[str, Any] | None, name: str) -> str | None:
    """リクエストヘッダーを大文字小文字を区別せずに取得する。"""
    if isinstance(request, httpx.Request):
        return request.headers.get(name)
    headers = (options or {}).get("headers")
    if headers is None:
        return None
    if not isinstance(headers, dict):
        return httpx.Headers(headers).get(name)
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


def set_request_header(request: RequestInfo, options: dict[str, Any], name: str, value: str) -> None:
    """リクエストヘッダーを設定する。既存の同名ヘッダーは置き換える。"""
    if isinstance(request, httpx.Request):
        request.headers[name] = value
        return
    headers = options.get("headers")
    if headers is None:
        options["headers"] = {name: value}
        return
    if not isinstance(headers, dict):
        if not isinstance(headers, httpx.Headers):
            headers = httpx.Headers(headers)
            options["headers"] = headers
        headers[name] = value
        return
    lowered = name.lower()
    for key in [k for k in headers if k.lower() == lowered]:
        del headers[key]
    headers[name] = value


def get_response_header(response: httpx.Response | None, name: str) -> str | None:
    if response is None:
        return None
    return response.headers.get(name)
