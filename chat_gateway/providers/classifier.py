"""错误分类：把传输层 / HTTP 结果映射为带 retryable 标记的 GatewayError。

| 情况              | code          | retryable |
|-------------------|---------------|-----------|
| API key 缺失      | CONFIG_ERROR  | False     |
| HTTP 401          | AUTH_ERROR    | False     |
| HTTP 429          | RATE_LIMIT    | True      |
| HTTP >= 500       | SERVER_ERROR  | True      |
| 其他非 200        | API_ERROR     | False     |
| 超时 / 其他 I/O   | AI_ERROR      | True      |
| 响应缺字段        | PARSE_ERROR   | False     |
| 输入为空          | INVALID_INPUT | False     |
"""

import socket
from typing import Optional

import httpx

from chat_gateway.domain.exceptions import GatewayError


def missing_api_key(provider: str) -> GatewayError:
    return GatewayError(f"{provider} API key not configured", "CONFIG_ERROR", False)


def invalid_input(message: str) -> GatewayError:
    return GatewayError(message, "INVALID_INPUT", False)


def classify_http_status(status: int, body: str = "", provider: str = "AI") -> Optional[GatewayError]:
    """200 返回 None，其余状态码返回对应错误。"""

    if status == 200:
        return None
    if status == 429:
        return GatewayError("Rate limit exceeded", "RATE_LIMIT", True, http_status=status)
    if status == 401:
        return GatewayError("Invalid API key", "AUTH_ERROR", False, http_status=status)
    if status >= 500:
        return GatewayError(f"{provider} server error", "SERVER_ERROR", True, http_status=status)
    return GatewayError(
        f"{provider} API error: {body}",
        "API_ERROR",
        status >= 500,
        http_status=status,
    )


def classify_transport_error(exc: BaseException) -> GatewayError:
    """网络层异常一律可重试，超时单独给出提示。"""

    if isinstance(exc, (httpx.TimeoutException, socket.timeout, TimeoutError)):
        return GatewayError("Request timeout", "AI_ERROR", True, cause=exc)
    return GatewayError(f"Network error: {exc}", "AI_ERROR", True, cause=exc)


def cancelled(cause: BaseException) -> GatewayError:
    return GatewayError("Operation interrupted", "AI_ERROR", False, cause=cause)
