"""统一的网关错误模型。

网关只有一种异常类型 GatewayError，不再按错误种类派生子类：

- code: 机器可读错误码，取值限定在 ERROR_CODES 中。
- retryable: 是否允许重试，是 Retry 编排器唯一参考的信号。
- cause: 可选的底层异常，便于诊断。
"""

from typing import Literal, Optional


ErrorCode = Literal[
    "CONFIG_ERROR",
    "AUTH_ERROR",
    "RATE_LIMIT",
    "SERVER_ERROR",
    "API_ERROR",
    "AI_ERROR",
    "PARSE_ERROR",
    "INVALID_INPUT",
]

ERROR_CODES = frozenset(
    {
        "CONFIG_ERROR",
        "AUTH_ERROR",
        "RATE_LIMIT",
        "SERVER_ERROR",
        "API_ERROR",
        "AI_ERROR",
        "PARSE_ERROR",
        "INVALID_INPUT",
    }
)


class GatewayError(Exception):
    """Provider 调用失败时抛出的唯一异常。

    Attributes:
        message: 可读错误信息。
        code: 错误码（如 "RATE_LIMIT"）。
        retryable: 相同输入再次尝试是否可能成功。
        cause: 触发该错误的底层异常（可选）。
        http_status: Provider 返回的 HTTP 状态码（可选）。
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = "AI_ERROR",
        retryable: bool = True,
        cause: Optional[BaseException] = None,
        http_status: Optional[int] = None,
    ):
        if code not in ERROR_CODES:
            raise ValueError(f"Unknown gateway error code: {code!r}")
        self.message = message
        self.code = code
        self.retryable = retryable
        self.cause = cause
        self.http_status = http_status
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        return (
            f"GatewayError(code={self.code!r}, retryable={self.retryable}, "
            f"message={self.message!r})"
        )
