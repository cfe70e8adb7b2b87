"""指数退避重试编排。

每次调用独立执行一个状态机：

    ATTEMPTING -> SUCCESS      成功立即返回
    ATTEMPTING -> FAILED       不可重试，或重试次数已用完
    ATTEMPTING -> RETRY_WAIT   可重试且还有预算：等待 delay，delay *= multiplier

等待可以被外部的 threading.Event 打断，此时抛出不可重试的 GatewayError。
编排器不关心被包装的是 chat 还是 generate_title。
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from chat_gateway.config.settings import ProviderConfig
from chat_gateway.domain.exceptions import GatewayError
from chat_gateway.domain.models import Operation
from chat_gateway.infrastructure.logging.logger import logger
from chat_gateway.providers.classifier import cancelled


# wait(seconds, cancel) -> 是否被取消
Wait = Callable[[float, Optional[threading.Event]], bool]


def sleep_wait(seconds: float, cancel: Optional[threading.Event] = None) -> bool:
    if cancel is None:
        time.sleep(seconds)
        return False
    return cancel.wait(seconds)


@dataclass(frozen=True)
class RetryPolicy:
    """重试预算与退避参数，delay 单位为毫秒。"""

    max_retries: int = 3
    initial_delay_ms: float = 1000.0
    multiplier: float = 2.0

    def __post_init__(self):
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")

    @classmethod
    def from_config(cls, cfg: ProviderConfig) -> "RetryPolicy":
        return cls(
            max_retries=cfg.max_retries,
            initial_delay_ms=float(cfg.retry_delay_ms),
            multiplier=cfg.retry_multiplier,
        )

    def delay_before(self, attempt: int) -> float:
        """第 attempt 次尝试（从 0 计，>= 1）之前的等待毫秒数。"""

        return self.initial_delay_ms * self.multiplier ** (attempt - 1)


class RetryOrchestrator:
    def __init__(self, policy: RetryPolicy, wait: Wait = sleep_wait):
        self._policy = policy
        self._wait = wait

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    def run(
        self,
        operation: Operation,
        cancel: Optional[threading.Event] = None,
        name: str = "operation",
    ) -> str:
        max_retries = self._policy.max_retries
        delay_ms = self._policy.initial_delay_ms
        attempt = 0

        while True:
            if cancel is not None and cancel.is_set():
                raise cancelled(InterruptedError(f"{name} cancelled"))
            try:
                return operation()
            except GatewayError as e:
                if not e.retryable:
                    logger.error(
                        "Non-retryable AI error: %s",
                        e.message,
                        extra={"extra": {"operation": name, "code": e.code, "attempt": attempt + 1}},
                    )
                    raise
                if attempt >= max_retries:
                    logger.error(
                        "AI request failed after %d attempts",
                        max_retries + 1,
                        extra={"extra": {"operation": name, "code": e.code}},
                    )
                    raise
                logger.warning(
                    "AI request failed (attempt %d/%d): %s. Retrying in %.0fms...",
                    attempt + 1,
                    max_retries + 1,
                    e.message,
                    delay_ms,
                    extra={"extra": {"operation": name, "code": e.code}},
                )
                if self._wait(delay_ms / 1000.0, cancel):
                    raise cancelled(InterruptedError(f"{name} retry wait cancelled"))
                delay_ms *= self._policy.multiplier
                attempt += 1
