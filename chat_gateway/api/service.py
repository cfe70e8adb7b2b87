"""对外 API 服务模块。

Gateway 是应用其余部分唯一调用的入口：
- 启动时根据配置选择一次 ProviderClient。
- sendMessage / generateTitle 经 RetryOrchestrator 包装后调用 Provider。
- 同时提供进程级默认实例与模块级便捷函数。
"""

import threading
from typing import Optional, Sequence

from chat_gateway.config.settings import ProviderConfig, settings
from chat_gateway.domain.models import ConversationTurn
from chat_gateway.infrastructure.logging.logger import logger
from chat_gateway.infrastructure.retry import RetryOrchestrator, RetryPolicy
from chat_gateway.providers import ProviderClient, create_provider
from chat_gateway.providers.classifier import invalid_input


def _is_blank(text: Optional[str]) -> bool:
    return text is None or not text.strip()


class Gateway:
    """网关门面：输入校验 + Provider 选择 + 重试编排。

    配置与选中的 ProviderClient 在构造后只读，可被多个调用方并发使用。
    """

    def __init__(
        self,
        cfg: ProviderConfig = settings,
        provider_client: Optional[ProviderClient] = None,
        orchestrator: Optional[RetryOrchestrator] = None,
    ):
        self._cfg = cfg
        self._client = provider_client if provider_client is not None else create_provider(cfg=cfg)
        self._orchestrator = orchestrator or RetryOrchestrator(RetryPolicy.from_config(cfg))
        logger.info(
            "AI gateway initialised",
            extra={"extra": {"provider": getattr(self._client, "name", type(self._client).__name__)}},
        )

    @property
    def provider(self) -> ProviderClient:
        return self._client

    def send_message(
        self,
        user_message: Optional[str],
        history: Optional[Sequence[ConversationTurn]] = None,
        cancel: Optional[threading.Event] = None,
    ) -> str:
        """发送一条用户消息（附带历史），返回模型回复。

        Raises:
            GatewayError: 输入为空（INVALID_INPUT）或 Provider 调用最终失败。
        """
        if _is_blank(user_message):
            raise invalid_input("User message cannot be empty")
        return self._orchestrator.run(
            lambda: self._client.chat(user_message, history),
            cancel=cancel,
            name="chat",
        )

    def generate_title(
        self,
        first_user_message: Optional[str],
        first_ai_response: Optional[str] = None,
        cancel: Optional[threading.Event] = None,
    ) -> str:
        """根据首轮问答生成会话标题。"""
        if _is_blank(first_user_message):
            raise invalid_input("First user message cannot be empty")
        return self._orchestrator.run(
            lambda: self._client.generate_title(first_user_message, first_ai_response),
            cancel=cancel,
            name="generate_title",
        )

    def is_available(self) -> bool:
        return self._client is not None and self._client.is_configured()


_gateway: Optional[Gateway] = None
_gateway_lock = threading.Lock()


def get_default_gateway() -> Gateway:
    """获取默认的 Gateway 实例（单例）。"""
    global _gateway
    if _gateway is None:
        with _gateway_lock:
            if _gateway is None:
                _gateway = Gateway(settings)
    return _gateway


def send_message(
    user_message: Optional[str],
    history: Optional[Sequence[ConversationTurn]] = None,
    cancel: Optional[threading.Event] = None,
) -> str:
    return get_default_gateway().send_message(user_message, history, cancel=cancel)


def generate_title(
    first_user_message: Optional[str],
    first_ai_response: Optional[str] = None,
    cancel: Optional[threading.Event] = None,
) -> str:
    return get_default_gateway().generate_title(first_user_message, first_ai_response, cancel=cancel)


def is_available() -> bool:
    return get_default_gateway().is_available()
