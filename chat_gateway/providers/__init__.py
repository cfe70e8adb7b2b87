"""LLM Provider 集成层。

该包下的模块负责：
- 定义 Provider 抽象接口 (base)。
- 维护各厂商的端点约定 (registry)。
- 请求/响应编解码 (codec) 与错误分类 (classifier)。
- 提供各厂商的具体实现 (openai_client、claude_client、mock_client)。
"""

from typing import Optional

from chat_gateway.config.settings import ProviderConfig, settings
from chat_gateway.infrastructure.logging.logger import logger
from chat_gateway.providers.base import ProviderClient
from chat_gateway.providers.claude_client import ClaudeClient
from chat_gateway.providers.mock_client import MockClient
from chat_gateway.providers.openai_client import OpenAiClient


def create_provider(name: Optional[str] = None, cfg: Optional[ProviderConfig] = None) -> ProviderClient:
    """根据名称创建 Provider 实例，默认取配置中的 provider；未知名称回退到 mock。"""

    cfg = cfg or settings
    provider_name = (name or cfg.provider or "mock").strip().lower()
    if provider_name == "openai":
        return OpenAiClient(cfg)
    if provider_name == "claude":
        return ClaudeClient(cfg)
    logger.info("Using mock AI provider", extra={"extra": {"requested": name or cfg.provider}})
    return MockClient()


__all__ = ["ClaudeClient", "MockClient", "OpenAiClient", "ProviderClient", "create_provider"]
