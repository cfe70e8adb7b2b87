"""Anthropic Claude Provider 适配器。

与 OpenAI 适配器的区别：
- URL: {base_url}/messages
- 认证: x-api-key 头 + anthropic-version 头
- 消息数组中不放 system 角色，请求体不带 temperature
- 配置的模型名不像 Claude 模型时，替换为默认 Claude 模型
"""

from typing import Optional, Sequence

from chat_gateway.config.settings import ProviderConfig, settings
from chat_gateway.domain.models import ConversationTurn
from chat_gateway.infrastructure.logging.logger import logger
from chat_gateway.providers.base import build_title_prompt, fallback_title
from chat_gateway.providers.classifier import missing_api_key
from chat_gateway.providers.codec import decode_claude, encode_claude_chat, encode_claude_title
from chat_gateway.providers.registry import get_endpoint
from chat_gateway.providers.transport import post_json


class ClaudeClient:
    """Claude 提供方客户端实现（Claude 3 Opus / Sonnet / Haiku）。"""

    name = "claude"

    def __init__(self, cfg: ProviderConfig = settings):
        self._cfg = cfg
        self._endpoint = get_endpoint(self.name)

    @property
    def model(self) -> str:
        model = self._cfg.model
        if model and model.strip().lower().startswith("claude"):
            return model.strip()
        return self._endpoint.default_model

    def chat(self, user_message: str, history: Optional[Sequence[ConversationTurn]] = None) -> str:
        if not self.is_configured():
            raise missing_api_key(self._endpoint.label)
        body = encode_claude_chat(self.model, user_message, history, self._cfg.max_tokens)
        return decode_claude(self._post(body))

    def generate_title(self, first_user_message: str, first_ai_response: Optional[str] = None) -> str:
        prompt = build_title_prompt(first_user_message, first_ai_response)
        try:
            if not self.is_configured():
                raise missing_api_key(self._endpoint.label)
            title = decode_claude(self._post(encode_claude_title(self.model, prompt))).strip()
        except Exception as e:  # noqa: BLE001 - 标题失败一律走本地回退
            logger.warning(
                "Failed to generate title, using fallback",
                extra={"extra": {"provider": self.name, "code": getattr(e, "code", "AI_ERROR"), "error": str(e)}},
            )
            return fallback_title(first_user_message)
        return title or fallback_title(first_user_message)

    def is_configured(self) -> bool:
        return bool(self._cfg.api_key and self._cfg.api_key.strip())

    def _post(self, body: str) -> str:
        headers = {"x-api-key": self._cfg.api_key or "", **self._endpoint.static_headers}
        return post_json(
            self._endpoint.url(self._cfg.base_url),
            body,
            headers,
            self._cfg,
            self._endpoint.label,
        )
