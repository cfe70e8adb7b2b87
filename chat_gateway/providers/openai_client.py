"""OpenAI 兼容 Provider 适配器。

接口使用 chat/completions 端点：
- URL: {base_url}/chat/completions
- 认证: Authorization: Bearer <api_key>

消息数组固定以 system 提示开头，随后是按原顺序的 user/assistant 历史，
最后是本次用户输入。
"""

from typing import Optional, Sequence

from chat_gateway.config.settings import ProviderConfig, settings
from chat_gateway.domain.models import ConversationTurn
from chat_gateway.infrastructure.logging.logger import logger
from chat_gateway.providers.base import build_title_prompt, fallback_title
from chat_gateway.providers.classifier import missing_api_key
from chat_gateway.providers.codec import decode_openai, encode_openai_chat, encode_openai_title
from chat_gateway.providers.registry import get_endpoint
from chat_gateway.providers.transport import post_json


class OpenAiClient:
    """OpenAI 提供方客户端实现（GPT-3.5、GPT-4 及兼容服务）。"""

    name = "openai"

    def __init__(self, cfg: ProviderConfig = settings):
        self._cfg = cfg
        self._endpoint = get_endpoint(self.name)

    def chat(self, user_message: str, history: Optional[Sequence[ConversationTurn]] = None) -> str:
        if not self.is_configured():
            raise missing_api_key(self._endpoint.label)
        body = encode_openai_chat(
            self._cfg.model,
            user_message,
            history,
            self._cfg.max_tokens,
            self._cfg.temperature,
        )
        return decode_openai(self._post(body))

    def generate_title(self, first_user_message: str, first_ai_response: Optional[str] = None) -> str:
        prompt = build_title_prompt(first_user_message, first_ai_response)
        try:
            if not self.is_configured():
                raise missing_api_key(self._endpoint.label)
            title = decode_openai(self._post(encode_openai_title(self._cfg.model, prompt))).strip()
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
        return post_json(
            self._endpoint.url(self._cfg.base_url),
            body,
            {"Authorization": f"Bearer {self._cfg.api_key}"},
            self._cfg,
            self._endpoint.label,
        )
