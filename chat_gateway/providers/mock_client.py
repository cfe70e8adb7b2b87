"""开发与测试用的 Mock Provider，不发起任何网络请求。"""

import time
from typing import Optional, Sequence

from chat_gateway.domain.models import ConversationTurn
from chat_gateway.infrastructure.logging.logger import logger
from chat_gateway.providers.base import fallback_title, truncate


GREETING_REPLY = "Hello! I'm a mock AI assistant. How can I help you today?"

HELP_REPLY = (
    "I'm here to help! This is a mock response for development purposes. "
    "In production, this would be replaced with actual AI responses."
)

CODE_REPLY = (
    "I can help with coding questions! Here's a simple example:\n\n"
    "```python\n"
    "def main():\n"
    '    print("Hello, World!")\n'
    "\n"
    'if __name__ == "__main__":\n'
    "    main()\n"
    "```\n\n"
    "This is a mock response for testing purposes."
)

ECHO_EXCERPT_CHARS = 50


class MockClient:
    """按关键词返回固定回复的客户端，始终视为已配置。"""

    name = "mock"

    def __init__(self, latency: float = 0.0):
        # 模拟处理耗时（秒）
        self._latency = latency

    def chat(self, user_message: str, history: Optional[Sequence[ConversationTurn]] = None) -> str:
        logger.debug("Mock AI processing message: %s", user_message)
        if self._latency > 0:
            time.sleep(self._latency)
        return self._reply(user_message)

    def generate_title(self, first_user_message: str, first_ai_response: Optional[str] = None) -> str:
        return fallback_title(first_user_message)

    def is_configured(self) -> bool:
        return True

    @staticmethod
    def _reply(user_message: str) -> str:
        lower = (user_message or "").lower()
        if "hello" in lower or "hi" in lower:
            return GREETING_REPLY
        if "help" in lower:
            return HELP_REPLY
        if "code" in lower or "programming" in lower:
            return CODE_REPLY
        return (
            f'Thank you for your message: "{truncate(user_message, ECHO_EXCERPT_CHARS)}"\n\n'
            "This is a mock AI response. In production, this would be replaced with "
            "actual responses from an AI provider like OpenAI or Claude."
        )
