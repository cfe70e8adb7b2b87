"""Provider 抽象接口。

Gateway 不直接依赖具体厂商的 HTTP 细节，而是依赖此协议：

- 每个厂商实现一个 ProviderClient（OpenAiClient、ClaudeClient、MockClient）。
- 负责：把消息与历史编码成请求，发送请求，并把响应解码为纯文本。

另外提供标题生成共用的提示词与本地回退逻辑。
"""

from typing import Optional, Protocol, Sequence

from chat_gateway.domain.models import ConversationTurn


TITLE_FALLBACK_WORDS = 5
TITLE_CONTEXT_CHARS = 200


class ProviderClient(Protocol):
    """LLM Provider 客户端协议。

    实现者需要提供：
    - name: Provider 名称，用于日志。
    - chat: 执行一次对话调用，返回回复文本，失败抛 GatewayError。
    - generate_title: 为会话生成标题。
    - is_configured: 不发请求、无副作用地判断是否可用。
    """

    name: str

    def chat(self, user_message: str, history: Optional[Sequence[ConversationTurn]]) -> str:
        ...

    def generate_title(self, first_user_message: str, first_ai_response: Optional[str]) -> str:
        ...

    def is_configured(self) -> bool:
        ...


def truncate(text: Optional[str], max_length: int) -> str:
    if text is None:
        return ""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def build_title_prompt(first_user_message: str, first_ai_response: Optional[str]) -> str:
    return (
        "Generate a short, concise title (max 6 words) for a conversation that starts with:\n"
        f"User: {truncate(first_user_message, TITLE_CONTEXT_CHARS)}\n"
        f"Assistant: {truncate(first_ai_response, TITLE_CONTEXT_CHARS)}\n\n"
        "Respond with only the title, no quotes or extra text."
    )


def fallback_title(first_user_message: Optional[str]) -> str:
    """取前五个单词作为标题，被截断时追加省略号。"""

    words = (first_user_message or "").split()
    title = " ".join(words[:TITLE_FALLBACK_WORDS])
    if len(words) > TITLE_FALLBACK_WORDS:
        title += "..."
    return title
