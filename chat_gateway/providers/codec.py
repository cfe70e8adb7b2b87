"""Provider JSON 报文编解码。

不依赖通用 JSON 库：

- 编码：按固定转义表拼接请求体文本。
- 解码：在响应文本中定位字段标记（OpenAI 为 "content":，Claude 为
  content 数组里的 "text":），找到第一个未转义的结束引号截取值，
  再按同一张转义表反转义。

找不到标记、起始引号或结束引号时抛出 PARSE_ERROR。
"""

from typing import Iterable, Optional

from chat_gateway.domain.exceptions import GatewayError
from chat_gateway.domain.models import ConversationTurn


OPENAI_SYSTEM_PROMPT = "You are a helpful AI assistant."
TITLE_MAX_TOKENS = 50
TITLE_TEMPERATURE = 0.3

_ESCAPE_TABLE = str.maketrans(
    {
        "\\": "\\\\",
        '"': '\\"',
        "\n": "\\n",
        "\r": "\\r",
        "\t": "\\t",
    }
)
_UNESCAPES = {"\\": "\\", '"': '"', "n": "\n", "r": "\r", "t": "\t"}

OPENAI_MARKER = '"content":'
CLAUDE_MARKER = '"text":'


# ---- 转义 ----


def escape_json(text: Optional[str]) -> str:
    if text is None:
        return ""
    return text.translate(_ESCAPE_TABLE)


def unescape_json(text: Optional[str]) -> str:
    """单趟扫描反转义；表外的转义序列原样保留。"""

    if not text:
        return ""
    out: list[str] = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "\\" and i + 1 < n:
            nxt = text[i + 1]
            out.append(_UNESCAPES.get(nxt, ch + nxt))
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def find_closing_quote(text: str, start: int) -> int:
    i = start
    while i < len(text):
        c = text[i]
        if c == "\\":
            i += 2
            continue
        if c == '"':
            return i
        i += 1
    return -1


def extract_string_field(body: Optional[str], marker: str, start: int = 0) -> str:
    """取 marker 之后第一个字符串值。"""

    if not body:
        raise GatewayError("Empty response body", "PARSE_ERROR", False)
    idx = body.find(marker, start)
    if idx == -1:
        raise GatewayError("Invalid response format", "PARSE_ERROR", False)
    pos = idx + len(marker)
    while pos < len(body) and body[pos].isspace():
        pos += 1
    if pos >= len(body) or body[pos] != '"':
        raise GatewayError("Invalid response format", "PARSE_ERROR", False)
    end = find_closing_quote(body, pos + 1)
    if end == -1:
        raise GatewayError("Invalid response format", "PARSE_ERROR", False)
    return unescape_json(body[pos + 1:end])


# ---- 请求体 ----


def _message(role: str, content: str) -> str:
    return f'{{"role":"{role}","content":"{escape_json(content)}"}}'


def _history_messages(history: Optional[Iterable[ConversationTurn]]) -> list[str]:
    if not history:
        return []
    return [_message(t.normalized_role, t.content) for t in history if t.is_forwarded()]


def encode_openai_chat(
    model: str,
    user_message: str,
    history: Optional[Iterable[ConversationTurn]],
    max_tokens: int,
    temperature: float,
) -> str:
    msgs = [_message("system", OPENAI_SYSTEM_PROMPT)]
    msgs.extend(_history_messages(history))
    msgs.append(_message("user", user_message))
    return (
        f'{{"model":"{escape_json(model)}","messages":[{",".join(msgs)}],'
        f'"max_tokens":{max_tokens},"temperature":{temperature:.1f}}}'
    )


def encode_openai_title(model: str, prompt: str) -> str:
    return (
        f'{{"model":"{escape_json(model)}","messages":[{_message("user", prompt)}],'
        f'"max_tokens":{TITLE_MAX_TOKENS},"temperature":{TITLE_TEMPERATURE:.1f}}}'
    )


def encode_claude_chat(
    model: str,
    user_message: str,
    history: Optional[Iterable[ConversationTurn]],
    max_tokens: int,
) -> str:
    msgs = _history_messages(history)
    msgs.append(_message("user", user_message))
    return (
        f'{{"model":"{escape_json(model)}","messages":[{",".join(msgs)}],'
        f'"max_tokens":{max_tokens}}}'
    )


def encode_claude_title(model: str, prompt: str) -> str:
    return (
        f'{{"model":"{escape_json(model)}","messages":[{_message("user", prompt)}],'
        f'"max_tokens":{TITLE_MAX_TOKENS}}}'
    )


# ---- 响应体 ----


def decode_openai(body: Optional[str]) -> str:
    """{"choices":[{"message":{"role":"assistant","content":"..."}}]}"""

    return extract_string_field(body, OPENAI_MARKER)


def decode_claude(body: Optional[str]) -> str:
    """{"content":[{"type":"text","text":"..."}]}"""

    start = 0
    if body:
        content_at = body.find(OPENAI_MARKER)
        if content_at != -1:
            start = content_at
    return extract_string_field(body, CLAUDE_MARKER, start)
