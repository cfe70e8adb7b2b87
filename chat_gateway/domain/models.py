"""网关内部共享的对话数据模型。

- ConversationTurn: 历史中的一轮对话（user/assistant/...）。
- Operation: 一次可重试的工作单元，Retry 编排器只依赖这个形状，
  不关心它是 chat 还是 generate_title。

所有 Provider 适配器只读取这些模型，不会修改或重排历史。
"""

from dataclasses import dataclass
from typing import Callable, Literal


# 对话角色（与 OpenAI / Anthropic 的 role 字段对应）
Role = Literal["system", "user", "assistant"]

# 只有这两类角色会被转发给 Provider
FORWARDED_ROLES = frozenset({"user", "assistant"})


@dataclass(frozen=True)
class ConversationTurn:
    """一条历史消息，创建后不可变。

    - role: 消息角色，比较时不区分大小写。
    - content: 纯文本内容。
    """

    role: Role
    content: str

    @property
    def normalized_role(self) -> str:
        return (self.role or "").lower()

    def is_forwarded(self) -> bool:
        return self.normalized_role in FORWARDED_ROLES


Operation = Callable[[], str]
