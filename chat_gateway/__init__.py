"""Chat Gateway 顶层包。

该包是对话应用与外部 LLM Provider 之间的网关层，
包括配置加载、领域模型、Provider 适配、错误分类、
指数退避重试以及对外的 Gateway 入口。
"""

from chat_gateway.api.service import Gateway, get_default_gateway
from chat_gateway.domain.exceptions import GatewayError
from chat_gateway.domain.models import ConversationTurn

__all__ = ["ConversationTurn", "Gateway", "GatewayError", "get_default_gateway"]
