"""配置层：Provider 选择、认证、超时与重试参数。"""

from chat_gateway.config.settings import ProviderConfig, settings

__all__ = ["ProviderConfig", "settings"]
