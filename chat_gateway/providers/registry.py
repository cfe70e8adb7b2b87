"""Provider 端点配置。

把每个厂商固定不变的部分（默认 base_url、端点路径、认证头、默认模型）
集中在这里，配置里的 base_url 只用于覆盖默认地址。
"""

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional


@dataclass(frozen=True)
class ProviderEndpoint:
    """某个 Provider 的固定 HTTP 约定。"""

    name: str
    label: str
    base_url: str
    path: str
    default_model: Optional[str] = None
    static_headers: Dict[str, str] = field(default_factory=dict)

    def url(self, base_url: Optional[str] = None) -> str:
        return f"{base_url or self.base_url}{self.path}"


OPENAI_ENDPOINT = ProviderEndpoint(
    name="openai",
    label="OpenAI",
    base_url="https://api.openai.com/v1",
    path="/chat/completions",
)

# Anthropic Messages API
CLAUDE_ENDPOINT = ProviderEndpoint(
    name="claude",
    label="Claude",
    base_url="https://api.anthropic.com/v1",
    path="/messages",
    default_model="claude-3-sonnet-20240229",
    static_headers={"anthropic-version": "2023-06-01"},
)


PROVIDER_REGISTRY: Mapping[str, ProviderEndpoint] = {
    "openai": OPENAI_ENDPOINT,
    "claude": CLAUDE_ENDPOINT,
}


def get_endpoint(name: str) -> ProviderEndpoint:
    """根据名称获取 ProviderEndpoint，名称不区分大小写。"""

    key = (name or "").lower()
    if key not in PROVIDER_REGISTRY:
        raise KeyError(f"Unknown provider: {name!r}")
    return PROVIDER_REGISTRY[key]
