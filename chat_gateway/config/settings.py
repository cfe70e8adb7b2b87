"""配置管理模块。

支持从构造参数、环境变量（AI_ 前缀）、.env 以及 config.yaml 加载配置。
配置在进程启动时加载一次，之后只读。
"""

import os
import warnings
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_config_from_yaml() -> Dict[str, Any]:
    """从 config.yaml 加载配置（若存在），支持把字段放在 ai: 节点下。"""
    candidates = []
    explicit = os.getenv("CHAT_GATEWAY_CONFIG_FILE")
    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.extend([
        Path.cwd() / "config.yaml",
        Path(__file__).resolve().parents[2] / "config.yaml",
    ])

    seen: set[Path] = set()
    for path in candidates:
        if path in seen:
            continue
        seen.add(path)
        try:
            if path.exists():
                data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
                if isinstance(data, dict):
                    nested = data.get("ai")
                    return nested if isinstance(nested, dict) else data
                warnings.warn(f"Config file {path} is not a mapping, ignored")
        except (OSError, yaml.YAMLError) as exc:
            warnings.warn(f"Failed to read config file {path}: {exc}")
    return {}


class ProviderConfig(BaseSettings):
    """网关配置（使用 Pydantic）。"""

    # ---- Provider 选择与认证 ----
    provider: str = Field(
        default="mock",
        description="Provider 名称：openai、claude，其他值一律回退到 mock",
    )
    api_key: Optional[str] = Field(default=None, description="Provider API 密钥")
    base_url: Optional[str] = Field(
        default=None,
        description="自定义 API 基础URL，不填则使用各 Provider 的默认地址",
    )
    model: str = Field(default="gpt-3.5-turbo", description="模型名，如 gpt-4、claude-3-sonnet")

    # ---- 生成参数 ----
    max_tokens: int = Field(default=2048, gt=0, description="单次回复最大 token 数")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="采样温度")

    # ---- 超时（毫秒） ----
    connect_timeout: int = Field(default=30000, gt=0, description="连接超时（毫秒）")
    read_timeout: int = Field(default=60000, gt=0, description="读取超时（毫秒）")

    # ---- 重试与退避 ----
    max_retries: int = Field(default=3, ge=0, description="最大重试次数（不含首次尝试）")
    retry_delay_ms: float = Field(default=1000, ge=0, description="首次重试前的等待（毫秒）")
    retry_multiplier: float = Field(default=2.0, gt=0, description="指数退避倍数")

    # ---- 日志 ----
    log_dir: str = Field(default="logs", description="日志目录")
    log_redact_content: bool = Field(default=False, description="是否脱敏日志内容")

    model_config = SettingsConfigDict(
        env_prefix="AI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
        protected_namespaces=(),
    )

    @staticmethod
    def _config_source() -> Dict[str, Any]:
        return _load_config_from_yaml()

    @field_validator("provider", mode="before")
    @classmethod
    def normalize_provider(cls, v: Optional[str]) -> str:
        if v is None or not str(v).strip():
            return "mock"
        return str(v).strip().lower()

    @field_validator("api_key", "base_url", mode="before")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        return v.rstrip("/") if v else v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            cls._config_source,
            file_secret_settings,
        )


settings = ProviderConfig()
