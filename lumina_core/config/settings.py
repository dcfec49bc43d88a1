"""配置管理模块。

支持从环境变量、.env 以及 config.yaml 加载配置，优先级依次递减。
"""

import os
import warnings
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_config_from_yaml() -> Dict[str, Any]:
    """从 config.yaml 加载配置（若存在）。"""
    candidates = []
    explicit = os.getenv("LUMINA_CONFIG_FILE")
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
                    return data
                warnings.warn(f"Config file {path} is not a mapping, ignored")
        except (OSError, yaml.YAMLError) as exc:
            warnings.warn(f"Failed to read config file {path}: {exc}")
    return {}


class Settings(BaseSettings):
    """Lumina 配置项。"""

    # ---- Provider ----
    default_provider: str = Field(
        default="openai",
        description="默认使用的 Provider 名称，例如 openai、glm",
    )
    default_model: str = Field(
        default="ide-chat",
        description="逻辑模型名，由 registry 映射为具体厂商模型",
    )
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API 密钥")
    openai_base_url: str = Field(default="https://api.openai.com/v1", description="OpenAI API 基础URL")
    glm_api_key: Optional[str] = Field(default=None, description="GLM API 密钥")
    glm_base_url: str = Field(
        default="https://open.bigmodel.cn/api/paas/v4",
        description="GLM API 基础URL",
    )
    http_timeout: float = Field(default=60.0, ge=1.0, description="HTTP 超时时间（秒）")

    # ---- 存储 ----
    storage_backend: Literal["sqlite", "json"] = Field(default="sqlite", description="会话存储实现")
    storage_root: str = Field(
        default_factory=lambda: str(Path.home() / ".lumina"),
        description="存储根目录",
    )
    db_filename: str = Field(default="chat.db", description="SQLite 数据库文件名")

    # ---- 日志 ----
    log_dir: str = Field(default="logs", description="日志目录")
    log_redact_content: bool = Field(default=False, description="是否脱敏日志内容")

    # ---- 代码库上下文 ----
    workspace_root: str = Field(
        default_factory=lambda: str(Path.cwd()),
        description="生成代码库上下文时的工作目录",
    )
    context_enabled: bool = Field(default=True, description="是否在每轮对话前附加代码库上下文")
    context_command: str = Field(default="npx repomix -i .env", description="生成上下文的命令")
    context_output_file: str = Field(default="repomix-output.xml", description="上下文命令的输出文件")
    context_timeout: Optional[float] = Field(default=120.0, description="上下文生成超时（秒）")
    generation_timeout: Optional[float] = Field(default=None, description="模型生成超时（秒），为空时使用 http_timeout")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @staticmethod
    def _config_source() -> Dict[str, Any]:
        return _load_config_from_yaml()

    @field_validator("openai_api_key", "glm_api_key")
    @classmethod
    def validate_api_key(cls, v: Optional[str]) -> Optional[str]:
        if v and len(v) < 10:
            raise ValueError("API key seems too short")
        return v

    @property
    def db_path(self) -> Path:
        return Path(self.storage_root).expanduser() / self.db_filename

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


settings = Settings()
