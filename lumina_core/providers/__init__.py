"""LLM Provider 集成层。

该包下的模块负责：
- 定义 Provider 抽象接口 (base)。
- 维护 Provider 与模型配置 (registry)。
- 提供各厂商的具体实现 (openai_client、glm_client)。
- 把 Provider 适配成会话使用的 ResponseGenerator (generator)。
"""

from typing import Optional

from lumina_core.config.settings import settings
from lumina_core.providers.base import ProviderClient
from lumina_core.providers.generator import ProviderResponseGenerator
from lumina_core.providers.glm_client import GlmClient
from lumina_core.providers.openai_client import OpenAIClient


def create_provider(name: Optional[str] = None) -> ProviderClient:
    """根据名称创建 Provider 实例，默认取配置中的 provider。"""

    provider_name = (name or getattr(settings, "default_provider", "openai")).lower()
    if provider_name == "glm":
        return GlmClient(settings)
    return OpenAIClient(settings)


def create_response_generator(name: Optional[str] = None, model: Optional[str] = None) -> ProviderResponseGenerator:
    client = create_provider(name)
    return ProviderResponseGenerator(client, model=model or getattr(settings, "default_model", "ide-chat"))
