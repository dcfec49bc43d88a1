"""Provider 与模型配置。

逻辑模型名（如 "ide-chat"）与厂商实际模型 ID 解耦：
上层只关心逻辑名，具体用哪个底层模型由这里集中配置。
"""

from dataclasses import dataclass
from typing import Dict, Mapping, Optional


@dataclass
class ModelConfig:
    """单个逻辑模型的配置。"""

    logical_name: str
    provider_model: str
    max_tokens: Optional[int]
    default_temperature: Optional[float]


@dataclass
class ProviderConfig:
    name: str
    base_url: str
    models: Dict[str, ModelConfig]


OPENAI_CONFIG = ProviderConfig(
    name="openai",
    base_url="https://api.openai.com/v1",
    models={
        "ide-chat": ModelConfig(
            logical_name="ide-chat",
            provider_model="gpt-4.1",
            max_tokens=None,
            default_temperature=None,
        )
    },
)

GLM_CONFIG = ProviderConfig(
    name="glm",
    base_url="https://open.bigmodel.cn/api/paas/v4",
    models={
        "ide-chat": ModelConfig(
            logical_name="ide-chat",
            provider_model="glm-4.6",
            max_tokens=8192,
            default_temperature=0.7,
        )
    },
)


PROVIDER_REGISTRY: Mapping[str, ProviderConfig] = {
    "openai": OPENAI_CONFIG,
    "glm": GLM_CONFIG,
}


def get_provider_config(name: str) -> ProviderConfig:
    """根据名称获取 ProviderConfig，名称不区分大小写。"""

    key = name.lower()
    for k, cfg in PROVIDER_REGISTRY.items():
        if k.lower() == key:
            return cfg
    raise KeyError(f"Unknown provider: {name!r}")


def resolve_model(cfg: ProviderConfig, model: str) -> ModelConfig:
    """查找逻辑模型；未登记的名字按厂商模型 ID 原样透传。"""

    found = cfg.models.get(model)
    if found is not None:
        return found
    return ModelConfig(logical_name=model, provider_model=model, max_tokens=None, default_temperature=None)
