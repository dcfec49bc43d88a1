"""GLM / BigModel Provider 适配器。

接口风格与 OpenAI 一致，均使用 chat/completions 端点：
- URL: {base_url}/chat/completions
- 认证: Authorization: Bearer <api_key>

本实现只依赖公共字段：model/messages/temperature/max_tokens。
"""

from lumina_core.providers.openai_client import OpenAIClient
from lumina_core.providers.registry import GLM_CONFIG


class GlmClient(OpenAIClient):
    name = "glm"
    provider_config = GLM_CONFIG
    api_key_field = "glm_api_key"
    base_url_field = "glm_base_url"
