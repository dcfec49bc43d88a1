"""OpenAI Provider 适配器。

本模块负责：

1. 接收统一的 ChatRequest。
2. 将其转换为 chat/completions 接口的请求格式。
3. 调用 HTTP 接口并处理网络/API 异常。
4. 将响应 JSON 解析为统一的 ChatResult。

GLM 等兼容 OpenAI 协议的厂商只需继承本类并替换配置项，见 glm_client。
"""

from typing import Any, Dict

import httpx

from lumina_core.config.settings import settings
from lumina_core.domain.exceptions import ApiError, NetworkError, RateLimitError, ValidationError
from lumina_core.domain.models import ChatChoice, ChatMessage, ChatRequest, ChatResult, ChatUsage
from lumina_core.providers.registry import OPENAI_CONFIG, ModelConfig, ProviderConfig, resolve_model


class OpenAIClient:
    """OpenAI chat/completions 客户端。"""

    name = "openai"
    provider_config: ProviderConfig = OPENAI_CONFIG
    api_key_field = "openai_api_key"
    base_url_field = "openai_base_url"

    def __init__(self, cfg=settings):
        # cfg 里包含 base_url、api_key、超时等配置
        self._settings = cfg

    def chat(self, req: ChatRequest) -> ChatResult:
        """执行一次非流式对话调用。

        配置缺失抛 ValidationError，网络错误抛 NetworkError，
        429 抛 RateLimitError，其余 HTTP 错误统一包装为 ApiError。
        """

        api_key = getattr(self._settings, self.api_key_field, None)
        if not api_key:
            raise ValidationError(code="MISSING_API_KEY", message=f"{self.api_key_field.upper()} not set")
        model_cfg = resolve_model(self.provider_config, req.model)
        payload = self._build_payload(req, model_cfg)
        timeout = req.timeout if req.timeout is not None else self._settings.http_timeout
        try:
            with httpx.Client(timeout=timeout, trust_env=False) as client:
                base = getattr(self._settings, self.base_url_field, None) or self.provider_config.base_url
                resp = client.post(
                    f"{base.rstrip('/')}/chat/completions",
                    json=payload,
                    headers={
                        "Authorization": f"Bearer {api_key}",
                        "Content-Type": "application/json",
                    },
                )
        except httpx.RequestError as e:
            raise NetworkError(code="NETWORK_ERROR", message=f"failed to send request: {e}", provider=self.name)
        if resp.status_code == 429:
            raise RateLimitError(code="RATE_LIMIT", message=f"{self.name} rate limit", provider=self.name)
        if resp.status_code >= 400:
            raise ApiError(
                code="API_ERROR",
                message=self._error_message(resp),
                http_status=resp.status_code,
                provider=self.name,
            )
        try:
            data = resp.json()
        except ValueError as e:
            raise ApiError(code="INVALID_RESPONSE", message=f"failed to decode response: {e}", provider=self.name)
        return self._parse_response(data, req)

    def _build_payload(self, req: ChatRequest, model_cfg: ModelConfig) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": model_cfg.provider_model,
            "messages": [{"role": m.role, "content": m.content} for m in req.messages],
        }
        temperature = req.temperature if req.temperature is not None else model_cfg.default_temperature
        if temperature is not None:
            payload["temperature"] = temperature
        max_tokens = req.max_tokens or model_cfg.max_tokens
        if max_tokens:
            payload["max_tokens"] = max_tokens
        return payload

    def _parse_response(self, data: dict, req: ChatRequest) -> ChatResult:
        # 部分兼容实现在 200 响应里也会带 error 字段
        error = data.get("error")
        if error:
            raise ApiError(code="API_ERROR", message=self._format_api_error(error), provider=self.name)
        choices: list[ChatChoice] = []
        for i, ch in enumerate(data.get("choices") or []):
            msg = ch.get("message") or {}
            choices.append(
                ChatChoice(
                    index=ch.get("index", i),
                    message=ChatMessage(role=msg.get("role") or "assistant", content=msg.get("content") or ""),
                    finish_reason=ch.get("finish_reason"),
                )
            )
        usage = None
        usage_raw = data.get("usage") or {}
        if usage_raw:
            usage = ChatUsage(
                prompt_tokens=usage_raw.get("prompt_tokens", 0),
                completion_tokens=usage_raw.get("completion_tokens", 0),
                total_tokens=usage_raw.get("total_tokens", 0),
            )
        return ChatResult(provider=self.name, model=req.model, choices=choices, usage=usage, raw=data)

    def _error_message(self, resp: httpx.Response) -> str:
        try:
            error = resp.json().get("error")
        except ValueError:
            error = None
        if error:
            return self._format_api_error(error)
        return resp.text

    def _format_api_error(self, error: Any) -> str:
        detail = error.get("message") if isinstance(error, dict) else str(error)
        return f"{self.name} API error: {detail}"
