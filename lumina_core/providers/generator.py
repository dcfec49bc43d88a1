from typing import Optional

from lumina_core.domain.exceptions import ApiError
from lumina_core.domain.models import ChatMessage, ChatRequest
from lumina_core.domain.ports import ResponseGenerator
from lumina_core.providers.base import ProviderClient


class ProviderResponseGenerator(ResponseGenerator):
    """把 ProviderClient 适配为 ChatSession 使用的 ResponseGenerator。

    每次调用只发送一条 user 消息（已经拼好上下文的 prompt），
    不携带历史；取第一个候选回答的文本作为结果。
    """

    def __init__(
        self,
        client: ProviderClient,
        model: str = "ide-chat",
        temperature: Optional[float] = None,
    ):
        self._client = client
        self._model = model
        self._temperature = temperature

    @property
    def provider_name(self) -> str:
        return self._client.name

    def send_message(self, prompt: str, timeout: Optional[float] = None) -> str:
        req = ChatRequest(
            provider=self._client.name,
            model=self._model,
            messages=[ChatMessage(role="user", content=prompt)],
            temperature=self._temperature,
            timeout=timeout,
        )
        result = self._client.chat(req)
        if not result.choices:
            raise ApiError(
                code="EMPTY_RESPONSE",
                message=f"no response from {self._client.name}",
                provider=self._client.name,
            )
        return result.choices[0].message.content
