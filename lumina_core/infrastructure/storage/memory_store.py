from typing import List, Sequence

from lumina_core.domain.conversation import Message, MessageStore


class InMemoryMessageStore(MessageStore):
    """进程内存储，不落盘。

    持久化存储无法打开时作为兜底，也用于测试。
    """

    def __init__(self, messages: Sequence[Message] = ()):
        self._messages: List[Message] = list(messages)

    def load(self) -> List[Message]:
        return list(self._messages)

    def save(self, messages: Sequence[Message]) -> None:
        self._messages = list(messages)

    def close(self) -> None:
        pass
