from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Protocol, Sequence, Tuple

from lumina_core.domain.exceptions import ValidationError


MessageRole = Literal["user", "assistant"]

MESSAGE_ROLES: Tuple[str, ...] = ("user", "assistant")


@dataclass(frozen=True)
class Message:
    """会话日志中的一条消息，创建后不可修改。"""

    role: MessageRole
    content: str

    def __post_init__(self) -> None:
        if self.role not in MESSAGE_ROLES:
            raise ValidationError(code="INVALID_ROLE", message=f"unknown message role: {self.role!r}")

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Message":
        return cls(role=data["role"], content=data.get("content") or "")


@dataclass(frozen=True)
class ChatState:
    """某一时刻的会话快照（只读副本，与 ChatSession 内部列表不共享）。"""

    messages: Tuple[Message, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"messages": [m.to_dict() for m in self.messages]}


class MessageStore(Protocol):
    """会话日志的持久化协议。

    - load: 按原始插入顺序返回完整日志。
    - save: 用给定序列整体替换已持久化的日志，必须是原子的：
      写入中途出错时，存储里要么是旧的完整日志，要么是新的完整日志。
    """

    def load(self) -> List[Message]:
        ...

    def save(self, messages: Sequence[Message]) -> None:
        ...

    def close(self) -> None:
        ...
