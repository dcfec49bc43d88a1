"""Lumina Core 顶层包。

桌面助手的会话引擎：维护有序的对话日志，每轮按需附加最新的
代码库上下文，调用可替换的生成后端，并把日志同步到持久化存储。
"""

from lumina_core.chat.session import ChatSession
from lumina_core.domain.conversation import ChatState, Message

__all__ = ["ChatSession", "ChatState", "Message"]
