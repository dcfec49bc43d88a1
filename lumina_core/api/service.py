"""对外 API 服务模块。

提供简化的函数接口供宿主应用（桌面壳、命令行 demo）调用，
负责按配置装配默认会话：存储、代码库上下文、生成后端。
"""

from typing import Any, Dict, Optional

from lumina_core.chat.session import ChatSession
from lumina_core.config.settings import settings
from lumina_core.domain.conversation import MessageStore
from lumina_core.domain.exceptions import ChatError, PersistenceError
from lumina_core.infrastructure.context import create_context_provider
from lumina_core.infrastructure.logging.logger import logger
from lumina_core.infrastructure.storage import InMemoryMessageStore, create_message_store
from lumina_core.providers import create_response_generator


_store: Optional[MessageStore] = None
_session: Optional[ChatSession] = None


def _open_store() -> MessageStore:
    try:
        store = create_message_store(settings)
    except PersistenceError as e:
        # 持久化不可用时仍然可以聊天，只是不会跨重启保留
        logger.warning(f"Could not initialize persistence: {e}", extra={"extra": {"error": e.code}})
        return InMemoryMessageStore()
    logger.info("Chat persistence initialized", extra={"extra": {"backend": settings.storage_backend}})
    return store


def get_default_session() -> ChatSession:
    """获取默认会话实例（单例）。"""
    global _store, _session
    if _store is None:
        _store = _open_store()
    if _session is None:
        _session = ChatSession(
            generator=create_response_generator(),
            store=_store,
            context_provider=create_context_provider(settings),
            context_timeout=settings.context_timeout,
            generation_timeout=settings.generation_timeout,
        )
    return _session


def send_chat_message(message: str) -> Dict[str, Any]:
    """发送一条消息并返回更新后的会话状态。

    Returns:
        {"messages": [{"role": ..., "content": ...}, ...]}

    Raises:
        ChatError 的子类；异常对象的 state 属性是失败时的会话快照。
    """
    session = get_default_session()
    try:
        state = session.send_message(message)
    except ChatError as e:
        logger.error(f"Chat failed: {e}", extra={"extra": {"code": e.code, "error": str(e)}})
        raise
    return state.to_dict()


def get_chat_state() -> Dict[str, Any]:
    """返回当前会话状态。"""
    return get_default_session().get_state().to_dict()


def shutdown() -> None:
    """关闭存储句柄。

    不做额外的最终保存：每轮对话结束时已经写过完整日志。
    """
    global _store, _session
    if _store is not None:
        try:
            _store.close()
        except PersistenceError as e:
            logger.warning(f"Failed to close persistence: {e}")
    _store = None
    _session = None
