"""MessageStore 实现与工厂函数。"""

from lumina_core.domain.conversation import MessageStore
from lumina_core.infrastructure.storage.json_store import JsonMessageStore
from lumina_core.infrastructure.storage.memory_store import InMemoryMessageStore
from lumina_core.infrastructure.storage.sqlite_store import SQLiteMessageStore


def create_message_store(cfg) -> MessageStore:
    """根据 cfg.storage_backend 创建存储，默认 SQLite。"""

    backend = (getattr(cfg, "storage_backend", "sqlite") or "sqlite").lower()
    if backend == "json":
        return JsonMessageStore(root=cfg.storage_root)
    return SQLiteMessageStore(cfg.db_path)


__all__ = [
    "JsonMessageStore",
    "InMemoryMessageStore",
    "SQLiteMessageStore",
    "create_message_store",
]
