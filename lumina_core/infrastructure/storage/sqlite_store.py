"""SQLite 消息存储。

每次 save 都在一个事务里先清空再整体插入，事务失败即回滚，
因此数据库中始终是某一次完整保存的结果。load 按自增 id 升序读取，
与插入顺序一致。
"""

import sqlite3
import threading
from pathlib import Path
from typing import List, Optional, Sequence

from lumina_core.domain.conversation import Message, MessageStore
from lumina_core.domain.exceptions import BusinessError, PersistenceError


_CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS messages (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    role TEXT NOT NULL,
    content TEXT NOT NULL,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP
)
"""


class SQLiteMessageStore(MessageStore):
    def __init__(self, db_path: str | Path):
        self._db_path = Path(db_path).expanduser()
        self._lock = threading.Lock()
        self._conn: Optional[sqlite3.Connection] = None
        try:
            if str(self._db_path) != ":memory:":
                self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
            with self._conn:
                self._conn.execute(_CREATE_TABLE_SQL)
        except (sqlite3.Error, OSError) as e:
            if self._conn is not None:
                self._conn.close()
            raise PersistenceError(code="STORE_OPEN_ERROR", message=f"failed to open database: {e}")

    @property
    def db_path(self) -> Path:
        return self._db_path

    def load(self) -> List[Message]:
        conn = self._ensure_connection()
        try:
            with self._lock:
                rows = conn.execute("SELECT role, content FROM messages ORDER BY id ASC").fetchall()
            return [Message(role=role, content=content) for role, content in rows]
        except sqlite3.Error as e:
            raise PersistenceError(code="STORE_READ_ERROR", message=f"failed to query messages: {e}")
        except BusinessError as e:
            raise PersistenceError(code="STORE_READ_ERROR", message=f"invalid stored message: {e.message}")

    def save(self, messages: Sequence[Message]) -> None:
        conn = self._ensure_connection()
        rows = [(m.role, m.content) for m in messages]
        try:
            # sqlite3 连接作为上下文管理器：正常退出提交，异常时回滚
            with self._lock, conn:
                conn.execute("DELETE FROM messages")
                conn.executemany("INSERT INTO messages (role, content) VALUES (?, ?)", rows)
        except sqlite3.Error as e:
            raise PersistenceError(code="STORE_WRITE_ERROR", message=f"failed to save messages: {e}")

    def close(self) -> None:
        if self._conn is None:
            return
        with self._lock:
            conn, self._conn = self._conn, None
            try:
                conn.close()
            except sqlite3.Error as e:
                raise PersistenceError(code="STORE_CLOSE_ERROR", message=str(e))

    def _ensure_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise PersistenceError(code="STORE_CLOSED", message="message store is closed")
        return self._conn
