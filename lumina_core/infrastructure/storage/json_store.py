import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Sequence
from uuid import uuid4

from lumina_core.config.settings import settings
from lumina_core.domain.conversation import Message, MessageStore
from lumina_core.domain.exceptions import BusinessError, PersistenceError


class JsonMessageStore(MessageStore):
    """把整段会话写入单个 messages.json。

    写入先落到同目录的临时文件，再用 os.replace 原子替换，
    读者只会看到旧文件或新文件，不会看到写了一半的内容。
    """

    def __init__(self, root: str | Path | None = None):
        self._root = Path(root or settings.storage_root).expanduser().resolve()
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(code="STORE_OPEN_ERROR", message=f"failed to create storage root: {e}")
        self._path = self._root / "messages.json"

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> List[Message]:
        if not self._path.exists():
            return []
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            return [Message.from_dict(item) for item in data.get("messages") or []]
        except BusinessError as e:
            raise PersistenceError(code="STORE_READ_ERROR", message=e.message)
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            raise PersistenceError(code="STORE_READ_ERROR", message=str(e))

    def save(self, messages: Sequence[Message]) -> None:
        tmp_path = self._root / f"messages.{uuid4().hex}.json.tmp"
        obj = {
            "updated_at": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "messages": [m.to_dict() for m in messages],
        }
        try:
            tmp_path.write_text(json.dumps(obj, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise PersistenceError(code="STORE_WRITE_ERROR", message=str(e))

    def close(self) -> None:
        """文件存储无需释放资源。"""
