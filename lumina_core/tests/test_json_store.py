import json
import tempfile
from pathlib import Path

import pytest

from lumina_core.domain.conversation import Message
from lumina_core.domain.exceptions import PersistenceError
from lumina_core.infrastructure.storage.json_store import JsonMessageStore


def test_json_store_save_and_load():
    with tempfile.TemporaryDirectory() as d:
        root = Path(d) / ".storage"
        store = JsonMessageStore(root=root)
        msgs = [Message("user", "你好"), Message("assistant", "hi")]
        store.save(msgs)
        assert store.load() == msgs
        data = json.loads((root / "messages.json").read_text(encoding="utf-8"))
        assert data["messages"][0] == {"role": "user", "content": "你好"}


def test_json_store_missing_file_loads_empty():
    with tempfile.TemporaryDirectory() as d:
        store = JsonMessageStore(root=Path(d) / ".storage")
        assert store.load() == []


def test_json_store_leaves_no_temp_files():
    with tempfile.TemporaryDirectory() as d:
        root = Path(d) / ".storage"
        store = JsonMessageStore(root=root)
        store.save([Message("user", "a")])
        store.save([Message("user", "a"), Message("assistant", "b")])
        assert sorted(p.name for p in root.iterdir()) == ["messages.json"]
        assert len(store.load()) == 2


def test_json_store_corrupted_file():
    with tempfile.TemporaryDirectory() as d:
        root = Path(d) / ".storage"
        store = JsonMessageStore(root=root)
        (root / "messages.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(PersistenceError) as exc_info:
            store.load()
        assert exc_info.value.code == "STORE_READ_ERROR"


def test_json_store_failed_replace_keeps_old_file(monkeypatch):
    with tempfile.TemporaryDirectory() as d:
        root = Path(d) / ".storage"
        store = JsonMessageStore(root=root)
        store.save([Message("user", "a")])

        def fail(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("os.replace", fail)
        with pytest.raises(PersistenceError) as exc_info:
            store.save([Message("user", "a"), Message("assistant", "b")])
        assert exc_info.value.code == "STORE_WRITE_ERROR"

        monkeypatch.undo()
        assert [m.content for m in store.load()] == ["a"]
        assert list(root.glob("*.json.tmp")) == []


def test_json_store_root_is_a_file(tmp_path):
    root = tmp_path / "not_a_dir"
    root.write_text("x", encoding="utf-8")

    with pytest.raises(PersistenceError) as exc_info:
        JsonMessageStore(root=root)
    assert exc_info.value.code == "STORE_OPEN_ERROR"
