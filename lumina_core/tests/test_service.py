import pytest

from lumina_core.api import service
from lumina_core.domain.exceptions import GenerationError, PersistenceError


class FakeGenerator:
    def __init__(self, response="pong", error=None):
        self.response = response
        self.error = error

    def send_message(self, prompt, timeout=None):
        if self.error is not None:
            raise self.error
        return self.response


class DummySettings:
    storage_backend = "json"
    context_enabled = False
    context_timeout = None
    generation_timeout = None

    def __init__(self, root):
        self.storage_root = str(root)


@pytest.fixture
def wired(monkeypatch, tmp_path):
    gen = FakeGenerator()
    monkeypatch.setattr(service, "settings", DummySettings(tmp_path / "store"))
    monkeypatch.setattr(service, "create_response_generator", lambda: gen)
    service.shutdown()
    yield gen
    service.shutdown()


def test_send_chat_message_returns_state_dict(wired):
    state = service.send_chat_message("ping")

    assert state == {
        "messages": [
            {"role": "user", "content": "ping"},
            {"role": "assistant", "content": "pong"},
        ]
    }
    assert service.get_chat_state() == state


def test_history_survives_restart(wired):
    service.send_chat_message("ping")
    service.shutdown()

    assert len(service.get_chat_state()["messages"]) == 2


def test_send_chat_message_reraises_chat_error(wired):
    wired.error = RuntimeError("API down")

    with pytest.raises(GenerationError) as exc_info:
        service.send_chat_message("ping")

    assert exc_info.value.state.to_dict()["messages"] == [{"role": "user", "content": "ping"}]


def test_falls_back_to_memory_store(monkeypatch, wired):
    def broken(cfg):
        raise PersistenceError(code="STORE_OPEN_ERROR", message="failed to open database")

    monkeypatch.setattr(service, "create_message_store", broken)

    state = service.send_chat_message("ping")

    assert len(state["messages"]) == 2


def test_unusable_storage_root_falls_back_to_memory_store(monkeypatch, wired, tmp_path):
    root = tmp_path / "not_a_dir"
    root.write_text("x", encoding="utf-8")
    monkeypatch.setattr(service, "settings", DummySettings(root))

    state = service.send_chat_message("ping")

    assert len(state["messages"]) == 2
    assert root.read_text(encoding="utf-8") == "x"
