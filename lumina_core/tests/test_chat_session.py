import threading
from dataclasses import FrozenInstanceError

import pytest

from lumina_core.chat.session import ChatSession
from lumina_core.domain.conversation import ChatState, Message
from lumina_core.domain.exceptions import GenerationError, MessageValidationError, ValidationError
from lumina_core.infrastructure.storage.memory_store import InMemoryMessageStore


class FakeGenerator:
    def __init__(self, response="", error=None):
        self.response = response
        self.error = error
        self.prompts = []
        self.timeouts = []

    def send_message(self, prompt, timeout=None):
        self.prompts.append(prompt)
        self.timeouts.append(timeout)
        if self.error is not None:
            raise self.error
        return self.response


def _pairs(state: ChatState):
    return [(m.role, m.content) for m in state.messages]


def test_send_message_success():
    gen = FakeGenerator(response="Hi")
    session = ChatSession(generator=gen, store=InMemoryMessageStore())

    state = session.send_message("Hello")

    assert _pairs(state) == [("user", "Hello"), ("assistant", "Hi")]
    assert gen.prompts == ["Hello"]


def test_send_message_generation_error_keeps_user_message():
    backend_error = RuntimeError("API down")
    session = ChatSession(generator=FakeGenerator(error=backend_error), store=InMemoryMessageStore())

    with pytest.raises(GenerationError) as exc_info:
        session.send_message("Q")

    err = exc_info.value
    assert str(err) == "API down"
    assert err.code == "GENERATION_FAILED"
    assert err.__cause__ is backend_error
    assert _pairs(err.state) == [("user", "Q")]
    assert _pairs(session.get_state()) == [("user", "Q")]


def test_send_message_empty_text_is_rejected():
    gen = FakeGenerator(response="unused")
    store = InMemoryMessageStore([Message("user", "old"), Message("assistant", "reply")])
    session = ChatSession(generator=gen, store=store)

    with pytest.raises(MessageValidationError) as exc_info:
        session.send_message("")

    assert str(exc_info.value) == "message cannot be empty"
    assert isinstance(exc_info.value, ValidationError)
    assert _pairs(exc_info.value.state) == [("user", "old"), ("assistant", "reply")]
    assert _pairs(session.get_state()) == [("user", "old"), ("assistant", "reply")]
    assert gen.prompts == []


def test_send_message_multiple_turns():
    gen = FakeGenerator(response="Response 1")
    session = ChatSession(generator=gen, store=InMemoryMessageStore())

    first = session.send_message("Message 1")
    assert len(first.messages) == 2

    gen.response = "Response 2"
    second = session.send_message("Message 2")

    assert _pairs(second) == [
        ("user", "Message 1"),
        ("assistant", "Response 1"),
        ("user", "Message 2"),
        ("assistant", "Response 2"),
    ]


def test_retry_after_generation_error_appends_new_turn():
    gen = FakeGenerator(error=RuntimeError("timeout"))
    session = ChatSession(generator=gen, store=InMemoryMessageStore())

    with pytest.raises(GenerationError):
        session.send_message("Q")
    gen.error = None
    gen.response = "A"
    state = session.send_message("continue")

    assert _pairs(state) == [("user", "Q"), ("user", "continue"), ("assistant", "A")]


def test_get_state_empty_chat():
    session = ChatSession(generator=FakeGenerator(), store=InMemoryMessageStore())

    state = session.get_state()

    assert isinstance(state, ChatState)
    assert state.messages == ()


def test_snapshot_does_not_follow_later_turns():
    gen = FakeGenerator(response="one")
    session = ChatSession(generator=gen, store=InMemoryMessageStore())
    before = session.send_message("first")

    gen.response = "two"
    session.send_message("second")

    assert len(before.messages) == 2
    assert len(session.get_state().messages) == 4


def test_snapshot_is_immutable():
    session = ChatSession(generator=FakeGenerator(response="ok"), store=InMemoryMessageStore())
    state = session.send_message("hi")

    with pytest.raises(AttributeError):
        state.messages.append(Message("user", "injected"))  # type: ignore[attr-defined]
    with pytest.raises(FrozenInstanceError):
        state.messages[0].content = "changed"  # type: ignore[misc]

    assert _pairs(session.get_state()) == [("user", "hi"), ("assistant", "ok")]


def test_generation_timeout_is_passed_to_generator():
    gen = FakeGenerator(response="ok")
    session = ChatSession(generator=gen, store=InMemoryMessageStore(), generation_timeout=12.5)

    session.send_message("hi")

    assert gen.timeouts == [12.5]


def test_concurrent_turns_keep_pairs_together():
    class SlowGenerator:
        def __init__(self):
            self.in_flight = 0
            self.max_in_flight = 0
            self._guard = threading.Lock()

        def send_message(self, prompt, timeout=None):
            with self._guard:
                self.in_flight += 1
                self.max_in_flight = max(self.max_in_flight, self.in_flight)
            threading.Event().wait(0.01)
            with self._guard:
                self.in_flight -= 1
            return f"re: {prompt}"

    gen = SlowGenerator()
    session = ChatSession(generator=gen, store=InMemoryMessageStore())
    threads = [threading.Thread(target=session.send_message, args=(f"m{i}",)) for i in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    pairs = _pairs(session.get_state())
    assert len(pairs) == 10
    assert gen.max_in_flight == 1
    for i in range(0, 10, 2):
        role, text = pairs[i]
        assert role == "user"
        assert pairs[i + 1] == ("assistant", f"re: {text}")


def test_get_state_does_not_wait_for_running_turn():
    entered = threading.Event()
    release = threading.Event()

    class BlockingGenerator:
        def send_message(self, prompt, timeout=None):
            entered.set()
            release.wait(5)
            return "done"

    session = ChatSession(generator=BlockingGenerator(), store=InMemoryMessageStore())
    t = threading.Thread(target=session.send_message, args=("hi",))
    t.start()
    try:
        assert entered.wait(5)
        assert _pairs(session.get_state()) == [("user", "hi")]
    finally:
        release.set()
        t.join(5)

    assert _pairs(session.get_state()) == [("user", "hi"), ("assistant", "done")]
