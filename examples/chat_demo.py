"""Interactive console demo of the chat session."""

from lumina_core.api.service import send_chat_message, shutdown
from lumina_core.domain.exceptions import ChatError

if __name__ == "__main__":
    try:
        while True:
            try:
                question = input("You: ")
            except EOFError:
                break
            if question.strip() in {"exit", "quit"}:
                break
            try:
                state = send_chat_message(question)
            except ChatError as e:
                print("Error:", e)
                continue
            print("Lumina:", state["messages"][-1]["content"])
    finally:
        shutdown()
