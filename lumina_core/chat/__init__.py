from lumina_core.chat.session import ChatSession

__all__ = ["ChatSession"]
