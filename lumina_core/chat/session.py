"""会话引擎核心模块。

ChatSession 是一段对话唯一的写入者：维护有序消息日志，
每轮对话按需附加最新的代码库上下文，调用生成后端，
并把完整日志同步到 MessageStore。

失败策略是刻意不对称的：
- 输入为空或上下文生成失败时，日志保持不变；
- 用户消息记录之后生成失败时，不回滚，用户消息保留在日志中；
- 持久化失败只记录日志，不影响返回值。
"""

import logging
import threading
import time
from typing import Any, Dict, List, Optional
from uuid import uuid4

from lumina_core.domain.conversation import ChatState, Message, MessageStore
from lumina_core.domain.exceptions import (
    ContextGenerationError,
    GenerationError,
    MessageValidationError,
)
from lumina_core.domain.ports import ContextProvider, ResponseGenerator
from lumina_core.infrastructure.logging.logger import logger
from lumina_core.prompts import build_codebase_prompt


class ChatSession:
    """单个对话的编排器。

    Args:
        generator: 生成后端。
        store: 消息存储，构造时从中加载历史。
        context_provider: 可选的代码库上下文生成器，为 None 时直接发送用户原文。
        context_timeout: 传给 context_provider 的超时（秒）。
        generation_timeout: 传给 generator 的超时（秒）。

    同一时刻只处理一轮 send_message，整个方法体（包括两次保存）
    都在同一把锁内执行；get_state 不取锁，随时返回当前快照。
    """

    def __init__(
        self,
        generator: ResponseGenerator,
        store: MessageStore,
        context_provider: Optional[ContextProvider] = None,
        *,
        context_timeout: Optional[float] = None,
        generation_timeout: Optional[float] = None,
    ):
        self._generator = generator
        self._store = store
        self._context_provider = context_provider
        self._context_timeout = context_timeout
        self._generation_timeout = generation_timeout
        self._turn_lock = threading.Lock()
        self._messages: List[Message] = self._hydrate()

    def send_message(self, text: str) -> ChatState:
        """执行一轮对话，成功时返回包含本轮两条消息的快照。

        Raises:
            MessageValidationError: text 为空，日志不变。
            ContextGenerationError: 上下文生成失败，日志不变。
            GenerationError: 生成失败，日志中已经包含本轮的用户消息。
        """
        if not text:
            raise MessageValidationError(
                code="EMPTY_MESSAGE",
                message="message cannot be empty",
                state=self.get_state(),
            )

        with self._turn_lock:
            start_time = time.time()
            log_ctx: Dict[str, Any] = {
                "turn_id": f"turn-{uuid4().hex}",
                "history_size": len(self._messages),
            }

            prompt = self._build_prompt(text, log_ctx)

            self._messages.append(Message(role="user", content=text))
            self._persist(log_ctx)

            try:
                response = self._generator.send_message(prompt, timeout=self._generation_timeout)
            except Exception as e:
                self._log(logging.ERROR, "Generation failed", log_ctx, error=str(e))
                raise GenerationError(
                    code="GENERATION_FAILED",
                    message=str(e),
                    state=self.get_state(),
                ) from e

            self._messages.append(Message(role="assistant", content=response))
            self._persist(log_ctx)

            self._log(
                logging.INFO,
                "Completed chat turn",
                log_ctx,
                elapsed_seconds=round(time.time() - start_time, 2),
                response_chars=len(response),
            )
            return self.get_state()

    def get_state(self) -> ChatState:
        return ChatState(messages=tuple(self._messages))

    # ---- 内部步骤 ----

    def _hydrate(self) -> List[Message]:
        """从存储加载历史，失败时以空日志启动。"""
        try:
            messages = list(self._store.load())
        except Exception as e:
            self._log(logging.WARNING, "Failed to load chat history, starting empty", {}, error=str(e))
            return []
        self._log(logging.INFO, "Loaded chat history", {}, message_count=len(messages))
        return messages

    def _build_prompt(self, text: str, log_ctx: Dict[str, Any]) -> str:
        """生成本轮要发给后端的 prompt。

        配置了 context_provider 时每轮都重新生成上下文，不做跨轮缓存；
        生成失败直接抛出 ContextGenerationError，此时还没有修改日志。
        """
        if self._context_provider is None:
            return text
        try:
            context = self._context_provider.generate_output(timeout=self._context_timeout)
        except Exception as e:
            self._log(logging.ERROR, "Context generation failed", log_ctx, error=str(e))
            raise ContextGenerationError(
                code="CONTEXT_GENERATION_FAILED",
                message=f"failed to generate codebase context: {e}",
                state=self.get_state(),
            ) from e
        log_ctx["context_chars"] = len(context)
        return build_codebase_prompt(context, text)

    def _persist(self, log_ctx: Dict[str, Any]) -> None:
        """把完整日志整体写入存储；失败只记录日志。"""
        snapshot = list(self._messages)
        try:
            self._store.save(snapshot)
        except Exception as e:
            self._log(
                logging.WARNING,
                "Failed to persist chat history",
                log_ctx,
                message_count=len(snapshot),
                error=str(e),
            )

    @staticmethod
    def _log(level: int, message: str, log_ctx: Dict[str, Any], **fields: Any) -> None:
        payload = dict(log_ctx)
        payload.update(fields)
        logger.log(level, message, extra={"extra": payload})
