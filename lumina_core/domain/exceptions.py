"""统一业务异常模型。

所有跨模块抛出的业务级错误都应该继承自 BusinessError，
便于在 API 层或 UI 层做统一捕获与用户提示。

ChatSession 对外只抛出 ChatError 的三个子类，异常对象上的
state 属性携带失败时刻的会话快照，调用方无需再单独调用 get_state()。
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from lumina_core.domain.conversation import ChatState


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "STORE_READ_ERROR"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 turn_id、provider 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class NetworkError(BusinessError):
    """网络层错误，例如连接失败、超时等。"""


class ApiError(BusinessError):
    """第三方 API 返回非 2xx/429 错误时抛出。"""


class RateLimitError(BusinessError):
    """Provider 限流错误，由上层负责重试/退避策略。"""


class ValidationError(BusinessError):
    """参数或配置校验失败。"""


class PersistenceError(BusinessError):
    """消息存储读写失败。

    只在存储实现内部抛出；ChatSession 会记录日志后吞掉，不会传给调用方。
    """


class ChatError(BusinessError):
    """一次对话轮次失败。

    Attributes:
        state: 失败时刻的 ChatState 快照。
    """

    def __init__(self, code: str, message: str, state: Optional["ChatState"] = None, **extra):
        super().__init__(code, message, **extra)
        self.state = state


class MessageValidationError(ChatError, ValidationError):
    """用户输入为空。会话状态不变，调用方重新提交非空文本即可。"""


class ContextGenerationError(ChatError):
    """代码库上下文生成失败。会话状态不变，可以用同样的文本重试。"""


class GenerationError(ChatError):
    """模型生成失败。

    此时用户消息已经记录在会话中，__cause__ 指向后端原始异常。
    """
