"""ChatSession 依赖的外部协作者协议。

两个协作者都是同步、可能长时间阻塞的调用，因此都接受 timeout 参数（秒），
None 表示由实现自行决定。
"""

from typing import Optional, Protocol


class ContextProvider(Protocol):
    """按需生成描述当前代码库状态的文本。

    实现不得在内部缓存结果：每次调用都必须反映底层源码的最新状态。
    """

    def generate_output(self, timeout: Optional[float] = None) -> str:
        ...


class ResponseGenerator(Protocol):
    """把一段 prompt 映射为模型回复文本。

    传输/鉴权/配额等任何失败都以异常形式抛出，由 ChatSession 统一包装。
    """

    def send_message(self, prompt: str, timeout: Optional[float] = None) -> str:
        ...
