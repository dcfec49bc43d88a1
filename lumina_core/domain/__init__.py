"""领域层模型与协议。

包含：
- conversation: 会话消息 Message、快照 ChatState 以及 MessageStore 协议。
- ports: ContextProvider / ResponseGenerator 协作者协议。
- models: Provider 层统一的 ChatMessage / ChatRequest / ChatResult 模型。
- exceptions: 业务异常类型定义。
"""
