"""Prompt 模板。

每轮对话若拿到了代码库上下文，就用固定模板把上下文与用户原始问题拼在一起；
上下文是不透明文本，这里只原样嵌入，不做任何解析或转义。
"""

CODEBASE_CONTEXT_HEADER = "Here is the current state of the codebase:"
USER_QUESTION_PREFIX = "User question: "


def build_codebase_prompt(context: str, question: str) -> str:
    return f"{CODEBASE_CONTEXT_HEADER}\n\n{context}\n\n{USER_QUESTION_PREFIX}{question}"
