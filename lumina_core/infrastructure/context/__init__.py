"""代码库上下文生成器。"""

from typing import Optional

from lumina_core.domain.ports import ContextProvider
from lumina_core.infrastructure.context.repomix import RepomixContextProvider


def create_context_provider(cfg) -> Optional[ContextProvider]:
    """按配置创建上下文生成器；关闭时返回 None，会话将直接发送用户原文。"""

    if not getattr(cfg, "context_enabled", False):
        return None
    return RepomixContextProvider(
        working_dir=cfg.workspace_root,
        command=cfg.context_command,
        output_file=cfg.context_output_file,
    )


__all__ = ["RepomixContextProvider", "create_context_provider"]
