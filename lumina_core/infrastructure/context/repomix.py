"""基于 repomix 的代码库上下文生成器。

在工作目录下执行 repomix，把整个仓库打包成一份 XML 文本，
然后读取输出文件作为本轮对话的上下文。每次调用都会重新执行命令，
保证拿到的是源码的最新状态。
"""

from __future__ import annotations

import shlex
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence, Union

from lumina_core.domain.ports import ContextProvider


DEFAULT_COMMAND = ("npx", "repomix", "-i", ".env")
DEFAULT_OUTPUT_FILE = "repomix-output.xml"


class RepomixContextProvider(ContextProvider):
    def __init__(
        self,
        working_dir: Union[str, Path],
        command: Union[str, Sequence[str]] = DEFAULT_COMMAND,
        output_file: str = DEFAULT_OUTPUT_FILE,
    ):
        self._working_dir = Path(working_dir).expanduser().resolve()
        self._command: List[str] = shlex.split(command) if isinstance(command, str) else list(command)
        self._output_file = output_file

    @property
    def output_path(self) -> Path:
        return self._working_dir / self._output_file

    def generate_output(self, timeout: Optional[float] = None) -> str:
        try:
            subprocess.run(
                self._command,
                cwd=self._working_dir,
                capture_output=True,
                text=True,
                check=True,
                timeout=timeout,
            )
        except FileNotFoundError as exc:
            raise RuntimeError(f"{self._command[0]} command not found") from exc
        except subprocess.TimeoutExpired as exc:
            raise RuntimeError(f"repomix timed out after {exc.timeout}s") from exc
        except subprocess.CalledProcessError as exc:
            output = (exc.stdout or "") + (exc.stderr or "")
            raise RuntimeError(f"failed to run repomix: exit status {exc.returncode} (output: {output.strip()})") from exc

        try:
            return self.output_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise RuntimeError(f"failed to read repomix output file: {exc}") from exc
