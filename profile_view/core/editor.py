"""
编辑器启动器，负责在外部编辑器中打开源码位置
"""

import logging
import os
import shlex
import subprocess
from typing import Dict, List, Optional

from ..config.interaction import EDITOR_CONFIG

logger = logging.getLogger(__name__)


class EditorLauncher:
    """编辑器启动器"""

    def __init__(self, command: Optional[str] = None, env_vars: Dict[str, str] = None):
        self.command = command or EDITOR_CONFIG["command"]
        self.env_vars = env_vars if env_vars is not None else dict(EDITOR_CONFIG["env_vars"])
        self._processes: List[subprocess.Popen] = []

    def build_command(self, file: str, line: int) -> Optional[List[str]]:
        """构建启动命令

        Returns:
            List[str]: 命令参数列表；没有可用编辑器时返回 None
        """
        template = self.command
        if not template:
            editor = os.environ.get("VISUAL") or os.environ.get("EDITOR")
            if not editor:
                return None
            template = EDITOR_CONFIG["default_template"].replace("{editor}", editor)
        # 先拆分再替换，路径中的空格不会被拆开
        return [part.format(file=file, line=line) for part in shlex.split(template)]

    def open(self, file: str, line: int) -> bool:
        """在编辑器中打开文件

        Args:
            file: 源文件路径
            line: 行号

        Returns:
            bool: 是否启动成功
        """
        cmd = self.build_command(file, line)
        if cmd is None:
            logger.warning("no editor configured (set $VISUAL or $EDITOR), cannot open %s:%d", file, line)
            return False

        # 准备环境变量
        env = os.environ.copy()
        env.update(self.env_vars)

        try:
            process = subprocess.Popen(cmd, env=env)
        except OSError as e:
            logger.warning("failed to launch editor %r: %s", cmd[0], e)
            return False

        # 顺便回收已经退出的编辑器进程
        self._processes = self.get_running()
        self._processes.append(process)
        logger.info("opened %s:%d in %s", file, line, cmd[0])
        return True

    def get_running(self) -> List[subprocess.Popen]:
        """获取仍在运行的编辑器进程（poll 会回收已退出的进程）"""
        return [p for p in self._processes if p.poll() is None]
