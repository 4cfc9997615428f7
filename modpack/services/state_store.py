"""
锁文件存储

每次运行开始时读取一次，结束时整体原子写入一次。
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Union

from loguru import logger

from modpack.models import State
from modpack.exceptions import StateError


class StateStore:
    """锁文件读写"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> State:
        """读取锁文件，不存在时返回空状态"""
        if not self.path.exists():
            logger.debug(f"锁文件 '{self.path.name}' 不存在，使用空状态")
            return State()

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except ValueError as e:
            raise StateError(
                f"锁文件格式错误: {self.path}: {e}", context={"path": str(self.path)}
            ) from e

        return State.from_dict(data)

    def save(self, state: State):
        """先写入临时文件再替换，保证锁文件不会被写坏"""
        content = json.dumps(state.to_dict(), indent=2, sort_keys=True) + "\n"
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{self.path.name}.", dir=str(self.path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

        logger.debug(f"已写入锁文件 '{self.path.name}' ({len(state.projects)} 个项目)")
