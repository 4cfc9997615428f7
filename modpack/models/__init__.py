"""
Modpack 数据模型包

包含配置模型、API 模型与锁文件状态模型。
"""

from modpack.models.config import (
    ProjectType,
    FIXED_LOADERS,
    DEFAULT_DIRECTORIES,
    ModpackConfig,
)
from modpack.models.api import (
    DependencyType,
    ProjectInfo,
    FileInfo,
    DependencyInfo,
    VersionInfo,
)
from modpack.models.state import (
    InstalledVersion,
    ProjectState,
    State,
)

__all__ = [
    # 配置模型
    "ProjectType",
    "FIXED_LOADERS",
    "DEFAULT_DIRECTORIES",
    "ModpackConfig",
    # API 模型
    "DependencyType",
    "ProjectInfo",
    "FileInfo",
    "DependencyInfo",
    "VersionInfo",
    # 状态模型
    "InstalledVersion",
    "ProjectState",
    "State",
]
