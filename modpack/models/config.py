"""
配置模型

定义项目类型查找表与 modpack.json 对应的配置数据类。
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from modpack.exceptions import ConfigValidationError


class ProjectType(Enum):
    """项目类型"""

    MOD = "mod"
    DATAPACK = "datapack"
    RESOURCEPACK = "resourcepack"
    SHADERPACK = "shaderpack"

    @property
    def plural(self) -> str:
        return f"{self.value}s"


# 非模组类型使用固定的加载器；模组使用配置中的 loaders
FIXED_LOADERS: Dict[ProjectType, Tuple[str, ...]] = {
    ProjectType.DATAPACK: ("datapack",),
    ProjectType.RESOURCEPACK: ("minecraft",),
    ProjectType.SHADERPACK: ("iris", "optifine", "canvas", "vanilla"),
}

DEFAULT_DIRECTORIES: Dict[ProjectType, str] = {
    ProjectType.MOD: "mods",
    ProjectType.DATAPACK: "datapacks",
    ProjectType.RESOURCEPACK: "resourcepacks",
    ProjectType.SHADERPACK: "shaderpacks",
}


def _project_ids(entries, key: str) -> List[str]:
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise ConfigValidationError(f"'{key}' 必须是列表", context={"field": key})

    ids = []
    for entry in entries:
        if isinstance(entry, dict):
            entry = entry.get("id")
        if not isinstance(entry, str) or not entry:
            raise ConfigValidationError(
                f"'{key}' 中存在缺少 id 的项目", context={"field": key}
            )
        ids.append(entry)
    return ids


def _string_list(data: dict, key: str, required: bool = False) -> List[str]:
    value = data.get(key)
    if value is None:
        value = []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigValidationError(f"'{key}' 必须是字符串列表", context={"field": key})
    if required and not value:
        raise ConfigValidationError(f"请至少配置一个 '{key}'", context={"field": key})
    return value


@dataclass
class ModpackConfig:
    """modpack.json 配置"""

    loaders: List[str]
    versions: List[str]
    projects: Dict[ProjectType, List[str]] = field(default_factory=dict)
    ignore: List[str] = field(default_factory=list)
    manual: List[str] = field(default_factory=list)
    directory_names: Dict[ProjectType, str] = field(
        default_factory=lambda: dict(DEFAULT_DIRECTORIES)
    )
    root: Path = field(default_factory=Path.cwd)

    @classmethod
    def from_dict(cls, data: dict, root: Optional[Path] = None) -> "ModpackConfig":
        if not isinstance(data, dict):
            raise ConfigValidationError("配置文件顶层必须是对象")

        projects = {
            project_type: _project_ids(data.get(project_type.plural), project_type.plural)
            for project_type in ProjectType
        }

        directory_names = {}
        for project_type, default in DEFAULT_DIRECTORIES.items():
            key = f"{project_type.plural}Directory"
            name = data.get(key, default)
            if not isinstance(name, str) or not name:
                raise ConfigValidationError(
                    f"'{key}' 必须是非空字符串", context={"field": key}
                )
            directory_names[project_type] = name

        return cls(
            loaders=_string_list(data, "loaders", required=True),
            versions=_string_list(data, "versions", required=True),
            projects=projects,
            ignore=_project_ids(data.get("ignore"), "ignore"),
            manual=_string_list(data, "manual"),
            directory_names=directory_names,
            root=root if root is not None else Path.cwd(),
        )

    def projects_for(self, project_type: ProjectType) -> List[str]:
        return self.projects.get(project_type, [])

    def loaders_for(self, project_type: ProjectType) -> List[str]:
        if project_type is ProjectType.MOD:
            return list(self.loaders)
        return list(FIXED_LOADERS[project_type])

    def directory_for(self, project_type: ProjectType) -> Path:
        return self.root / self.directory_names[project_type]

    @property
    def directories(self) -> Dict[ProjectType, Path]:
        return {project_type: self.directory_for(project_type) for project_type in ProjectType}

    def is_ignored(self, project_id: str) -> bool:
        return project_id in self.ignore

    def root_type_of(self, project_id: str) -> Optional[ProjectType]:
        """返回该项目作为根项目所在的类型（依赖项目返回 None）"""
        for project_type in ProjectType:
            if project_id in self.projects_for(project_type):
                return project_type
        return None
