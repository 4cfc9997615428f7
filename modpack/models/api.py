"""
API 数据模型

定义 Modrinth API 相关的数据类，包括项目、版本、依赖与文件信息。
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Set


class DependencyType(Enum):
    """依赖类型"""

    REQUIRED = "required"
    OPTIONAL = "optional"
    INCOMPATIBLE = "incompatible"
    EMBEDDED = "embedded"


@dataclass
class ProjectInfo:
    """
    模组项目信息。
    """

    id: str
    title: str

    @classmethod
    def from_modrinth(cls, data: dict) -> "ProjectInfo":
        return cls(id=data["id"], title=data.get("title") or data["id"])


@dataclass
class FileInfo:
    """文件信息"""

    url: str
    filename: str
    primary: bool = False
    hashes: Dict[str, str] = field(default_factory=dict)

    @property
    def sha512(self) -> str:
        return self.hashes.get("sha512", "")

    @property
    def extension(self) -> str:
        return self.filename.rsplit(".", 1)[-1].lower() if "." in self.filename else ""

    @classmethod
    def from_modrinth(cls, data: dict) -> "FileInfo":
        return cls(
            url=data["url"],
            filename=data["filename"],
            primary=data.get("primary", False),
            hashes=dict(data.get("hashes") or {}),
        )


@dataclass
class DependencyInfo:
    """
    依赖信息

    依赖可能只给出 version_id，此时需要查询该版本才能得到 project_id。
    """

    dependency_type: DependencyType
    project_id: Optional[str] = None
    version_id: Optional[str] = None

    @property
    def required(self) -> bool:
        return self.dependency_type is DependencyType.REQUIRED

    @classmethod
    def from_modrinth(cls, data: dict) -> "DependencyInfo":
        return cls(
            dependency_type=DependencyType(data.get("dependency_type", "required")),
            project_id=data.get("project_id"),
            version_id=data.get("version_id"),
        )

    def to_dict(self) -> dict:
        return {
            "dependency_type": self.dependency_type.value,
            "project_id": self.project_id,
            "version_id": self.version_id,
        }


def parse_date(value: str) -> datetime:
    """解析 Modrinth 的 ISO 8601 时间戳（带小数秒与 Z 后缀）"""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


@dataclass
class VersionInfo:
    """
    模组版本信息。
    """

    id: str
    project_id: str
    version_number: str
    date_published: datetime
    loaders: List[str] = field(default_factory=list)
    game_versions: List[str] = field(default_factory=list)
    files: List[FileInfo] = field(default_factory=list)
    dependencies: List[DependencyInfo] = field(default_factory=list)
    changelog: Optional[str] = None

    @property
    def file_hashes(self) -> Set[str]:
        """该版本全部文件的 SHA-512 集合"""
        return {file.sha512 for file in self.files if file.sha512}

    @property
    def required_dependencies(self) -> List[DependencyInfo]:
        return [dep for dep in self.dependencies if dep.required]

    def primary_first(self) -> List[FileInfo]:
        """主文件排在最前，其余文件保持原顺序"""
        return sorted(self.files, key=lambda file: not file.primary)

    def matches(self, loader: str, game_version: str) -> bool:
        return loader in self.loaders and game_version in self.game_versions

    @classmethod
    def from_modrinth(cls, data: dict) -> "VersionInfo":
        """
        将 Modrinth API 返回的版本信息转换为 VersionInfo 对象。
        """
        return cls(
            id=data["id"],
            project_id=data.get("project_id", ""),
            version_number=data.get("version_number", ""),
            date_published=parse_date(data["date_published"]),
            loaders=list(data.get("loaders") or []),
            game_versions=list(data.get("game_versions") or []),
            files=[FileInfo.from_modrinth(file) for file in data.get("files") or []],
            dependencies=[
                DependencyInfo.from_modrinth(dep)
                for dep in data.get("dependencies") or []
            ],
            changelog=data.get("changelog"),
        )
