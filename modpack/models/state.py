"""
锁文件状态模型

记录每个项目已安装的版本（版本 ID + 选中文件的哈希）以及用户跳过的版本。
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set

from modpack.exceptions import StateError


@dataclass
class InstalledVersion:
    """已安装的版本"""

    version_id: str
    file_hashes: Set[str] = field(default_factory=set)

    def to_dict(self) -> dict:
        return {"versionId": self.version_id, "fileHashes": sorted(self.file_hashes)}

    @classmethod
    def from_dict(cls, data: dict) -> "InstalledVersion":
        try:
            return cls(
                version_id=data["versionId"],
                file_hashes=set(data.get("fileHashes", [])),
            )
        except (KeyError, TypeError) as e:
            raise StateError(f"无效的 installed 记录: {data!r}") from e


@dataclass
class ProjectState:
    """单个项目的锁定状态"""

    skipped: List[str] = field(default_factory=list)
    installed: Optional[InstalledVersion] = None

    def merge_skipped(self, version_ids: Iterable[str]):
        """把本轮跳过的版本去重合并进跳过列表"""
        for version_id in version_ids:
            if version_id not in self.skipped:
                self.skipped.append(version_id)

    def to_dict(self) -> dict:
        return {
            "skipped": list(self.skipped),
            "installed": self.installed.to_dict() if self.installed else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ProjectState":
        if not isinstance(data, dict):
            raise StateError(f"无效的项目状态: {data!r}")
        skipped = data.get("skipped", [])
        if not isinstance(skipped, list):
            raise StateError(f"skipped 必须是列表: {skipped!r}")
        installed = data.get("installed")
        return cls(
            skipped=list(skipped),
            installed=InstalledVersion.from_dict(installed) if installed else None,
        )


@dataclass
class State:
    """整个锁文件：项目 ID -> ProjectState"""

    projects: Dict[str, ProjectState] = field(default_factory=dict)

    def get(self, project_id: str) -> ProjectState:
        """获取项目状态，不存在时创建空状态"""
        if project_id not in self.projects:
            self.projects[project_id] = ProjectState()
        return self.projects[project_id]

    def installed(self, project_id: str) -> Optional[InstalledVersion]:
        project_state = self.projects.get(project_id)
        return project_state.installed if project_state else None

    def prune(self, keep: Set[str]):
        """只保留 keep 中的项目"""
        self.projects = {
            project_id: project_state
            for project_id, project_state in self.projects.items()
            if project_id in keep
        }

    @property
    def expected_hashes(self) -> Set[str]:
        """所有已安装版本选中文件的哈希"""
        hashes: Set[str] = set()
        for project_state in self.projects.values():
            if project_state.installed:
                hashes |= project_state.installed.file_hashes
        return hashes

    def to_dict(self) -> dict:
        return {
            project_id: self.projects[project_id].to_dict()
            for project_id in sorted(self.projects)
        }

    @classmethod
    def from_dict(cls, data: dict) -> "State":
        if not isinstance(data, dict):
            raise StateError("锁文件顶层必须是对象")
        return cls(
            projects={
                project_id: ProjectState.from_dict(project_state)
                for project_id, project_state in data.items()
            }
        )
