"""
依赖处理服务

把版本的必需依赖解析为项目 ID，并提供遍历时共享的访问记录。
"""

from dataclasses import dataclass, field
from typing import List, Optional, Set

from modpack.models import DependencyInfo, State, VersionInfo
from modpack.services.api_client import ModrinthClient


@dataclass
class Walk:
    """
    一次遍历的上下文

    visited 记录已做出决定的项目，expanded 记录已开始遍历依赖的项目；
    两者保证依赖环可以终止且每个项目只决定一次。
    """

    state: State = field(default_factory=State)
    visited: Set[str] = field(default_factory=set)
    expanded: Set[str] = field(default_factory=set)

    def visit(self, project_id: str) -> bool:
        """标记为已访问，若此前已访问过返回 False"""
        if project_id in self.visited:
            return False
        self.visited.add(project_id)
        return True

    def expand(self, project_id: str) -> bool:
        """标记依赖已展开，若此前已展开过返回 False"""
        if project_id in self.expanded:
            return False
        self.expanded.add(project_id)
        return True


class DependencyResolver:
    """依赖解析器"""

    def __init__(self, client: ModrinthClient):
        self.client = client

    async def project_id_for(self, dependency: DependencyInfo) -> Optional[str]:
        """依赖只给出版本 ID 时，查询该版本得到项目 ID"""
        if dependency.project_id:
            return dependency.project_id
        if dependency.version_id:
            version = await self.client.get_version(dependency.version_id)
            return version.project_id or None
        return None

    async def required_project_ids(self, version: VersionInfo) -> List[str]:
        """按声明顺序返回版本的必需依赖项目 ID"""
        project_ids = []
        for dependency in version.required_dependencies:
            project_id = await self.project_id_for(dependency)
            if project_id and project_id not in project_ids:
                project_ids.append(project_id)
        return project_ids
