"""
兼容性报告

更新引擎的只读版本：检查每个项目（及其必需依赖）在目标游戏版本下是否有兼容版本，
不读取也不修改锁文件状态。
"""

from dataclasses import dataclass, field
from typing import Dict, List

from loguru import logger

from modpack.models import ModpackConfig, ProjectType
from modpack.services.api_client import ModrinthClient
from modpack.services.dependency_resolver import DependencyResolver, Walk
from modpack.services.version_selector import VersionSelector


@dataclass
class ProjectReport:
    id: str
    name: str
    valid: bool
    project_type: ProjectType
    dependency: bool = False
    ignore: bool = False


@dataclass
class TypeSummary:
    """单个项目类型的统计"""

    ready: int = 0
    total: int = 0
    dependency_ready: int = 0
    dependency_total: int = 0
    incompatible: List[str] = field(default_factory=list)


@dataclass
class ReportSummary:
    game_versions: List[str]
    types: Dict[ProjectType, TypeSummary] = field(default_factory=dict)
    ready: int = 0
    total: int = 0

    @classmethod
    def from_reports(
        cls, reports: List[ProjectReport], game_versions: List[str]
    ) -> "ReportSummary":
        """汇总报告，被忽略的项目不计入统计"""
        summary = cls(game_versions=list(game_versions))
        for report in reports:
            if report.ignore:
                continue

            type_summary = summary.types.setdefault(report.project_type, TypeSummary())
            type_summary.total += 1
            summary.total += 1
            if report.valid:
                type_summary.ready += 1
                summary.ready += 1
            else:
                type_summary.incompatible.append(report.name)

            if report.dependency:
                type_summary.dependency_total += 1
                if report.valid:
                    type_summary.dependency_ready += 1
        return summary

    def log(self):
        versions = f"[{', '.join(self.game_versions)}]"
        for project_type in ProjectType:
            type_summary = self.types.get(project_type)
            if type_summary is None:
                continue

            name = project_type.plural.capitalize()
            logger.info(f"{name} (全部)")
            logger.info(f"[{type_summary.ready}/{type_summary.total}] 支持 {versions}\n")

            if type_summary.incompatible:
                incompatible = "\n".join(type_summary.incompatible)
                logger.warning(f"不兼容的 {name}:\n{incompatible}\n")

            if type_summary.dependency_total:
                logger.info(f"{name} (依赖)")
                logger.info(
                    f"[{type_summary.dependency_ready}/{type_summary.dependency_total}] "
                    f"支持 {versions}\n"
                )

        logger.info("总计")
        logger.info(f"[{self.ready}/{self.total}] 支持 {versions}")


class ReportGenerator:
    """兼容性报告生成器"""

    def __init__(self, client: ModrinthClient, config: ModpackConfig):
        self.client = client
        self.config = config
        self.selector = VersionSelector()
        self.dep_resolver = DependencyResolver(client)

    async def run(self, game_versions: List[str]) -> ReportSummary:
        """对配置中的全部项目生成报告"""
        walk = Walk()
        reports: List[ProjectReport] = []

        for project_type in ProjectType:
            loaders = self.config.loaders_for(project_type)
            for project_id in self.config.projects_for(project_type):
                reports.extend(
                    await self.report(project_id, project_type, loaders, game_versions, walk)
                )

        return ReportSummary.from_reports(reports, game_versions)

    async def report(
        self,
        project_id: str,
        project_type: ProjectType,
        loaders: List[str],
        game_versions: List[str],
        walk: Walk,
        dependency: bool = False,
    ) -> List[ProjectReport]:
        if not walk.visit(project_id):
            return []

        if self.config.is_ignored(project_id):
            return [
                ProjectReport(project_id, "", False, project_type, dependency, ignore=True)
            ]

        project = await self.client.get_project(project_id)
        if project.id != project_id and not walk.visit(project.id):
            return []

        if self.config.is_ignored(project.id):
            return [
                ProjectReport(project.id, project.title, False, project_type, dependency, ignore=True)
            ]

        versions = await self.client.get_versions(project.id, loaders, game_versions)
        candidates = self.selector.select(versions, loaders, game_versions, project.title)

        if not candidates:
            logger.debug(f"{project.title} 不支持 {', '.join(game_versions)}")
            return [ProjectReport(project.id, project.title, False, project_type, dependency)]

        reports = [ProjectReport(project.id, project.title, True, project_type, dependency)]
        for dependency_id in await self.dep_resolver.required_project_ids(candidates[0]):
            reports.extend(
                await self.report(
                    dependency_id, project_type, loaders, game_versions, walk, dependency=True
                )
            )
        return reports
