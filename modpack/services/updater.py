"""
更新引擎

从配置中的根项目出发深度优先遍历必需依赖，为每个项目选择最新兼容版本，
向用户确认安装或跳过，并更新锁文件状态。
"""

from typing import List, Optional, Set

from loguru import logger

from modpack.models import (
    InstalledVersion,
    ModpackConfig,
    ProjectState,
    ProjectType,
    State,
    VersionInfo,
)
from modpack.services.api_client import ModrinthClient
from modpack.services.dependency_resolver import DependencyResolver, Walk
from modpack.services.prompt import Prompter
from modpack.services.version_selector import VersionSelector


INSTALL = "y"
SKIP = "s"


class UpdateEngine:
    """更新引擎"""

    def __init__(
        self,
        client: ModrinthClient,
        config: ModpackConfig,
        prompter: Prompter,
        show_changelog: bool = False,
    ):
        self.client = client
        self.config = config
        self.prompter = prompter
        self.show_changelog = show_changelog
        self.selector = VersionSelector()
        self.dep_resolver = DependencyResolver(client)

    async def run(self, state: State) -> State:
        """
        完整遍历一次所有根项目

        Args:
            state: 上次运行保存的状态（会被原地修改）

        Returns:
            修剪后的新状态：只保留本轮访问过且未被忽略的项目
        """
        walk = Walk(state=state)

        for project_type in ProjectType:
            loaders = self.config.loaders_for(project_type)
            for project_id in self.config.projects_for(project_type):
                await self.update(project_id, loaders, walk)

        keep = walk.visited - set(self.config.ignore)
        walk.state.prune(keep)
        return walk.state

    async def update(
        self,
        project_id: str,
        loaders: List[str],
        walk: Walk,
        dependency: bool = False,
    ):
        """处理单个项目，随后递归处理其必需依赖"""
        if project_id in walk.visited:
            if not self.config.is_ignored(project_id):
                await self._propagate(project_id, loaders, walk)
            return

        walk.visit(project_id)

        if self.config.is_ignored(project_id):
            logger.info(f"忽略{' 依赖' if dependency else ''}项目 {project_id}")
            return

        project = await self.client.get_project(project_id)
        if project.id != project_id and not walk.visit(project.id):
            # 以 slug 配置的项目已经以 ID 形式处理过
            await self._propagate(project.id, loaders, walk)
            return

        if self.config.is_ignored(project.id):
            logger.info(f"忽略{' 依赖' if dependency else ''}项目 {project.title}")
            return

        label = f"依赖 {project.title}" if dependency else project.title
        project_state = walk.state.get(project.id)

        logger.info(f"正在获取 {label} 的版本...")
        versions = await self.client.get_versions(project.id, loaders, self.config.versions)
        versions = [v for v in versions if v.id not in project_state.skipped]
        candidates = self.selector.select(versions, loaders, self.config.versions, label)

        if not candidates:
            logger.info(f"{label} 没有可用的兼容版本")
            await self._propagate(project.id, loaders, walk)
            return

        latest = candidates[0]
        installed = project_state.installed

        if installed and latest.id == installed.version_id:
            if installed.file_hashes <= latest.file_hashes:
                logger.debug(f"{label} 已是最新版本 [{latest.version_number}]")
                await self._propagate(project.id, loaders, walk, latest)
                return

            logger.warning(
                f"{label} [{latest.version_number}] 的文件在上游发生了变化，需要重新安装"
            )
            project_state.installed = None

        logger.info(f"{label} 有新版本可用 [{latest.version_number}]")

        if self.show_changelog:
            self._show_changelogs(candidates, project_state.installed)

        chosen = self._confirm(label, candidates, project_state)
        await self._propagate(project.id, loaders, walk, chosen)

    def _show_changelogs(
        self, candidates: List[VersionInfo], installed: Optional[InstalledVersion]
    ):
        """输出所有比当前安装版本更新的版本的更新日志"""
        for version in candidates:
            if installed and version.id == installed.version_id:
                break
            if not version.changelog:
                continue
            logger.info(f"[{version.version_number}] 更新日志:")
            logger.info(f"{version.changelog.strip()}\n")

    def _confirm(
        self, label: str, candidates: List[VersionInfo], project_state: ProjectState
    ) -> Optional[VersionInfo]:
        """
        依次询问是否安装候选版本

        y 安装并结束；s 跳过并记住；其他输入不记录地跳过。
        到达当前已安装的版本时停止询问并保留它。

        Returns:
            本轮新安装的版本，没有则为 None
        """
        installed = project_state.installed
        skipped: List[str] = []

        for version in candidates:
            if installed and version.id == installed.version_id:
                logger.info(f"保留当前安装的 {label} [{version.version_number}]")
                break

            answer = self._ask(f"安装 {label} [{version.version_number}]? [y/N/s]")

            if answer == INSTALL:
                hashes = self._choose_files(label, version)
                if not hashes:
                    continue
                project_state.installed = InstalledVersion(version.id, hashes)
                project_state.skipped = skipped
                logger.success(f"{label} 将安装 [{version.version_number}]")
                return version

            if answer == SKIP:
                logger.warning(f"跳过 {label} [{version.version_number}]，以后不再询问")
                skipped.append(version.id)
                continue

            logger.warning(f"暂不安装 {label} [{version.version_number}]")

        project_state.merge_skipped(skipped)
        return None

    def _choose_files(self, label: str, version: VersionInfo) -> Set[str]:
        """多文件版本逐个确认文件（主文件优先），返回选中文件的哈希"""
        files = [file for file in version.primary_first() if file.sha512]
        if not files:
            logger.warning(f"{label} [{version.version_number}] 没有可下载的文件")
            return set()

        if len(files) == 1:
            return {files[0].sha512}

        hashes = set()
        for file in files:
            primary = " (主文件)" if file.primary else ""
            if self._ask(f"包含文件 {file.filename}{primary}? [y/N]") == INSTALL:
                hashes.add(file.sha512)

        if not hashes:
            logger.warning(f"没有为 {label} [{version.version_number}] 选择任何文件")
        return hashes

    def _ask(self, question: str) -> str:
        return self.prompter.ask(question).strip().lower()

    async def _propagate(
        self,
        project_id: str,
        loaders: List[str],
        walk: Walk,
        version: Optional[VersionInfo] = None,
    ):
        """遍历当前安装版本的必需依赖"""
        if not walk.expand(project_id):
            return

        installed = walk.state.installed(project_id)
        if installed is None:
            return

        if version is None or version.id != installed.version_id:
            version = await self.client.get_version(installed.version_id)

        for dependency_id in await self.dep_resolver.required_project_ids(version):
            await self.update(dependency_id, loaders, walk, dependency=True)
