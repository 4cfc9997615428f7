"""
安装服务

按锁文件状态整理安装目录：把不属于任何已安装版本的文件移入回收站，
再下载缺失的文件。
"""

from pathlib import Path
from typing import Dict, Set

from loguru import logger
from send2trash import send2trash

from modpack.download import DownloadManager, FileVerifier
from modpack.models import FileInfo, ModpackConfig, ProjectType, State, VersionInfo
from modpack.services.api_client import ModrinthClient


SHADER_COMPANION_SUFFIX = ".txt"


def infer_project_type(version: VersionInfo, file: FileInfo) -> ProjectType:
    """
    根据文件扩展名与加载器推断项目类型

    锁文件没有记录依赖项目的类型，这里只是尽力推断，并不保证正确。
    """
    if file.extension == "jar":
        return ProjectType.MOD
    if "minecraft" in version.loaders:
        return ProjectType.RESOURCEPACK
    if "datapack" in version.loaders:
        return ProjectType.DATAPACK
    return ProjectType.SHADERPACK


class Installer:
    """安装器"""

    def __init__(
        self,
        client: ModrinthClient,
        config: ModpackConfig,
        downloader: DownloadManager,
    ):
        self.client = client
        self.config = config
        self.downloader = downloader
        self.verifier = FileVerifier()

    def _directories(self) -> Dict[Path, ProjectType]:
        """去重后的安装目录（多个类型共用目录时取第一个类型）"""
        directories: Dict[Path, ProjectType] = {}
        for project_type, directory in self.config.directories.items():
            directories.setdefault(directory, project_type)
        return directories

    def project_type_for(
        self, project_id: str, version: VersionInfo, file: FileInfo
    ) -> ProjectType:
        return self.config.root_type_of(project_id) or infer_project_type(version, file)

    async def scan(self, expected: Set[str]) -> Set[str]:
        """
        扫描安装目录，移除多余文件

        Returns:
            本地已存在的预期哈希
        """
        present: Set[str] = set()

        for directory, project_type in self._directories().items():
            if not directory.is_dir():
                continue

            for path in sorted(directory.iterdir()):
                if not path.is_file() or path.name in self.config.manual:
                    continue

                sha512 = await self.verifier.calc_sha512(path)
                if sha512 in expected:
                    present.add(sha512)
                    continue

                if (
                    project_type is ProjectType.SHADERPACK
                    and path.suffix.lower() == SHADER_COMPANION_SUFFIX
                ):
                    logger.debug(f"保留光影配置文件 '{path.name}'")
                    continue

                logger.info(f"移除多余文件 '{path.name}'")
                send2trash(str(path))

        return present

    async def install(self, state: State) -> int:
        """
        让安装目录与状态一致

        Returns:
            下载的文件数量
        """
        expected = state.expected_hashes
        present = await self.scan(expected)

        if present == expected:
            logger.success("所有文件已是最新")
            return 0

        downloaded = 0
        for project_id, project_state in state.projects.items():
            installed = project_state.installed
            if installed is None or installed.file_hashes <= present:
                continue

            version = await self.client.get_version(installed.version_id)
            logger.info(f"正在安装 [{version.version_number}] ({project_id})")

            for file in version.files:
                if file.sha512 not in installed.file_hashes or file.sha512 in present:
                    continue

                project_type = self.project_type_for(project_id, version, file)
                await self.downloader.download_file(
                    file.url,
                    file.filename,
                    str(self.config.directory_for(project_type)),
                    file.sha512,
                )
                present.add(file.sha512)
                downloaded += 1

        logger.success(f"安装完成，下载了 {downloaded} 个文件")
        return downloaded
