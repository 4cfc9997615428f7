"""
版本选择服务

按加载器与游戏版本的偏好顺序过滤并排序项目的候选版本。
"""

from typing import Iterable, List

from loguru import logger

from modpack.models import VersionInfo


class VersionSelector:
    """版本选择器"""

    def select(
        self,
        versions: Iterable[VersionInfo],
        loaders: List[str],
        game_versions: List[str],
        label: str = "",
    ) -> List[VersionInfo]:
        """
        选择兼容版本

        依次遍历 (加载器, 游戏版本) 组合，每个组合认领尚未被认领的匹配版本，
        组内按发布时间从新到旧排序后追加。不匹配任何组合的版本被丢弃，
        同一版本最多出现一次。

        Args:
            versions: 全部候选版本
            loaders: 按偏好排序的加载器
            game_versions: 按偏好排序的游戏版本
            label: 仅用于调试日志的项目名称

        Returns:
            排序后的兼容版本列表
        """
        pool = list(versions)
        selected: List[VersionInfo] = []

        for loader in loaders:
            for game_version in game_versions:
                matching = [v for v in pool if v.matches(loader, game_version)]
                pool = [v for v in pool if not v.matches(loader, game_version)]

                if not matching and not selected:
                    logger.debug(
                        f"{label or '项目'} 没有适用于 Minecraft {game_version} ({loader}) 的版本"
                    )
                    continue

                selected.extend(
                    sorted(matching, key=lambda v: v.date_published, reverse=True)
                )

        return selected
