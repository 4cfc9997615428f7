"""
API 客户端

Modrinth v2 API 的最小客户端：项目、项目版本列表与单个版本查询。
所有请求按顺序发出；接近速率限制时在返回前阻塞等待。
"""

import asyncio
import json
from typing import List, Optional

import aiohttp
from loguru import logger

from modpack import __version__
from modpack.models import ProjectInfo, VersionInfo
from modpack.exceptions import APIError, APINotFoundError, APIResponseError


MODRINTH_BASE_URL = "https://api.modrinth.com/v2"
USER_AGENT = f"modpack/{__version__}"

RATE_LIMIT_THRESHOLD = 3
RATE_LIMIT_BUFFER = 1


class ModrinthClient:
    """Modrinth API 客户端"""

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        base_url: str = MODRINTH_BASE_URL,
    ):
        self._session = session
        self._owned_session = session is None
        self.base_url = base_url

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(headers={"User-Agent": USER_AGENT})
        return self._session

    async def _request(self, endpoint: str, params: Optional[dict] = None):
        """发送 API 请求"""
        url = f"{self.base_url}/{endpoint}"
        try:
            async with self.session.get(url, params=params) as response:
                text = await response.text()
                data = _decode(text)

                if isinstance(data, dict) and "error" in data and "description" in data:
                    logger.error(data["description"])
                    raise APIResponseError(
                        data["error"],
                        data["description"],
                        status=response.status,
                        url=url,
                    )

                if response.status == 404:
                    raise APINotFoundError(
                        f"资源不存在: {endpoint}", status=response.status, url=url
                    )
                if response.status != 200 or data is None:
                    raise APIError(
                        f"API 请求失败 (状态码: {response.status})",
                        status=response.status,
                        url=url,
                    )

                await self.avoid_rate_limit(response.headers)
                return data
        except aiohttp.ClientError as e:
            raise APIError(f"网络请求失败: {e}", context={"url": url}) from e

    async def avoid_rate_limit(self, headers):
        """剩余请求数不足时等待限额重置"""
        remaining = headers.get("x-ratelimit-remaining")
        reset = headers.get("x-ratelimit-reset")
        if remaining is None or reset is None:
            return

        try:
            remaining = int(remaining)
            reset = int(reset)
        except ValueError:
            return

        if remaining >= RATE_LIMIT_THRESHOLD:
            return

        wait_time = reset + RATE_LIMIT_BUFFER
        logger.warning(f"即将达到请求限额，等待 {wait_time}s 后继续...")
        await asyncio.sleep(wait_time)

    async def get_project(self, idx: str) -> ProjectInfo:
        """获取项目信息"""
        response = await self._request(f"project/{idx}")
        return ProjectInfo.from_modrinth(response)

    async def get_versions(
        self,
        idx: str,
        loaders: List[str],
        game_versions: List[str],
    ) -> List[VersionInfo]:
        """获取项目在指定加载器与游戏版本下的全部版本（服务端预过滤，未排序）"""
        params = {
            "loaders": json.dumps(list(loaders)),
            "game_versions": json.dumps(list(game_versions)),
        }
        response = await self._request(f"project/{idx}/version", params)
        return [VersionInfo.from_modrinth(version) for version in response]

    async def get_version(self, version_id: str) -> VersionInfo:
        """获取单个版本"""
        response = await self._request(f"version/{version_id}")
        return VersionInfo.from_modrinth(response)

    async def close(self):
        """关闭客户端"""
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


def _decode(text: str):
    try:
        return json.loads(text)
    except ValueError:
        return None
