"""
下载管理器

逐个下载文件：先写入临时文件并校验，再移动到目标目录。
失败不重试，直接向上抛出。
"""

import os
import shutil
import tempfile
from typing import Optional

import aiohttp
import aiofiles
from loguru import logger

from modpack.download.verifier import FileVerifier
from modpack.exceptions import DownloadChecksumError, DownloadNetworkError


class DownloadManager:
    """下载管理器"""

    def __init__(self, session: Optional[aiohttp.ClientSession] = None):
        self.verifier = FileVerifier()
        self._session = session
        self._owned_session = session is None

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def download_file(
        self,
        url: str,
        filename: str,
        download_dir: str,
        expected_sha512: Optional[str] = None,
    ) -> str:
        """
        下载单个文件

        Returns:
            文件最终路径
        """
        os.makedirs(download_dir, exist_ok=True)
        file_path = os.path.join(download_dir, filename)

        logger.info(f"[开始] 下载: {filename}")

        fd, tmp_path = tempfile.mkstemp(prefix=".download-", dir=download_dir)
        os.close(fd)
        try:
            try:
                async with self.session.get(url) as response:
                    if response.status != 200:
                        raise DownloadNetworkError(
                            f"HTTP {response.status}: {filename}",
                            context={"url": url, "status": response.status},
                        )

                    async with aiofiles.open(tmp_path, "wb") as f:
                        async for chunk in response.content.iter_chunked(8192):
                            await f.write(chunk)
            except aiohttp.ClientError as e:
                raise DownloadNetworkError(
                    f"下载失败: {filename}", context={"url": url, "error": str(e)}
                ) from e

            if not await self.verifier.verify_sha512(tmp_path, expected_sha512):
                raise DownloadChecksumError(
                    f"SHA-512 校验失败: {filename}",
                    context={"file": filename, "expected": expected_sha512},
                )

            shutil.move(tmp_path, file_path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

        logger.success(f"[完成] '{filename}' 下载完成")
        return file_path

    async def close(self):
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
