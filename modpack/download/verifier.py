"""
文件校验器

计算并校验文件的 SHA-512。
"""

import hashlib
import os
from typing import Optional, Union

import aiofiles

CHUNK_SIZE = 65536


class FileVerifier:
    """文件校验器"""

    @staticmethod
    async def calc_sha512(file_path: Union[str, os.PathLike]) -> str:
        """
        计算文件的 SHA-512 值

        读取失败时抛出 OSError，由调用方决定是否中止。
        """
        sha512 = hashlib.sha512()
        async with aiofiles.open(file_path, "rb") as f:
            while True:
                data = await f.read(CHUNK_SIZE)
                if not data:
                    break
                sha512.update(data)
        return sha512.hexdigest()

    @staticmethod
    async def verify_sha512(
        file_path: Union[str, os.PathLike], expected_sha512: Optional[str]
    ) -> bool:
        """校验文件的 SHA-512 是否匹配（没有预期值时返回 True）"""
        if not expected_sha512:
            return True
        if not os.path.exists(file_path):
            return False
        return await FileVerifier.calc_sha512(file_path) == expected_sha512
