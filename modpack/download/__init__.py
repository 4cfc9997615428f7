"""
Modpack 下载层

包含下载管理与文件校验。
"""

from modpack.download.manager import DownloadManager
from modpack.download.verifier import FileVerifier

__all__ = [
    "DownloadManager",
    "FileVerifier",
]
