"""
Modpack - 让本地模组、数据包、资源包与光影包与 Modrinth 上的最新兼容版本保持同步
"""

__version__ = "4.2.0"

__all__ = ["__version__"]
