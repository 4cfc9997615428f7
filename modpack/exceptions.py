"""
Modpack 统一异常体系

提供分层的异常结构，支持错误代码与上下文信息。
"""

from typing import Any, Dict, Optional


class ModpackError(Exception):
    """Modpack 基础异常类"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self._get_default_code()
        self.context = context or {}

    def _get_default_code(self) -> str:
        return "E000"

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class ConfigError(ModpackError):
    """配置相关错误"""

    def _get_default_code(self) -> str:
        return "E100"


class ConfigParseError(ConfigError):
    """配置解析错误"""

    def _get_default_code(self) -> str:
        return "E101"


class ConfigValidationError(ConfigError):
    """配置验证错误"""

    def _get_default_code(self) -> str:
        return "E102"


class StateError(ModpackError):
    """锁文件读取或写入错误"""

    def _get_default_code(self) -> str:
        return "E110"


class APIError(ModpackError):
    """API 相关错误"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        status: Optional[int] = None,
        url: Optional[str] = None,
    ):
        super().__init__(message, code, context)
        self.status = status
        if status is not None:
            self.context["status_code"] = status
        if url is not None:
            self.context["url"] = url

    def _get_default_code(self) -> str:
        return "E200"


class APINotFoundError(APIError):
    """API 资源不存在"""

    def _get_default_code(self) -> str:
        return "E404"


class APIResponseError(APIError):
    """
    API 返回了结构化错误

    Modrinth 的错误响应形如 ``{"error": "...", "description": "..."}``，
    ``error`` 作为错误代码保存，``description`` 作为消息。
    """

    def __init__(self, error: str, description: str, **kwargs):
        super().__init__(description, code=error, **kwargs)
        self.error = error
        self.description = description


class InputError(ModpackError):
    """确认输入流意外关闭"""

    def _get_default_code(self) -> str:
        return "E120"


class DownloadError(ModpackError):
    """下载相关错误"""

    def _get_default_code(self) -> str:
        return "E300"


class DownloadNetworkError(DownloadError):
    """下载网络错误"""

    def _get_default_code(self) -> str:
        return "E301"


class DownloadChecksumError(DownloadError):
    """下载校验错误"""

    def _get_default_code(self) -> str:
        return "E302"


__all__ = [
    "ModpackError",
    "ConfigError",
    "ConfigParseError",
    "ConfigValidationError",
    "StateError",
    "APIError",
    "APINotFoundError",
    "APIResponseError",
    "InputError",
    "DownloadError",
    "DownloadNetworkError",
    "DownloadChecksumError",
]
