"""
Modpack 服务层

包含业务逻辑服务：API 客户端、版本选择、依赖处理、更新、报告与安装。
"""

from modpack.services.api_client import ModrinthClient
from modpack.services.version_selector import VersionSelector
from modpack.services.dependency_resolver import DependencyResolver, Walk
from modpack.services.state_store import StateStore
from modpack.services.prompt import Prompter, ConsolePrompter, AutoConfirm
from modpack.services.updater import UpdateEngine
from modpack.services.reporter import ReportGenerator, ReportSummary, ProjectReport
from modpack.services.installer import Installer, infer_project_type

__all__ = [
    "ModrinthClient",
    "VersionSelector",
    "DependencyResolver",
    "Walk",
    "StateStore",
    "Prompter",
    "ConsolePrompter",
    "AutoConfirm",
    "UpdateEngine",
    "ReportGenerator",
    "ReportSummary",
    "ProjectReport",
    "Installer",
    "infer_project_type",
]
