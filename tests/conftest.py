from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest
from loguru import logger

from modpack.exceptions import APINotFoundError, InputError
from modpack.models import (
    DependencyInfo,
    DependencyType,
    FileInfo,
    ModpackConfig,
    ProjectInfo,
    VersionInfo,
)
from modpack.services.prompt import Prompter

BASE_DATE = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_file(name: str, primary: bool = True, sha512: Optional[str] = None) -> FileInfo:
    return FileInfo(
        url=f"https://cdn.example.com/{name}",
        filename=name,
        primary=primary,
        hashes={"sha512": sha512 or f"hash-{name}"},
    )


def make_version(
    version_id: str,
    project_id: str = "proj",
    days: int = 0,
    loaders=("fabric",),
    game_versions=("1.20.1",),
    files: Optional[List[FileInfo]] = None,
    requires=(),
    changelog: Optional[str] = None,
) -> VersionInfo:
    return VersionInfo(
        id=version_id,
        project_id=project_id,
        version_number=f"{version_id}-number",
        date_published=BASE_DATE + timedelta(days=days),
        loaders=list(loaders),
        game_versions=list(game_versions),
        files=files if files is not None else [make_file(f"{version_id}.jar")],
        dependencies=[
            DependencyInfo(DependencyType.REQUIRED, project_id=dep) for dep in requires
        ],
        changelog=changelog,
    )


class FakeClient:
    """内存中的 Modrinth 客户端"""

    def __init__(self, versions: Dict[str, List[VersionInfo]], titles=None):
        self.versions = versions
        self.titles = titles or {}
        self.calls: List[tuple] = []

    async def get_project(self, idx: str) -> ProjectInfo:
        self.calls.append(("get_project", idx))
        if idx not in self.versions:
            raise APINotFoundError(f"missing project {idx}")
        return ProjectInfo(id=idx, title=self.titles.get(idx, idx.capitalize()))

    async def get_versions(self, idx, loaders, game_versions) -> List[VersionInfo]:
        self.calls.append(("get_versions", idx))
        return [
            v
            for v in self.versions[idx]
            if set(v.loaders) & set(loaders) and set(v.game_versions) & set(game_versions)
        ]

    async def get_version(self, version_id: str) -> VersionInfo:
        self.calls.append(("get_version", version_id))
        for versions in self.versions.values():
            for version in versions:
                if version.id == version_id:
                    return version
        raise APINotFoundError(f"missing version {version_id}")

    def count(self, method: str, idx: str) -> int:
        return self.calls.count((method, idx))


class SlugClient(FakeClient):
    """按 slug 请求项目时返回规范 ID"""

    def __init__(self, versions: Dict[str, List[VersionInfo]], slugs: Dict[str, str]):
        super().__init__(versions)
        self.slugs = slugs

    async def get_project(self, idx: str) -> ProjectInfo:
        return await super().get_project(self.slugs.get(idx, idx))


class ScriptedPrompter(Prompter):
    """按顺序返回预设回答，用完后视为输入流关闭"""

    def __init__(self, answers=()):
        self.answers = list(answers)
        self.questions: List[str] = []

    def ask(self, question: str) -> str:
        self.questions.append(question)
        if not self.answers:
            raise InputError("no more answers")
        return self.answers.pop(0)


def make_config(tmp_path=None, **overrides) -> ModpackConfig:
    data = {"loaders": ["fabric"], "versions": ["1.20.1"], "mods": []}
    data.update(overrides)
    return ModpackConfig.from_dict(data, root=tmp_path)


@pytest.fixture
def log_messages():
    messages: List[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]))
    yield messages
    logger.remove(handler_id)
