"""Tests for modpack.services.api_client against a local aiohttp server."""

import json
from contextlib import asynccontextmanager

import pytest
from aiohttp import web
from aiohttp import test_utils

from modpack.exceptions import APINotFoundError, APIResponseError
from modpack.models import DependencyType
from modpack.services import api_client
from modpack.services.api_client import ModrinthClient

VERSION = {
    "id": "IZskON6d",
    "project_id": "AANobbMI",
    "version_number": "mc1.20.1-0.5.3",
    "changelog": "Fixes",
    "date_published": "2023-09-20T17:13:16.123456Z",
    "loaders": ["fabric", "quilt"],
    "game_versions": ["1.20.1"],
    "dependencies": [
        {"version_id": None, "project_id": "P7dR8mSH", "dependency_type": "required"},
        {"version_id": "abc", "project_id": None, "dependency_type": "incompatible"},
    ],
    "files": [
        {
            "url": "https://cdn.modrinth.com/sodium.jar",
            "filename": "sodium.jar",
            "primary": True,
            "hashes": {"sha512": "deadbeef", "sha1": "beef"},
        }
    ],
}


@asynccontextmanager
async def serve(handler, path):
    app = web.Application()
    app.router.add_get(path, handler)
    server = test_utils.TestServer(app)
    await server.start_server()
    client = ModrinthClient(base_url=str(server.make_url("/v2")))
    try:
        yield client
    finally:
        await client.close()
        await server.close()


@pytest.mark.asyncio
class TestModrinthClient:
    async def test_get_project(self):
        async def handler(request):
            return web.json_response({"id": "AANobbMI", "title": "Sodium", "slug": "sodium"})

        async with serve(handler, "/v2/project/{idx}") as client:
            project = await client.get_project("sodium")

        assert (project.id, project.title) == ("AANobbMI", "Sodium")

    async def test_get_versions_sends_json_filters(self):
        seen = {}

        async def handler(request):
            seen.update(request.query)
            return web.json_response([VERSION])

        async with serve(handler, "/v2/project/{idx}/version") as client:
            versions = await client.get_versions("AANobbMI", ["fabric"], ["1.20.1", "1.20"])

        assert json.loads(seen["loaders"]) == ["fabric"]
        assert json.loads(seen["game_versions"]) == ["1.20.1", "1.20"]
        version = versions[0]
        assert version.project_id == "AANobbMI"
        assert version.date_published.year == 2023
        assert version.file_hashes == {"deadbeef"}
        assert [d.dependency_type for d in version.dependencies] == [
            DependencyType.REQUIRED,
            DependencyType.INCOMPATIBLE,
        ]
        assert [d.project_id for d in version.required_dependencies] == ["P7dR8mSH"]

    async def test_structured_error_is_raised(self):
        async def handler(request):
            return web.json_response(
                {"error": "invalid_input", "description": "Bad loaders"}, status=400
            )

        async with serve(handler, "/v2/version/{idx}") as client:
            with pytest.raises(APIResponseError) as info:
                await client.get_version("nope")

        assert info.value.code == "invalid_input"
        assert info.value.description == "Bad loaders"

    async def test_not_found(self):
        async def handler(request):
            return web.Response(status=404, text="Not Found")

        async with serve(handler, "/v2/project/{idx}") as client:
            with pytest.raises(APINotFoundError):
                await client.get_project("missing")


@pytest.mark.asyncio
class TestRateLimit:
    @pytest.fixture
    def sleeps(self, monkeypatch):
        calls = []

        async def fake_sleep(seconds):
            calls.append(seconds)

        monkeypatch.setattr(api_client.asyncio, "sleep", fake_sleep)
        return calls

    async def test_waits_for_reset_when_nearly_exhausted(self, sleeps):
        await ModrinthClient().avoid_rate_limit(
            {"x-ratelimit-remaining": "2", "x-ratelimit-reset": "7"}
        )

        assert sleeps == [8]

    async def test_no_wait_with_quota_left(self, sleeps):
        await ModrinthClient().avoid_rate_limit(
            {"x-ratelimit-remaining": "250", "x-ratelimit-reset": "7"}
        )

        assert sleeps == []

    async def test_missing_headers_are_ignored(self, sleeps):
        await ModrinthClient().avoid_rate_limit({"x-ratelimit-remaining": "0"})

        assert sleeps == []
