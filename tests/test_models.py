"""Tests for modpack.models."""

import pytest

from conftest import make_file, make_version

from modpack.models import DependencyInfo, DependencyType, FileInfo, VersionInfo


@pytest.mark.parametrize("dependency_type", list(DependencyType))
def test_dependency_type_survives_decoding(dependency_type):
    dependency = DependencyInfo(dependency_type, project_id="p", version_id="v")

    assert DependencyInfo.from_modrinth(dependency.to_dict()) == dependency


def test_unknown_dependency_type_is_rejected():
    with pytest.raises(ValueError):
        DependencyInfo.from_modrinth({"dependency_type": "recommended"})


def test_primary_first_keeps_remaining_order():
    version = make_version(
        "v",
        files=[
            make_file("b.jar", primary=False),
            make_file("c.jar", primary=False),
            make_file("a.jar", primary=True),
        ],
    )

    assert [f.filename for f in version.primary_first()] == ["a.jar", "b.jar", "c.jar"]


def test_file_without_sha512_has_no_hash():
    file = FileInfo.from_modrinth(
        {"url": "u", "filename": "x.zip", "hashes": {"sha1": "abc"}}
    )

    assert file.sha512 == ""
    assert file.extension == "zip"
    assert make_version("v", files=[file]).file_hashes == set()


def test_version_parses_fractional_utc_timestamp():
    version = VersionInfo.from_modrinth(
        {
            "id": "v",
            "project_id": "p",
            "date_published": "2024-05-01T10:00:00.500000Z",
        }
    )

    assert version.date_published.utcoffset().total_seconds() == 0
    assert version.files == [] and version.dependencies == []
