from __future__ import annotations

import json
from pathlib import Path

from semtag.core.result import Err, Ok
from semtag.services.release.manifest import project_manifest_paths, read_version, write_version
from semtag.services.release.model import VersionResult
from semtag.services.release.output_file import discard_versions, write_versions


def _write_json(path: Path, data: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")


def test_write_version_keeps_other_keys(tmp_path: Path) -> None:
    path = tmp_path / "package.json"
    _write_json(path, {"name": "demo", "version": "0.0.0", "private": True})

    assert write_version(path, "1.2.0") == Ok(None)

    text = path.read_text(encoding="utf-8")
    assert text.startswith('{\n  "name": "demo",\n  "version": "1.2.0"')
    assert json.loads(text) == {"name": "demo", "version": "1.2.0", "private": True}
    assert read_version(path) == Ok("1.2.0")


def test_read_version_missing_field(tmp_path: Path) -> None:
    path = tmp_path / "package.json"
    _write_json(path, {"name": "demo"})
    assert read_version(path) == Ok(None)


def test_invalid_manifest(tmp_path: Path) -> None:
    path = tmp_path / "package.json"
    path.write_text("[1, 2]", encoding="utf-8")
    result = write_version(path, "1.0.0")
    assert isinstance(result, Err)
    assert result.error.kind == "io_failed"


def test_missing_manifest(tmp_path: Path) -> None:
    result = read_version(tmp_path / "package.json")
    assert isinstance(result, Err)
    assert result.error.kind == "io_failed"


def test_project_manifest_paths(tmp_path: Path) -> None:
    _write_json(tmp_path / "libs" / "ui" / "package.json", {})
    _write_json(tmp_path / "dist" / "libs" / "ui" / "package.json", {})
    _write_json(tmp_path / "packages" / "web" / "package.json", {})

    assert project_manifest_paths(tmp_path, "ui") == [
        tmp_path / "libs" / "ui" / "package.json",
        tmp_path / "dist" / "libs" / "ui" / "package.json",
    ]
    assert project_manifest_paths(tmp_path, "web") == [tmp_path / "packages" / "web" / "package.json"]
    assert project_manifest_paths(tmp_path, "api") == []


def test_output_file_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "out" / "versions.json"
    versions = [
        VersionResult(version="1.0.1-beta.1", tag="first-app/1.0.1-beta.1", project="first-app"),
        VersionResult(version="1.0.0-beta.3", tag="1.0.0-beta.3"),
    ]

    assert write_versions(path, versions) == Ok(None)
    assert json.loads(path.read_text(encoding="utf-8")) == [
        {"project": "first-app", "version": "1.0.1-beta.1", "tag": "first-app/1.0.1-beta.1"},
        {"version": "1.0.0-beta.3", "tag": "1.0.0-beta.3"},
    ]
    assert '\n  {\n    "project"' in path.read_text(encoding="utf-8")

    assert discard_versions(path) == Ok(True)
    assert not path.exists()
    assert discard_versions(path) == Ok(False)
    assert discard_versions(None) == Ok(False)
