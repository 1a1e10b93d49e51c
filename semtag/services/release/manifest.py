"""JSON manifest store (`package.json`).

Only the `version` field is touched; every other key is written back as read,
in the same order.
"""

from __future__ import annotations

import json
from pathlib import Path

from semtag.core.result import Err, Ok, Result
from semtag.core.structured import StrDict, as_str_dict, get_str
from semtag.platform.files import atomic_write_text
from semtag.services.release.errors import ReleaseError

MANIFEST_FILE = "package.json"

_PROJECT_DIRS = ("packages", "libs")


def _load(path: Path) -> Result[StrDict, ReleaseError]:
    try:
        data: object = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        return Err(ReleaseError(kind="io_failed", message=f"failed to read {path}: {e}"))
    except json.JSONDecodeError as e:
        return Err(ReleaseError(kind="io_failed", message=f"invalid JSON in {path}: {e}"))

    obj = as_str_dict(data)
    if obj is None:
        return Err(ReleaseError(kind="io_failed", message=f"{path} is not a JSON object"))
    return Ok(obj)


def read_version(path: Path) -> Result[str | None, ReleaseError]:
    """The manifest's `version`, or None when it has none."""
    obj = _load(path)
    if isinstance(obj, Err):
        return obj
    return Ok(get_str(obj.value, "version"))


def write_version(path: Path, version: str) -> Result[None, ReleaseError]:
    """Set `version` in the manifest at path (2-space indent)."""
    obj = _load(path)
    if isinstance(obj, Err):
        return obj

    data = obj.value
    data["version"] = version
    try:
        atomic_write_text(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")
    except OSError as e:
        return Err(ReleaseError(kind="io_failed", message=f"failed to write {path}: {e}"))
    return Ok(None)


def project_manifest_paths(root: Path, project: str) -> list[Path]:
    """Existing manifests of an nx project: its source one, then its build output."""
    found: list[Path] = []
    for base in (root, root / "dist"):
        for folder in _PROJECT_DIRS:
            candidate = base / folder / project / MANIFEST_FILE
            if candidate.is_file():
                found.append(candidate)
                break
    return found
