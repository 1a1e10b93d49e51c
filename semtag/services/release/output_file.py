from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path

from semtag.core.result import Err, Ok, Result
from semtag.platform.files import atomic_write_text, remove_file
from semtag.services.release.errors import ReleaseError
from semtag.services.release.model import VersionResult


def render_versions(versions: Sequence[VersionResult]) -> str:
    return json.dumps([v.to_dict() for v in versions], indent=2)


def write_versions(path: Path, versions: Sequence[VersionResult]) -> Result[None, ReleaseError]:
    """Persist the computed versions as a JSON array of `{project?, version, tag}`."""
    try:
        atomic_write_text(path, render_versions(versions))
    except OSError as e:
        return Err(
            ReleaseError(
                kind="io_failed",
                message=f"failed to write output file {path}: {e}",
            )
        )
    return Ok(None)


def discard_versions(path: Path | None) -> Result[bool, ReleaseError]:
    """Remove a previously written output file, if any."""
    if path is None:
        return Ok(False)
    try:
        return Ok(remove_file(path))
    except OSError as e:
        return Err(
            ReleaseError(
                kind="io_failed",
                message=f"failed to remove output file {path}: {e}",
            )
        )
