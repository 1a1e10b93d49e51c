"""Repository root detection and paths.

The workspace is the root of the git repository being released. Tags,
`.semver.json` and the root `package.json` are all resolved against it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .config import CONFIG_FILE
from .result import Err, Ok, Result

__all__ = [
    "Workspace",
    "WorkspaceError",
    "detect_workspace",
    "find_workspace_upward",
    "is_workspace_root",
]


@dataclass(frozen=True)
class WorkspaceError:
    """Error when the repository root cannot be detected."""

    message: str
    searched_from: Path | None = None


@dataclass(frozen=True, slots=True)
class Workspace:
    """A git repository root.

    The root contains:
    - .git (directory, or file for worktrees/submodules)
    - .semver.json (optional)
    - package.json (optional root manifest)
    """

    root: Path

    @property
    def config_path(self) -> Path:
        """Path to .semver.json."""
        return self.root / CONFIG_FILE

    @property
    def manifest_path(self) -> Path:
        """Path to the root package.json."""
        return self.root / "package.json"

    def __str__(self) -> str:
        return str(self.root)


def is_workspace_root(path: Path) -> bool:
    """Check if a path is a git repository root."""
    return (path / ".git").exists()


def find_workspace_upward(start: Path) -> Path | None:
    """Search upward from start for a repository root."""
    for parent in (start, *start.parents):
        if is_workspace_root(parent):
            return parent
    return None


def detect_workspace(
    *,
    start_dir: Path | None = None,
    env_var: str = "SEMTAG_ROOT",
) -> Result[Workspace, WorkspaceError]:
    """Detect the repository root.

    Detection order:
    1. SEMTAG_ROOT environment variable (if set and valid)
    2. Search upward from start_dir (or cwd) for a `.git` entry
    """
    env_value = os.environ.get(env_var)
    if env_value:
        env_path = Path(env_value).expanduser().resolve()
        if env_path.is_dir() and is_workspace_root(env_path):
            return Ok(Workspace(root=env_path))
        return Err(
            WorkspaceError(
                message=f"${env_var} is set to '{env_value}' but it is not a git repository",
                searched_from=env_path if env_path.is_dir() else None,
            )
        )

    search_start = (start_dir or Path.cwd()).resolve()
    found = find_workspace_upward(search_start)
    if found is None:
        return Err(
            WorkspaceError(
                message="Could not find a git repository (.git not found)",
                searched_from=search_start,
            )
        )
    return Ok(Workspace(root=found))
