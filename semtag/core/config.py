"""Typed configuration loading and access.

The configuration lives in `.semver.json` at the repository root. Every
field is optional: missing or `null` values fall back to the defaults below,
while explicit `false` or `[]` values are kept as given.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_str_list

__all__ = [
    "CONFIG_FILE",
    "ConfigError",
    "SemtagConfig",
    "load_config",
]

CONFIG_FILE = ".semver.json"

DEFAULT_BETA_BRANCH = "main"
DEFAULT_RELEASE_BRANCH = "releases/*"
DEFAULT_COMMIT_MESSAGE_FORMAT = "angular"
DEFAULT_COMMIT_TYPES_TO_IGNORE: tuple[str, ...] = ("ci", "repo", "docs", "test", "chore")


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class SemtagConfig:
    """Release configuration, read once per invocation.

    Attributes:
        beta_branch_name: Exact name of the branch producing beta builds.
        release_branch_name: Glob (or regex) matching release branches.
        release_candidate: Whether release branches currently produce `rc`
            builds (`True`) or final `stable` builds (`False`).
        commit_types_to_ignore: Commit types excluded from bump analysis.
        commit_message_format: Commit convention used by the analyzer.
    """

    beta_branch_name: str = DEFAULT_BETA_BRANCH
    release_branch_name: str = DEFAULT_RELEASE_BRANCH
    release_candidate: bool = True
    commit_types_to_ignore: tuple[str, ...] = DEFAULT_COMMIT_TYPES_TO_IGNORE
    commit_message_format: str = DEFAULT_COMMIT_MESSAGE_FORMAT

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> SemtagConfig:
        """Create a config from parsed JSON, merged over the defaults.

        Raises:
            ValueError: if a present, non-null field has the wrong type.
        """
        _check_type(data, "betaBranchName", str)
        _check_type(data, "releaseBranchName", str)
        _check_type(data, "releaseCandidate", bool)
        _check_type(data, "commitTypesToIgnore", list)
        _check_type(data, "commitMessageFormat", str)

        ignored = get_str_list(data, "commitTypesToIgnore")
        if data.get("commitTypesToIgnore") is not None and ignored is None:
            raise ValueError("commitTypesToIgnore must be a list of strings")

        release_candidate = get_bool(data, "releaseCandidate")

        return cls(
            beta_branch_name=_str_or(data, "betaBranchName", DEFAULT_BETA_BRANCH),
            release_branch_name=_str_or(data, "releaseBranchName", DEFAULT_RELEASE_BRANCH),
            release_candidate=True if release_candidate is None else release_candidate,
            commit_types_to_ignore=DEFAULT_COMMIT_TYPES_TO_IGNORE if ignored is None else ignored,
            commit_message_format=_str_or(
                data, "commitMessageFormat", DEFAULT_COMMIT_MESSAGE_FORMAT
            ),
        )

    def to_dict(self) -> StrDict:
        """Serialize using the on-disk (camelCase) field names."""
        return {
            "betaBranchName": self.beta_branch_name,
            "releaseBranchName": self.release_branch_name,
            "releaseCandidate": self.release_candidate,
            "commitTypesToIgnore": list(self.commit_types_to_ignore),
            "commitMessageFormat": self.commit_message_format,
        }


def _check_type(data: Mapping[str, object], key: str, expected: type) -> None:
    value = data.get(key)
    if value is None:
        return
    if not isinstance(value, expected):
        raise ValueError(f"{key} must be of type {expected.__name__}")


def _str_or(data: Mapping[str, object], key: str, default: str) -> str:
    value = data.get(key)
    return default if value is None else str(value)


def _parse_json(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a JSON file, handling read and decode errors."""
    try:
        data_obj: object = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except json.JSONDecodeError as e:
        return Err(ConfigError(f"Invalid JSON syntax: {e}", path=path))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a JSON object", path=path))
    return Ok(data)


def load_config(path: Path) -> Result[SemtagConfig, ConfigError]:
    """Load and parse configuration from a JSON file.

    A missing file is not an error: the defaults apply.

    Args:
        path: Path to `.semver.json`

    Returns:
        Ok(SemtagConfig) on success, Err(ConfigError) on failure
    """
    if not path.exists():
        return Ok(SemtagConfig())

    result = _parse_json(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(SemtagConfig.from_dict(result.value))
    except ValueError as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))
