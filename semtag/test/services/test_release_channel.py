from __future__ import annotations

import pytest

from semtag.core.config import SemtagConfig
from semtag.core.result import Err, Ok
from semtag.services.release.channel import is_release_branch, resolve_channel


def test_beta_branch() -> None:
    assert resolve_channel("main", SemtagConfig()) == Ok("beta")


@pytest.mark.parametrize("branch", ["releases/1.0", "releases/mars"])
def test_release_branch_is_rc_by_default(branch: str) -> None:
    assert resolve_channel(branch, SemtagConfig()) == Ok("rc")


def test_release_branch_is_stable_without_release_candidate() -> None:
    config = SemtagConfig(release_candidate=False)
    assert resolve_channel("releases/1.0", config) == Ok("stable")


@pytest.mark.parametrize("branch", ["release/snickers", "release", "feature/login"])
def test_unknown_branch(branch: str) -> None:
    result = resolve_channel(branch, SemtagConfig())
    assert isinstance(result, Err)
    assert result.error.kind == "unrecognized_branch"
    assert ".semver.json" in (result.error.hint or "")


def test_custom_branch_names() -> None:
    config = SemtagConfig(beta_branch_name="develop", release_branch_name="release-*")
    assert resolve_channel("develop", config) == Ok("beta")
    assert resolve_channel("release-2024.1", config) == Ok("rc")
    assert isinstance(resolve_channel("main", config), Err)


def test_exact_release_branch_name() -> None:
    config = SemtagConfig(release_branch_name="production")
    assert is_release_branch("production", config)


def test_regex_release_branch_name() -> None:
    config = SemtagConfig(release_branch_name=r"^rel/\d+\.\d+$")
    assert is_release_branch("rel/1.2", config)
    assert not is_release_branch("rel/next", config)


def test_invalid_regex_does_not_match() -> None:
    config = SemtagConfig(release_branch_name="releases/[")
    assert not is_release_branch("releases/1.0", config)


def test_resolution_is_pure() -> None:
    config = SemtagConfig()
    assert resolve_channel("releases/1.0", config) == resolve_channel("releases/1.0", config)


def test_empty_release_pattern_matches_no_branch() -> None:
    config = SemtagConfig(release_branch_name="")
    assert is_release_branch("releases/1.0", config) is False
    assert resolve_channel("main", config) == Ok("beta")
