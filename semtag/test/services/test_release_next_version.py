from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from semtag.core.config import SemtagConfig
from semtag.core.result import Err, Ok, Result
from semtag.git.repository import GitError
from semtag.output.console import MockConsole
from semtag.services.release.ci import CiEnvironment
from semtag.services.release.errors import ReleaseError
from semtag.services.release.model import (
    BumpRecommendation,
    Channel,
    Computed,
    NextVersionOptions,
    ProjectType,
    ReleaseContext,
    SkippedNoCommits,
    SkippedPullRequest,
    VersionResult,
)
from semtag.services.release.next_version import PULL_REQUEST_WARNING, next_version
from semtag.services.release.tags import TagRepository


@dataclass
class FakeTagSource:
    tags: list[str] = field(default_factory=list)
    merged: list[str] | None = None

    def all_tags(self) -> Result[list[str], GitError]:
        return Ok(list(self.tags))

    def merged_tags(self, ref: str = "HEAD") -> Result[list[str], GitError]:
        return Ok(list(self.tags if self.merged is None else self.merged))


@dataclass
class FakeAnalyzer:
    recommendation: BumpRecommendation | None = None
    calls: list[str | None] = field(default_factory=list)

    def recommend_bump(
        self,
        *,
        since_tag: str | None,
        path: str | None,
        ignored_types: Sequence[str],
        message_format: str,
    ) -> Result[BumpRecommendation | None, ReleaseError]:
        self.calls.append(since_tag)
        return Ok(self.recommendation)


@dataclass
class FakeProjectGraph:
    projects: list[str]
    calls: list[tuple[str | None, ProjectType]] = field(default_factory=list)

    def affected_projects(
        self,
        base: str | None = None,
        project_type: ProjectType = "all",
    ) -> Result[list[str], ReleaseError]:
        self.calls.append((base, project_type))
        return Ok(list(self.projects))


PATCH = BumpRecommendation(level="patch", reason="There are 0 BREAKING CHANGES and 0 features")
MINOR = BumpRecommendation(level="minor", reason="There are 0 BREAKING CHANGES and 1 features")


def _ctx(
    channel: Channel,
    *,
    branch: str = "main",
    release_candidate: bool = True,
    pull_request: bool = False,
) -> ReleaseContext:
    return ReleaseContext(
        config=SemtagConfig(release_candidate=release_candidate),
        channel=channel,
        current_branch=branch,
        ci=CiEnvironment(provider="github", is_pull_request=pull_request),
    )


def _versions(result: object) -> tuple[VersionResult, ...]:
    assert isinstance(result, Ok), result
    assert isinstance(result.value, Computed)
    return result.value.versions


def test_pull_request_is_gated() -> None:
    console = MockConsole()
    analyzer = FakeAnalyzer(PATCH)
    result = next_version(
        _ctx("beta", pull_request=True),
        NextVersionOptions(),
        tags=TagRepository(FakeTagSource(["1.0.0-beta.1"])),
        commits=analyzer,
        console=console,
    )
    assert result == Ok(SkippedPullRequest())
    assert console.find(PULL_REQUEST_WARNING)
    assert analyzer.calls == []


def test_first_rc_on_fresh_release_branch() -> None:
    result = next_version(
        _ctx("rc", branch="releases/1.0"),
        NextVersionOptions(),
        tags=TagRepository(FakeTagSource(tags=["0.9.0-beta.3"], merged=[])),
        commits=FakeAnalyzer(PATCH),
        console=MockConsole(),
    )
    assert _versions(result) == (VersionResult(version="1.0.0-rc.1", tag="1.0.0-rc.1"),)


def test_second_release_branch_starts_after_previous_release() -> None:
    result = next_version(
        _ctx("rc", branch="releases/1.1"),
        NextVersionOptions(),
        tags=TagRepository(
            FakeTagSource(
                tags=["1.0.0-rc.1", "1.0.0", "1.1.0-beta.1"],
                merged=["1.1.0-beta.1"],
            )
        ),
        commits=FakeAnalyzer(MINOR),
        console=MockConsole(),
    )
    assert _versions(result) == (VersionResult(version="1.1.0-rc.1", tag="1.1.0-rc.1"),)


def test_beta_iteration_uses_analyzer_bump() -> None:
    console = MockConsole()
    analyzer = FakeAnalyzer(MINOR)
    result = next_version(
        _ctx("beta"),
        NextVersionOptions(),
        tags=TagRepository(FakeTagSource(["1.0.0", "1.0.1-beta.2"])),
        commits=analyzer,
        console=console,
    )
    assert _versions(result) == (VersionResult(version="1.1.0-beta.1", tag="1.1.0-beta.1"),)
    assert analyzer.calls == ["1.0.1-beta.2"]
    assert console.find(MINOR.reason or "")


def test_no_relevant_commits_with_existing_version() -> None:
    result = next_version(
        _ctx("beta"),
        NextVersionOptions(),
        tags=TagRepository(FakeTagSource(["1.0.0-beta.1"])),
        commits=FakeAnalyzer(None),
        console=MockConsole(),
    )
    assert result == Ok(SkippedNoCommits())


def test_no_relevant_commits_without_version_still_releases() -> None:
    result = next_version(
        _ctx("beta"),
        NextVersionOptions(),
        tags=TagRepository(FakeTagSource([])),
        commits=FakeAnalyzer(None),
        console=MockConsole(),
    )
    assert _versions(result) == (VersionResult(version="1.0.0-beta.1", tag="1.0.0-beta.1"),)


def test_explicit_bump_skips_analyzer() -> None:
    analyzer = FakeAnalyzer(None)
    result = next_version(
        _ctx("beta"),
        NextVersionOptions(bump="major"),
        tags=TagRepository(FakeTagSource(["1.0.0", "1.0.1-beta.1"])),
        commits=analyzer,
        console=MockConsole(),
    )
    assert _versions(result)[-1].version == "2.0.0-beta.1"
    assert analyzer.calls == []


def test_tag_prefix_is_applied() -> None:
    analyzer = FakeAnalyzer(PATCH)
    result = next_version(
        _ctx("beta"),
        NextVersionOptions(tag_prefix="v"),
        tags=TagRepository(FakeTagSource(["v1.0.0-beta.4", "1.5.0-beta.1"])),
        commits=analyzer,
        console=MockConsole(),
    )
    assert _versions(result) == (VersionResult(version="1.0.0-beta.5", tag="v1.0.0-beta.5"),)
    assert analyzer.calls == ["v1.0.0-beta.4"]


def test_switching_to_stable_promotes_last_rc() -> None:
    analyzer = FakeAnalyzer(PATCH)
    result = next_version(
        _ctx("stable", branch="releases/1.0", release_candidate=False),
        NextVersionOptions(),
        tags=TagRepository(FakeTagSource(["1.0.0", "1.0.1-rc.1"])),
        commits=analyzer,
        console=MockConsole(),
    )
    assert _versions(result) == (VersionResult(version="1.0.1", tag="1.0.1"),)
    assert analyzer.calls == []


def test_hotfix_on_stable_branch() -> None:
    result = next_version(
        _ctx("stable", branch="releases/1.0", release_candidate=False),
        NextVersionOptions(),
        tags=TagRepository(FakeTagSource(["1.0.0-rc.2", "1.0.0"])),
        commits=FakeAnalyzer(PATCH),
        console=MockConsole(),
    )
    assert _versions(result) == (VersionResult(version="1.0.1", tag="1.0.1"),)


def test_feature_on_stable_branch_fails() -> None:
    result = next_version(
        _ctx("stable", branch="releases/1.0", release_candidate=False),
        NextVersionOptions(),
        tags=TagRepository(FakeTagSource(["1.0.0"])),
        commits=FakeAnalyzer(MINOR),
        console=MockConsole(),
    )
    assert isinstance(result, Err)
    assert result.error.kind == "disallowed_bump"


def test_nx_fan_out_appends_root_last(tmp_path: Path) -> None:
    graph = FakeProjectGraph(["first-app", "second-app", "lib"])
    output_file = tmp_path / "versions.json"
    result = next_version(
        _ctx("beta"),
        NextVersionOptions(workspace="nx", project_type="app", output_file=output_file),
        tags=TagRepository(
            FakeTagSource(["1.0.0-beta.2", "first-app/1.0.0", "second-app/2.1.0-beta.3"])
        ),
        commits=FakeAnalyzer(PATCH),
        console=MockConsole(),
        projects=graph,
    )

    assert _versions(result) == (
        VersionResult(version="1.0.1-beta.1", tag="first-app/1.0.1-beta.1", project="first-app"),
        VersionResult(version="2.1.0-beta.4", tag="second-app/2.1.0-beta.4", project="second-app"),
        VersionResult(version="1.0.0-beta.1", tag="lib/1.0.0-beta.1", project="lib"),
        VersionResult(version="1.0.0-beta.3", tag="1.0.0-beta.3"),
    )
    assert graph.calls == [("1.0.0-beta.2", "app")]
    assert json.loads(output_file.read_text(encoding="utf-8"))[-1] == {
        "version": "1.0.0-beta.3",
        "tag": "1.0.0-beta.3",
    }


def test_nx_without_graph_is_rejected() -> None:
    result = next_version(
        _ctx("beta"),
        NextVersionOptions(workspace="nx"),
        tags=TagRepository(FakeTagSource([])),
        commits=FakeAnalyzer(PATCH),
        console=MockConsole(),
    )
    assert isinstance(result, Err)
    assert result.error.kind == "invalid_input"
