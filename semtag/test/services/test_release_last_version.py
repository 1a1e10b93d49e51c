from __future__ import annotations

from dataclasses import dataclass, field

from semtag.core.config import SemtagConfig
from semtag.core.result import Ok, Result
from semtag.git.repository import GitError
from semtag.output.console import MockConsole
from semtag.services.release.ci import CiEnvironment
from semtag.services.release.errors import ReleaseError
from semtag.services.release.last_version import last_version
from semtag.services.release.model import (
    Channel,
    LastVersionOptions,
    ProjectType,
    ReleaseContext,
    VersionResult,
)
from semtag.services.release.tags import TagRepository


@dataclass
class FakeTagSource:
    tags: list[str] = field(default_factory=list)
    merged: list[str] = field(default_factory=list)

    def all_tags(self) -> Result[list[str], GitError]:
        return Ok(list(self.tags))

    def merged_tags(self, ref: str = "HEAD") -> Result[list[str], GitError]:
        return Ok(list(self.merged))


@dataclass
class FakeProjectGraph:
    projects: list[str]

    def affected_projects(
        self,
        base: str | None = None,
        project_type: ProjectType = "all",
    ) -> Result[list[str], ReleaseError]:
        assert base is None
        return Ok(list(self.projects))


def _ctx(channel: Channel) -> ReleaseContext:
    return ReleaseContext(
        config=SemtagConfig(),
        channel=channel,
        current_branch="releases/1.0" if channel != "beta" else "main",
        ci=CiEnvironment(),
    )


def test_last_version_of_current_channel() -> None:
    tags = TagRepository(FakeTagSource(tags=["1.0.0-rc.1", "2.0.0-rc.1"], merged=["1.0.0-rc.1"]))
    result = last_version(_ctx("rc"), LastVersionOptions(), tags=tags, console=MockConsole())
    assert result == Ok((VersionResult(version="1.0.0-rc.1", tag="1.0.0-rc.1"),))


def test_explicit_channel_reads_whole_repository() -> None:
    tags = TagRepository(FakeTagSource(tags=["1.0.0-rc.1", "2.0.0-rc.1"], merged=["1.0.0-rc.1"]))
    result = last_version(
        _ctx("beta"), LastVersionOptions(channel="rc"), tags=tags, console=MockConsole()
    )
    assert result == Ok((VersionResult(version="2.0.0-rc.1", tag="2.0.0-rc.1"),))


def test_nothing_found() -> None:
    result = last_version(
        _ctx("beta"), LastVersionOptions(), tags=TagRepository(FakeTagSource()), console=MockConsole()
    )
    assert result == Ok(())


def test_nx_projects_before_root() -> None:
    tags = TagRepository(FakeTagSource(tags=["1.0.0-beta.2", "app/0.3.0-beta.1", "lib/1.0.0"]))
    result = last_version(
        _ctx("beta"),
        LastVersionOptions(workspace="nx"),
        tags=tags,
        console=MockConsole(),
        projects=FakeProjectGraph(["app", "lib"]),
    )
    assert result == Ok(
        (
            VersionResult(version="0.3.0-beta.1", tag="app/0.3.0-beta.1", project="app"),
            VersionResult(version="1.0.0-beta.2", tag="1.0.0-beta.2"),
        )
    )
