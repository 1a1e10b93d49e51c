from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from semtag.core.config import SemtagConfig
from semtag.core.structured import StrDict
from semtag.services.release.ci import CiEnvironment

Channel = Literal["beta", "rc", "stable"]
BumpLevel = Literal["major", "minor", "patch"]
ProjectType = Literal["all", "app", "lib"]
WorkspaceType = Literal["nx"]

CHANNELS: tuple[Channel, ...] = ("beta", "rc", "stable")
BUMP_LEVELS: tuple[BumpLevel, ...] = ("major", "minor", "patch")


@dataclass(frozen=True, slots=True)
class VersionResult:
    """A computed version for the root project (project=None) or a sub-project."""

    version: str  # bare semver
    tag: str  # version with prefix
    project: str | None = None

    def to_dict(self) -> StrDict:
        out: StrDict = {}
        if self.project is not None:
            out["project"] = self.project
        out["version"] = self.version
        out["tag"] = self.tag
        return out


@dataclass(frozen=True, slots=True)
class BumpRecommendation:
    level: BumpLevel
    reason: str | None = None


@dataclass(frozen=True, slots=True)
class ReleaseContext:
    """Explicit inputs of one invocation.

    The branch and CI environment are read once by the caller and threaded
    through, so the resolver and the gates stay pure.
    """

    config: SemtagConfig
    channel: Channel
    current_branch: str
    ci: CiEnvironment

    def to_dict(self) -> StrDict:
        return {
            "config": self.config.to_dict(),
            "channel": self.channel,
            "currentBranch": self.current_branch,
        }


@dataclass(frozen=True, slots=True)
class NextVersionOptions:
    tag_prefix: str = ""
    path: str | None = None
    bump: BumpLevel | None = None
    workspace: WorkspaceType | None = None
    project_type: ProjectType = "all"
    output_file: Path | None = None


@dataclass(frozen=True, slots=True)
class LastVersionOptions:
    # None: use the channel of the current branch, restricted to its history.
    channel: Channel | None = None
    workspace: WorkspaceType | None = None
    project_type: ProjectType = "all"
    output_file: Path | None = None


@dataclass(frozen=True, slots=True)
class ReleaseOptions:
    skip_chore_commit: bool = False
    skip_manifest_update: bool = False
    output_file: Path | None = None


# Orchestrator outcomes


@dataclass(frozen=True, slots=True)
class Computed:
    versions: tuple[VersionResult, ...]


@dataclass(frozen=True, slots=True)
class SkippedPullRequest:
    pass


@dataclass(frozen=True, slots=True)
class SkippedNoCommits:
    pass


NextVersionOutcome = Computed | SkippedPullRequest | SkippedNoCommits


# Publisher outcomes


@dataclass(frozen=True, slots=True)
class Published:
    versions: tuple[VersionResult, ...]
    committed: bool


@dataclass(frozen=True, slots=True)
class SkippedStaleBranch:
    pass


PublishOutcome = Published | SkippedStaleBranch
