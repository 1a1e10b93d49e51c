"""Commit history analysis.

Reads commit messages since the last tag and recommends a bump level with
the angular rule: any breaking change is a major, any `feat` a minor,
anything else a patch. Commits whose type is ignored by configuration do not
count; a message that is not a conventional commit counts as a patch.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from semtag.core.result import Err, Ok, Result
from semtag.git.repository import GitError, RawCommit
from semtag.output.console import ConsoleProtocol
from semtag.services.release.errors import ReleaseError
from semtag.services.release.model import BumpLevel, BumpRecommendation

MESSAGE_FORMATS = ("angular", "conventionalcommits")

_ANGULAR_HEADER_RE = re.compile(r"^(?P<type>\w*)(?:\((?P<scope>.*)\))?: (?P<subject>.*)$")
_CONVENTIONAL_HEADER_RE = re.compile(
    r"^(?P<type>\w*)(?:\((?P<scope>.*)\))?(?P<breaking>!)?: (?P<subject>.*)$"
)
_BREAKING_RE = re.compile(r"^BREAKING[ -]CHANGE:", re.MULTILINE)


class CommitSource(Protocol):
    def commit_messages(
        self,
        *,
        since: str | None = None,
        path: str | None = None,
    ) -> Result[list[RawCommit], GitError]: ...


class CommitAnalyzer(Protocol):
    def recommend_bump(
        self,
        *,
        since_tag: str | None,
        path: str | None,
        ignored_types: Sequence[str],
        message_format: str,
    ) -> Result[BumpRecommendation | None, ReleaseError]: ...


@dataclass(frozen=True, slots=True)
class ParsedCommit:
    sha: str
    type: str | None
    scope: str | None
    subject: str
    breaking: bool


def parse_commit(commit: RawCommit, message_format: str = "angular") -> ParsedCommit:
    header, _, body = commit.message.partition("\n")
    header = header.strip()
    pattern = _CONVENTIONAL_HEADER_RE if message_format == "conventionalcommits" else _ANGULAR_HEADER_RE

    m = pattern.match(header)
    if m is None:
        return ParsedCommit(
            sha=commit.sha,
            type=None,
            scope=None,
            subject=header,
            breaking=_BREAKING_RE.search(body) is not None,
        )

    bang = bool(m.groupdict().get("breaking"))
    return ParsedCommit(
        sha=commit.sha,
        type=m.group("type") or None,
        scope=m.group("scope"),
        subject=m.group("subject"),
        breaking=bang or _BREAKING_RE.search(body) is not None,
    )


def what_bump(commits: Sequence[ParsedCommit]) -> BumpRecommendation:
    breakings = sum(1 for c in commits if c.breaking)
    features = sum(1 for c in commits if c.type == "feat")

    level: BumpLevel = "patch"
    if breakings > 0:
        level = "major"
    elif features > 0:
        level = "minor"

    are = "is" if breakings == 1 else "are"
    plural = "" if breakings == 1 else "S"
    reason = f"There {are} {breakings} BREAKING CHANGE{plural} and {features} features"
    return BumpRecommendation(level=level, reason=reason)


class ConventionalCommitAnalyzer:
    """CommitAnalyzer over a repository's `git log`."""

    def __init__(self, source: CommitSource, console: ConsoleProtocol) -> None:
        self._source = source
        self._console = console

    def recommend_bump(
        self,
        *,
        since_tag: str | None,
        path: str | None,
        ignored_types: Sequence[str],
        message_format: str,
    ) -> Result[BumpRecommendation | None, ReleaseError]:
        if message_format not in MESSAGE_FORMATS:
            return Err(
                ReleaseError(
                    kind="invalid_config",
                    message=f"unsupported commit message format: {message_format}",
                    hint=f"use one of: {', '.join(MESSAGE_FORMATS)}",
                )
            )

        self._console.debug(f"get commits since {since_tag or 'the first commit'}")
        raw = self._source.commit_messages(since=since_tag, path=path)
        if isinstance(raw, Err):
            return Err(
                ReleaseError(
                    kind="git_failed",
                    message=f"failed to read commit history: {raw.error.message}",
                )
            )

        commits = [parse_commit(c, message_format) for c in raw.value]
        ignored = set(ignored_types)
        relevant = [c for c in commits if c.type is None or c.type not in ignored]

        if not relevant:
            self._warn_no_commits(has_irrelevant=bool(commits), path=path)
            return Ok(None)
        return Ok(what_bump(relevant))

    def _warn_no_commits(self, *, has_irrelevant: bool, path: str | None) -> None:
        where = f' in "{path}"' if path else ""
        if has_irrelevant:
            self._console.warning(f"No relevant commits{where} since last release")
        else:
            self._console.warning(f"No commits{where} since last release")
