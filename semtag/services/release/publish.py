"""Release publishing.

Turns computed versions into git state: manifest bump, chore commit and one
tag per version. Nothing is rolled back: when a later push fails, the tags
already pushed stay on the remote.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Protocol

from semtag.core.result import Err, Ok, Result
from semtag.git.repository import GitError
from semtag.output.console import ConsoleProtocol
from semtag.services.release.errors import ReleaseError
from semtag.services.release.manifest import MANIFEST_FILE, project_manifest_paths, write_version
from semtag.services.release.model import (
    Published,
    PublishOutcome,
    ReleaseContext,
    ReleaseOptions,
    SkippedStaleBranch,
    VersionResult,
)
from semtag.services.release.output_file import discard_versions

STALE_BRANCH_WARNING = (
    "The local branch is behind the remote one, therefore a new version won't be published."
)

BOT_NAME = "semtag-bot"
BOT_EMAIL = "semtag-bot@users.noreply.github.com"
BOT_AUTHOR_ENV: Mapping[str, str] = {
    "GIT_AUTHOR_NAME": BOT_NAME,
    "GIT_AUTHOR_EMAIL": BOT_EMAIL,
    "GIT_COMMITTER_NAME": BOT_NAME,
    "GIT_COMMITTER_EMAIL": BOT_EMAIL,
    # Never prompt for credentials in CI.
    "GIT_TERMINAL_PROMPT": "0",
}


class PublishRepository(Protocol):
    def local_head_sha(self) -> Result[str, GitError]: ...

    def remote_head_sha(self, branch: str) -> Result[str | None, GitError]: ...

    def commit_paths(
        self,
        paths: Sequence[Path],
        message: str,
        *,
        author_env: Mapping[str, str] | None = None,
    ) -> Result[None, GitError]: ...

    def push(self, refspec: str) -> Result[None, GitError]: ...

    def create_tag(self, name: str, target: str = "HEAD") -> Result[None, GitError]: ...


def release_commit_message(tag: str) -> str:
    return f"chore(release): {tag}\n\n[skip ci]"


def _git_failed(e: GitError, what: str) -> ReleaseError:
    return ReleaseError(kind="git_failed", message=f"{what}: {e.message}")


def root_version(versions: Sequence[VersionResult]) -> VersionResult | None:
    for v in versions:
        if v.project is None:
            return v
    return None


def is_branch_up_to_date(repo: PublishRepository, branch: str) -> Result[bool, ReleaseError]:
    """Compare local HEAD with the live tip of the remote branch.

    A branch the remote does not know counts as not up to date.
    """
    local = repo.local_head_sha()
    if isinstance(local, Err):
        return Err(_git_failed(local.error, "failed to read local HEAD"))
    remote = repo.remote_head_sha(branch)
    if isinstance(remote, Err):
        return Err(_git_failed(remote.error, f"failed to read remote tip of {branch}"))
    return Ok(remote.value is not None and remote.value == local.value)


def update_manifests(
    root: Path,
    versions: Sequence[VersionResult],
    main: VersionResult,
) -> Result[list[Path], ReleaseError]:
    """Write versions into existing manifests; return the rewritten paths."""
    targets: list[tuple[Path, str]] = []
    root_manifest = root / MANIFEST_FILE
    if root_manifest.is_file():
        targets.append((root_manifest, main.version))
    for v in versions:
        if v.project is None:
            continue
        targets.extend((p, v.version) for p in project_manifest_paths(root, v.project))

    written: list[Path] = []
    for path, version in targets:
        ok = write_version(path, version)
        if isinstance(ok, Err):
            return ok
        written.append(path)
    return Ok(written)


def _tracked(root: Path, paths: Sequence[Path]) -> list[Path]:
    # Build output under dist/ is usually ignored by git.
    return [p for p in paths if p.relative_to(root).parts[:1] != ("dist",)]


def release(
    ctx: ReleaseContext,
    versions: Sequence[VersionResult],
    options: ReleaseOptions,
    *,
    repo: PublishRepository,
    root: Path,
    console: ConsoleProtocol,
) -> Result[PublishOutcome, ReleaseError]:
    """Publish computed versions as commit and tags."""
    main = root_version(versions)
    if main is None:
        return Err(ReleaseError(kind="invalid_input", message="no root version to publish"))

    up_to_date = is_branch_up_to_date(repo, ctx.current_branch)
    if isinstance(up_to_date, Err):
        return up_to_date
    if not up_to_date.value:
        console.warning(STALE_BRANCH_WARNING)
        discarded = discard_versions(options.output_file)
        if isinstance(discarded, Err):
            return discarded
        return Ok(SkippedStaleBranch())

    console.debug("Start with bump...")

    written: list[Path] = []
    if not options.skip_manifest_update:
        updated = update_manifests(root, versions, main)
        if isinstance(updated, Err):
            return updated
        written = updated.value
        for path in written:
            console.debug(f"{path.relative_to(root)} was updated")

    committed = False
    to_commit = _tracked(root, written)
    if to_commit and not options.skip_chore_commit:
        ok = repo.commit_paths(to_commit, release_commit_message(main.tag), author_env=BOT_AUTHOR_ENV)
        if isinstance(ok, Err):
            return Err(_git_failed(ok.error, "failed to create the release commit"))
        pushed = repo.push(f"HEAD:refs/heads/{ctx.current_branch}")
        if isinstance(pushed, Err):
            return Err(_git_failed(pushed.error, "failed to push the release commit"))
        committed = True

    # One tag at a time, each pushed before the next is created.
    for v in versions:
        created = repo.create_tag(v.tag, "HEAD")
        if isinstance(created, Err):
            return Err(_git_failed(created.error, f"failed to create tag {v.tag}"))
        pushed = repo.push(f"refs/tags/{v.tag}")
        if isinstance(pushed, Err):
            return Err(_git_failed(pushed.error, f"failed to push tag {v.tag}"))
        console.debug(f"tag {v.tag} pushed")

    return Ok(Published(versions=tuple(versions), committed=committed))
