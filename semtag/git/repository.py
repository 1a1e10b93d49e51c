"""Git repository abstraction.

This module provides the Repository class, the version-control adapter used
by the release services. Every operation that can fail returns a Result.

Usage:
    repo = Repository(Path("/path/to/repo"))

    match repo.current_branch():
        case Ok(branch):
            print(f"Branch: {branch}")
        case Err(e):
            print(f"Error: {e.message}")

    match repo.all_tags():
        case Ok(tags):
            print(", ".join(tags))
        case Err(e):
            print(f"git tag failed: {e.message}")
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from semtag.core.result import Err, Ok, Result
from semtag.platform.process import ProcessError
from semtag.platform.process import run as run_process

GIT_TIMEOUT_SECONDS = 30.0
GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0

_NETWORK_COMMANDS = frozenset({"push", "ls-remote"})
_VERSION_RE = re.compile(r"(\d+)\.(\d+)\.(\d+)")
_DECORATION_RE = re.compile(r"^(origin|upstream)/(?P<branch>.+)$")
# Separates `git log` records; cannot occur in commit messages.
_RECORD_SEP = "\x1e"

__all__ = [
    "GitError",
    "RawCommit",
    "Repository",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class RawCommit:
    """A commit as read from `git log`.

    Attributes:
        sha: Full commit hash
        message: Full message (subject, body and footers)
    """

    sha: str
    message: str


class Repository:
    """Git repository abstraction.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path, *, remote: str = "origin") -> None:
        """Initialize repository.

        Args:
            path: Path to repository root (containing .git)
            remote: Remote used for pushes and freshness checks
        """
        self.path = path
        self.remote = remote

    def exists(self) -> bool:
        """Check if this is a valid git repository."""
        return (self.path / ".git").exists()

    def version(self) -> Result[str, GitError]:
        """Return the installed git version as `MAJOR.MINOR.PATCH`."""
        result = self._run(["--version"])
        if isinstance(result, Err):
            return Err(self._error("--version", result.error, "git is not available"))
        match = _VERSION_RE.search(result.value)
        if match is None:
            return Err(
                GitError(command="--version", message=f"unexpected output: {result.value.strip()}")
            )
        return Ok(match.group(0))

    def current_branch(self) -> Result[str, GitError]:
        """Get the current branch name.

        On a detached HEAD (typical for CI checkouts) the branch is recovered
        from an `origin/<branch>` or `upstream/<branch>` decoration of HEAD.
        """
        result = self._run(["branch", "--show-current"])
        if isinstance(result, Err):
            return Err(self._error("branch --show-current", result.error, "git branch failed"))

        branch = result.value.strip()
        if branch:
            return Ok(branch)

        decorated = self._run(["show", "-s", "--pretty=%D", "HEAD"])
        if isinstance(decorated, Err):
            return Err(self._error("show", decorated.error, "git show failed"))

        for ref in decorated.value.strip().split(", "):
            ref = ref.strip()
            m = _DECORATION_RE.match(ref)
            if m is not None and m.group("branch") != "HEAD":
                return Ok(m.group("branch"))

        return Err(
            GitError(
                command="branch --show-current",
                message="current branch could not be determined",
            )
        )

    def is_detached_head(self) -> bool:
        """True if HEAD does not point at a branch."""
        result = self._run(["symbolic-ref", "-q", "HEAD"])
        return isinstance(result, Err)

    def all_tags(self) -> Result[list[str], GitError]:
        """All tags of the repository, in git's listing order."""
        return self._tags(["tag", "-l", "--no-color"])

    def merged_tags(self, ref: str = "HEAD") -> Result[list[str], GitError]:
        """Tags reachable from ref (the current branch's own history)."""
        return self._tags(["tag", "-l", "--no-color", "--merged", ref])

    def create_tag(self, name: str, target: str = "HEAD") -> Result[None, GitError]:
        result = self._run(["tag", name, target])
        if isinstance(result, Err):
            return Err(self._error("tag", result.error, f"failed to create tag {name}"))
        return Ok(None)

    def push(self, refspec: str) -> Result[None, GitError]:
        """Push one refspec to the remote, passed to git unchanged.

        `HEAD:refs/heads/<branch>` works from a detached HEAD too.
        """
        result = self._run(["push", self.remote, refspec])
        if isinstance(result, Err):
            return Err(self._error("push", result.error, "push failed"))
        return Ok(None)

    def local_head_sha(self) -> Result[str, GitError]:
        result = self._run(["rev-parse", "HEAD"])
        if isinstance(result, Err):
            return Err(self._error("rev-parse", result.error, "rev-parse HEAD failed"))
        return Ok(result.value.strip())

    def remote_head_sha(self, branch: str) -> Result[str | None, GitError]:
        """Tip of branch on the remote, read live with `git ls-remote`.

        Returns Ok(None) if the remote has no such branch.
        """
        result = self._run(["ls-remote", "--heads", self.remote, f"refs/heads/{branch}"])
        if isinstance(result, Err):
            return Err(self._error("ls-remote", result.error, "ls-remote failed"))
        for line in result.value.splitlines():
            parts = line.split()
            if len(parts) == 2 and parts[1] == f"refs/heads/{branch}":
                return Ok(parts[0])
        return Ok(None)

    def commit_paths(
        self,
        paths: Sequence[Path],
        message: str,
        *,
        author_env: Mapping[str, str] | None = None,
    ) -> Result[None, GitError]:
        """Stage paths and create one commit with message."""
        added = self._run(["add", "--", *(str(p) for p in paths)])
        if isinstance(added, Err):
            return Err(self._error("add", added.error, "git add failed"))

        committed = self._run(["commit", "-m", message], extra_env=author_env)
        if isinstance(committed, Err):
            return Err(self._error("commit", committed.error, "git commit failed"))
        return Ok(None)

    def commit_messages(
        self,
        *,
        since: str | None = None,
        path: str | None = None,
    ) -> Result[list[RawCommit], GitError]:
        """Commits in `since..HEAD` (or all of HEAD), newest first.

        Args:
            since: Exclusive starting ref (usually the last tag)
            path: Only commits touching this path
        """
        args = ["log", f"--format=%H%n%B{_RECORD_SEP}"]
        args.append(f"{since}..HEAD" if since else "HEAD")
        if path:
            args.extend(["--", path])

        result = self._run(args)
        if isinstance(result, Err):
            # A repository without commits has no HEAD yet.
            if "does not have any commits" in result.error.stderr:
                return Ok([])
            return Err(self._error("log", result.error, "git log failed"))

        commits: list[RawCommit] = []
        for record in result.value.split(_RECORD_SEP):
            record = record.strip("\n")
            if not record.strip():
                continue
            sha, _, message = record.partition("\n")
            commits.append(RawCommit(sha=sha.strip(), message=message.strip()))
        return Ok(commits)

    def _tags(self, args: list[str]) -> Result[list[str], GitError]:
        result = self._run(args)
        if isinstance(result, Err):
            return Err(self._error("tag", result.error, "git tag failed"))
        return Ok([line.strip() for line in result.value.splitlines() if line.strip()])

    def _run(
        self,
        args: list[str],
        *,
        extra_env: Mapping[str, str] | None = None,
    ) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        timeout = (
            GIT_NETWORK_TIMEOUT_SECONDS if command in _NETWORK_COMMANDS else GIT_TIMEOUT_SECONDS
        )
        return run_process(
            ["git", "-C", str(self.path), *args],
            cwd=self.path,
            extra_env=extra_env,
            timeout=timeout,
        )

    @staticmethod
    def _error(command: str, e: ProcessError, fallback: str) -> GitError:
        return GitError(
            command=command,
            message=e.stderr.strip() or e.stdout.strip() or fallback,
            returncode=e.returncode,
        )
