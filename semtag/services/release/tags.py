"""Version tag queries.

Tags are read, never written, here. All orderings are by semver precedence
(prerelease included), newest first; creation order is not used.

Which tags a query sees:

- the current version on rc and stable comes from tags reachable from HEAD
  (the release branch's own history); on beta from the whole repository.
- the last finished release always comes from the whole repository, so a
  new release branch starts after releases tagged on earlier ones.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Protocol

from semtag.core.result import Err, Ok, Result
from semtag.git.repository import GitError
from semtag.services.release.errors import ReleaseError
from semtag.services.release.model import Channel
from semtag.services.release.semver import VersionTag, parse_tag

TagFilter = Callable[[VersionTag], bool]


class TagSource(Protocol):
    def all_tags(self) -> Result[list[str], GitError]: ...

    def merged_tags(self, ref: str = "HEAD") -> Result[list[str], GitError]: ...


def filter_tags(
    names: Iterable[str],
    *,
    tag_prefix: str = "",
    predicate: TagFilter | None = None,
) -> list[VersionTag]:
    """Parse, filter and sort tag names newest-first.

    Names that do not start with tag_prefix, or are not semver once the
    prefix is stripped, are dropped.
    """
    parsed: list[VersionTag] = []
    for name in names:
        tag = parse_tag(name, tag_prefix)
        if tag is None:
            continue
        if predicate is not None and not predicate(tag):
            continue
        parsed.append(tag)
    return sorted(parsed, key=lambda t: t.version, reverse=True)


def _on_channel(channel: str) -> TagFilter:
    return lambda t: t.channel == channel


def _release_branch_tag(t: VersionTag) -> bool:
    return t.is_release or t.channel == "rc"


def _not_beta(t: VersionTag) -> bool:
    return t.channel != "beta"


def _is_release(t: VersionTag) -> bool:
    return t.is_release


class TagRepository:
    """Channel-aware queries over the version tags of a repository."""

    def __init__(self, source: TagSource) -> None:
        self._source = source

    def all_tags(self, *, tag_prefix: str = "") -> Result[list[VersionTag], ReleaseError]:
        """Every version tag of the repository."""
        return self._query(branch_only=False, tag_prefix=tag_prefix, predicate=None)

    def branch_tags(self, *, tag_prefix: str = "") -> Result[list[VersionTag], ReleaseError]:
        """Version tags reachable from HEAD."""
        return self._query(branch_only=True, tag_prefix=tag_prefix, predicate=None)

    def last_tag(
        self,
        channel: Channel,
        *,
        tag_prefix: str = "",
        ignore_branch: bool = False,
    ) -> Result[VersionTag | None, ReleaseError]:
        """The current version on a channel.

        beta and rc: newest tag whose prerelease identifier is the channel.
        stable: newest rc or release tag, so a fresh stable branch still
        sees the rc it is about to promote.

        Args:
            ignore_branch: Look at the whole repository even on rc/stable.
        """
        if channel == "stable":
            predicate: TagFilter = _release_branch_tag
        else:
            predicate = _on_channel(channel)
        branch_only = channel != "beta" and not ignore_branch
        return self._first(branch_only=branch_only, tag_prefix=tag_prefix, predicate=predicate)

    def last_release_tag(
        self,
        channel: Channel,
        *,
        tag_prefix: str = "",
    ) -> Result[VersionTag | None, ReleaseError]:
        """The last finished release, baseline of the increment.

        beta: newest tag that is not a beta (an rc counts as shipped).
        rc/stable: newest tag without prerelease.
        """
        predicate = _not_beta if channel == "beta" else _is_release
        return self._first(branch_only=False, tag_prefix=tag_prefix, predicate=predicate)

    def _first(
        self,
        *,
        branch_only: bool,
        tag_prefix: str,
        predicate: TagFilter,
    ) -> Result[VersionTag | None, ReleaseError]:
        tags = self._query(branch_only=branch_only, tag_prefix=tag_prefix, predicate=predicate)
        if isinstance(tags, Err):
            return tags
        return Ok(tags.value[0] if tags.value else None)

    def _query(
        self,
        *,
        branch_only: bool,
        tag_prefix: str,
        predicate: TagFilter | None,
    ) -> Result[list[VersionTag], ReleaseError]:
        names = self._source.merged_tags() if branch_only else self._source.all_tags()
        if isinstance(names, Err):
            return Err(
                ReleaseError(
                    kind="git_failed",
                    message=f"failed to list tags: {names.error.message}",
                )
            )
        return Ok(filter_tags(names.value, tag_prefix=tag_prefix, predicate=predicate))
