"""Next-version orchestration.

Computes the pending version of the repository and, for nx workspaces, of
every affected project. Nothing is written to git here; see `publish`.
"""

from __future__ import annotations

from dataclasses import dataclass

from semtag.core.result import Err, Ok, Result
from semtag.output.console import ConsoleProtocol
from semtag.services.release.commits import CommitAnalyzer
from semtag.services.release.errors import ReleaseError
from semtag.services.release.model import (
    BumpLevel,
    Computed,
    NextVersionOptions,
    NextVersionOutcome,
    ReleaseContext,
    SkippedNoCommits,
    SkippedPullRequest,
    VersionResult,
)
from semtag.services.release.output_file import write_versions
from semtag.services.release.planner import increment
from semtag.services.release.projects import ProjectGraph
from semtag.services.release.semver import VersionTag
from semtag.services.release.tags import TagRepository

PULL_REQUEST_WARNING = (
    "This run was triggered by a pull request and therefore a new version won't be published."
)
NO_COMMITS_WARNING = "No relevant commits since last release"


@dataclass(frozen=True, slots=True)
class ScopePlan:
    """Everything needed to increment one tag-prefix scope."""

    tag_prefix: str
    last_tag: VersionTag | None
    last_release_tag: VersionTag | None
    bump: BumpLevel
    is_switching_to_stable: bool
    reason: str | None = None

    def compute(self, ctx: ReleaseContext, project: str | None = None) -> Result[VersionResult, ReleaseError]:
        version = increment(
            _bare(self.last_tag),
            _bare(self.last_release_tag),
            self.bump,
            ctx.channel,
            self.is_switching_to_stable,
        )
        if isinstance(version, Err):
            return version
        return Ok(
            VersionResult(
                version=version.value,
                tag=f"{self.tag_prefix}{version.value}",
                project=project,
            )
        )


def _bare(tag: VersionTag | None) -> str | None:
    return str(tag.version) if tag is not None else None


def plan_scope(
    ctx: ReleaseContext,
    *,
    tag_prefix: str,
    bump: BumpLevel | None,
    path: str | None,
    tags: TagRepository,
    commits: CommitAnalyzer,
    console: ConsoleProtocol,
) -> Result[ScopePlan | None, ReleaseError]:
    """Gather tags and the bump for one scope.

    Returns Ok(None) when there is nothing to release: a version exists and no
    relevant commit landed since.
    """
    last_tag = tags.last_tag(ctx.channel, tag_prefix=tag_prefix)
    if isinstance(last_tag, Err):
        return last_tag
    last_release = tags.last_release_tag(ctx.channel, tag_prefix=tag_prefix)
    if isinstance(last_release, Err):
        return last_release

    current = last_tag.value
    is_switching_to_stable = (
        not ctx.config.release_candidate and current is not None and current.channel == "rc"
    )
    if is_switching_to_stable and bump is None:
        bump = "minor"

    reason: str | None = None
    if bump is None:
        recommended = commits.recommend_bump(
            since_tag=current.name if current is not None else None,
            path=path,
            ignored_types=ctx.config.commit_types_to_ignore,
            message_format=ctx.config.commit_message_format,
        )
        if isinstance(recommended, Err):
            return recommended
        if recommended.value is None:
            if current is not None:
                return Ok(None)
            bump = "patch"
        else:
            bump = recommended.value.level
            reason = recommended.value.reason

    console.debug(f"current version is {current.name if current else None}")
    console.debug(f"last release was {last_release.value.name if last_release.value else None}")

    return Ok(
        ScopePlan(
            tag_prefix=tag_prefix,
            last_tag=current,
            last_release_tag=last_release.value,
            bump=bump,
            is_switching_to_stable=is_switching_to_stable,
            reason=reason,
        )
    )


def next_version(
    ctx: ReleaseContext,
    options: NextVersionOptions,
    *,
    tags: TagRepository,
    commits: CommitAnalyzer,
    console: ConsoleProtocol,
    projects: ProjectGraph | None = None,
) -> Result[NextVersionOutcome, ReleaseError]:
    """Compute the next version(s).

    The root result is always last; project results follow the order of the
    affected-project list.
    """
    if ctx.ci.is_pull_request:
        console.warning(PULL_REQUEST_WARNING)
        return Ok(SkippedPullRequest())

    plan = plan_scope(
        ctx,
        tag_prefix=options.tag_prefix,
        bump=options.bump,
        path=options.path,
        tags=tags,
        commits=commits,
        console=console,
    )
    if isinstance(plan, Err):
        return plan
    root = plan.value
    if root is None:
        return Ok(SkippedNoCommits())

    if root.reason:
        console.info(root.reason)

    results: list[VersionResult] = []
    if options.workspace == "nx":
        if projects is None:
            return Err(
                ReleaseError(kind="invalid_input", message="nx workspace requested without a project graph")
            )
        fanned = _next_versions_nx(
            ctx,
            options,
            root,
            tags=tags,
            commits=commits,
            projects=projects,
            console=console,
        )
        if isinstance(fanned, Err):
            return fanned
        results.extend(fanned.value)

    root_result = root.compute(ctx)
    if isinstance(root_result, Err):
        return root_result
    results.append(root_result.value)

    if options.output_file is not None:
        written = write_versions(options.output_file, results)
        if isinstance(written, Err):
            return written

    return Ok(Computed(versions=tuple(results)))


def _next_versions_nx(
    ctx: ReleaseContext,
    options: NextVersionOptions,
    root: ScopePlan,
    *,
    tags: TagRepository,
    commits: CommitAnalyzer,
    projects: ProjectGraph,
    console: ConsoleProtocol,
) -> Result[list[VersionResult], ReleaseError]:
    base = root.last_tag.name if root.last_tag is not None else None
    affected = projects.affected_projects(base, options.project_type)
    if isinstance(affected, Err):
        return affected

    results: list[VersionResult] = []
    for project in affected.value:
        console.info(f"run for {project}")
        plan = plan_scope(
            ctx,
            tag_prefix=f"{project}/{options.tag_prefix}",
            bump=root.bump,
            path=None,
            tags=tags,
            commits=commits,
            console=console,
        )
        if isinstance(plan, Err):
            return plan
        if plan.value is None:
            continue

        result = plan.value.compute(ctx, project=project)
        if isinstance(result, Err):
            return result
        results.append(result.value)
    return Ok(results)
