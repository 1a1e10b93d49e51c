from __future__ import annotations

from semtag.core.result import Err, Ok, Result
from semtag.output.console import ConsoleProtocol
from semtag.services.release.errors import ReleaseError
from semtag.services.release.model import LastVersionOptions, ReleaseContext, VersionResult
from semtag.services.release.output_file import write_versions
from semtag.services.release.projects import ProjectGraph
from semtag.services.release.tags import TagRepository


def last_version(
    ctx: ReleaseContext,
    options: LastVersionOptions,
    *,
    tags: TagRepository,
    console: ConsoleProtocol,
    projects: ProjectGraph | None = None,
) -> Result[tuple[VersionResult, ...], ReleaseError]:
    """The newest existing version(s) on a channel.

    An explicit channel looks at the whole repository; otherwise the channel
    of the current branch is used with its usual tag scope. Projects without
    a tag and a repository without one contribute nothing.
    """
    channel = options.channel or ctx.channel
    ignore_branch = options.channel is not None

    results: list[VersionResult] = []
    if options.workspace == "nx":
        if projects is None:
            return Err(
                ReleaseError(kind="invalid_input", message="nx workspace requested without a project graph")
            )
        affected = projects.affected_projects(None, options.project_type)
        if isinstance(affected, Err):
            return affected
        for project in affected.value:
            console.info(f"run for {project}")
            found = tags.last_tag(channel, tag_prefix=f"{project}/", ignore_branch=ignore_branch)
            if isinstance(found, Err):
                return found
            if found.value is not None:
                results.append(
                    VersionResult(
                        version=str(found.value.version),
                        tag=found.value.name,
                        project=project,
                    )
                )

    root = tags.last_tag(channel, ignore_branch=ignore_branch)
    if isinstance(root, Err):
        return root
    console.debug(f"current version is {root.value.name if root.value else None}")
    if root.value is not None:
        results.append(VersionResult(version=str(root.value.version), tag=root.value.name))

    if options.output_file is not None:
        written = write_versions(options.output_file, results)
        if isinstance(written, Err):
            return written
    return Ok(tuple(results))
