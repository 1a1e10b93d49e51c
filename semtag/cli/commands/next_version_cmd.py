"""`next-version` and `bump` commands."""

from __future__ import annotations

from pathlib import Path

import typer

from semtag.cli.commands._helpers import (
    OutputFormat,
    commit_analyzer,
    print_json,
    project_graph,
    tag_repository,
    tags_label,
    unwrap_or_exit,
)
from semtag.cli.context import CLIContext, build_context
from semtag.services.release.model import (
    BumpLevel,
    Computed,
    NextVersionOptions,
    ProjectType,
    Published,
    ReleaseOptions,
    SkippedNoCommits,
    SkippedPullRequest,
    VersionResult,
    WorkspaceType,
)
from semtag.services.release.next_version import (
    NO_COMMITS_WARNING,
    PULL_REQUEST_WARNING,
    next_version,
)
from semtag.services.release.publish import STALE_BRANCH_WARNING, release


def _compute(ctx: CLIContext, options: NextVersionOptions) -> tuple[VersionResult, ...] | str:
    """Computed versions, or the warning explaining why there are none."""
    outcome = unwrap_or_exit(
        next_version(
            ctx.release,
            options,
            tags=tag_repository(ctx),
            commits=commit_analyzer(ctx),
            console=ctx.console,
            projects=project_graph(ctx) if options.workspace == "nx" else None,
        ),
        ctx,
    )
    match outcome:
        case Computed(versions):
            return versions
        case SkippedPullRequest():
            return PULL_REQUEST_WARNING
        case SkippedNoCommits():
            return NO_COMMITS_WARNING


def next_version_cmd(
    workspace: WorkspaceType | None = typer.Option(
        None, "--workspace", "-w", help='Pass "nx" to version every affected nx project'
    ),
    tag_prefix: str = typer.Option("", "--tag-prefix", "-p", help="Prefix of the version tags"),
    bump: BumpLevel | None = typer.Option(
        None, "--bump", "-b", help="Override the recommended bump (major/minor/patch)"
    ),
    path: str | None = typer.Option(
        None, "--path", help="Only consider commits touching this path"
    ),
    project_type: ProjectType = typer.Option(
        "all", "--project-type", "-t", help="nx project filter: all, app or lib"
    ),
    output_file: Path | None = typer.Option(
        None, "--output-file", "-f", help="Write the versions as JSON to this file"
    ),
    output: OutputFormat | None = typer.Option(None, "--output", "-o", help='"json" for JSON output'),
    debug: bool = typer.Option(False, "--debug", "-d", help="Output debugging information"),
) -> None:
    """Show the version of the pending release."""
    json_output = output == "json"
    ctx = build_context(debug=debug, json_output=json_output)
    options = NextVersionOptions(
        tag_prefix=tag_prefix,
        path=path,
        bump=bump,
        workspace=workspace,
        project_type=project_type,
        output_file=output_file,
    )

    computed = _compute(ctx, options)
    if isinstance(computed, str):
        if json_output:
            print_json(ctx, warning=computed)
        return

    if json_output:
        print_json(ctx, versions=computed)
    else:
        ctx.console.success(f"next version(s): {tags_label(computed)}")


def bump_cmd(
    workspace: WorkspaceType | None = typer.Option(
        None, "--workspace", "-w", help='Pass "nx" to version every affected nx project'
    ),
    tag_prefix: str = typer.Option("", "--tag-prefix", "-p", help="Prefix of the version tags"),
    bump: BumpLevel | None = typer.Option(
        None, "--bump", "-b", help="Override the recommended bump (major/minor/patch)"
    ),
    path: str | None = typer.Option(
        None, "--path", help="Only consider commits touching this path"
    ),
    project_type: ProjectType = typer.Option(
        "all", "--project-type", "-t", help="nx project filter: all, app or lib"
    ),
    output_file: Path | None = typer.Option(
        None, "--output-file", "-f", help="Write the versions as JSON to this file"
    ),
    skip_chore_commit: bool = typer.Option(
        False,
        "--skip-chore-commit",
        help="Only create the git tags; leave manifests and history untouched",
    ),
    output: OutputFormat | None = typer.Option(None, "--output", "-o", help='"json" for JSON output'),
    debug: bool = typer.Option(False, "--debug", "-d", help="Output debugging information"),
) -> None:
    """Create the pending release: bump manifests and push the version tags."""
    json_output = output == "json"
    ctx = build_context(debug=debug, json_output=json_output)
    options = NextVersionOptions(
        tag_prefix=tag_prefix,
        path=path,
        bump=bump,
        workspace=workspace,
        project_type=project_type,
        output_file=output_file,
    )

    computed = _compute(ctx, options)
    if isinstance(computed, str):
        if json_output:
            print_json(ctx, warning=computed)
        return

    outcome = unwrap_or_exit(
        release(
            ctx.release,
            computed,
            ReleaseOptions(
                skip_chore_commit=skip_chore_commit,
                skip_manifest_update=skip_chore_commit,
                output_file=output_file,
            ),
            repo=ctx.repo,
            root=ctx.workspace.root,
            console=ctx.console,
        ),
        ctx,
    )
    if not isinstance(outcome, Published):
        if json_output:
            print_json(ctx, versions=computed, warning=STALE_BRANCH_WARNING)
        return

    if json_output:
        print_json(ctx, versions=outcome.versions)
    else:
        ctx.console.success(f"released: {tags_label(outcome.versions)}")
