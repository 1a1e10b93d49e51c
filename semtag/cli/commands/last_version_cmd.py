"""`last-version` and `list` commands."""

from __future__ import annotations

from pathlib import Path

import typer

from semtag.cli.commands._helpers import (
    OutputFormat,
    print_json,
    project_graph,
    tag_repository,
    tags_label,
    unwrap_or_exit,
)
from semtag.cli.context import build_context, check_git_version, exit_with
from semtag.core.errors import ErrorCode
from semtag.core.result import Err
from semtag.core.workspace import detect_workspace
from semtag.git.repository import Repository
from semtag.output.console import RichConsole
from semtag.services.release.last_version import last_version
from semtag.services.release.model import Channel, LastVersionOptions, ProjectType, WorkspaceType
from semtag.services.release.tags import TagRepository


def last_version_cmd(
    workspace: WorkspaceType | None = typer.Option(
        None, "--workspace", "-w", help='Pass "nx" to include every nx project'
    ),
    channel: Channel | None = typer.Option(
        None,
        "--channel",
        "-c",
        help="Channel to look at (beta, rc, stable); defaults to the current branch",
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
    """Show the version of the last release."""
    json_output = output == "json"
    ctx = build_context(debug=debug, json_output=json_output, channel=channel)
    options = LastVersionOptions(
        channel=channel,
        workspace=workspace,
        project_type=project_type,
        output_file=output_file,
    )

    versions = unwrap_or_exit(
        last_version(
            ctx.release,
            options,
            tags=tag_repository(ctx),
            console=ctx.console,
            projects=project_graph(ctx) if workspace == "nx" else None,
        ),
        ctx,
    )

    if json_output:
        print_json(ctx, versions=versions)
    elif versions:
        ctx.console.success(f"last version(s): {tags_label(versions)}")
    else:
        ctx.console.warning(f"no version found on the {ctx.release.channel} channel")


def list_cmd(
    ctx: typer.Context,
    all_tags: bool = typer.Option(False, "--all", "-a", help="Show all semver tags"),
    branch: bool = typer.Option(False, "--branch", "-b", help="Show branch related semver tags"),
) -> None:
    """Show the existing version tags, newest first."""
    if all_tags and branch:
        exit_with(
            "You can either show all tags or those from the branch, but not both at the same time.",
            code=ErrorCode.USER_ERROR,
        )
    if not all_tags and not branch:
        typer.echo(ctx.get_help())
        return

    found = detect_workspace()
    if isinstance(found, Err):
        exit_with(found.error.message, code=ErrorCode.ENV_ERROR)
    repo = Repository(found.value.root)
    check_git_version(repo)

    tags = TagRepository(repo)
    result = tags.all_tags() if all_tags else tags.branch_tags()
    if isinstance(result, Err):
        exit_with(result.error.message, code=ErrorCode.GIT_ERROR)

    console = RichConsole()
    for tag in result.value:
        console.print(tag.name)
