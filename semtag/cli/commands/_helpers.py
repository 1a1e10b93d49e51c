"""Shared helpers for CLI commands."""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Literal, NoReturn, TypeVar

import typer

from semtag.cli.context import CLIContext, release_error_code
from semtag.core.result import Err, Result
from semtag.output.console import Style
from semtag.services.release.commits import ConventionalCommitAnalyzer
from semtag.services.release.errors import ReleaseError
from semtag.services.release.model import VersionResult
from semtag.services.release.projects import NxProjectGraph
from semtag.services.release.tags import TagRepository

OutputFormat = Literal["json"]

T = TypeVar("T")


def fail(ctx: CLIContext, error: ReleaseError) -> NoReturn:
    ctx.console.error(error.message)
    if error.hint:
        ctx.console.print(f"hint: {error.hint}", Style.DIM)
    raise typer.Exit(code=int(release_error_code(error.kind)))


def unwrap_or_exit(result: Result[T, ReleaseError], ctx: CLIContext) -> T:
    """Return the Ok value, or report the error and exit with its code."""
    if isinstance(result, Err):
        fail(ctx, result.error)
    return result.value


def tag_repository(ctx: CLIContext) -> TagRepository:
    return TagRepository(ctx.repo)


def commit_analyzer(ctx: CLIContext) -> ConventionalCommitAnalyzer:
    return ConventionalCommitAnalyzer(ctx.repo, ctx.console)


def project_graph(ctx: CLIContext) -> NxProjectGraph:
    return NxProjectGraph(ctx.workspace.root)


def print_json(
    ctx: CLIContext,
    *,
    versions: Sequence[VersionResult] | None = None,
    warning: str | None = None,
) -> None:
    """Print the run context as JSON on stdout."""
    payload = ctx.release.to_dict()
    if versions is not None:
        payload["versions"] = [v.to_dict() for v in versions]
    if warning is not None:
        payload["warning"] = warning
    typer.echo(json.dumps(payload, indent=2))


def tags_label(versions: Sequence[VersionResult]) -> str:
    return ", ".join(v.tag for v in versions)
