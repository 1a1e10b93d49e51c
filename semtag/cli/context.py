from __future__ import annotations

import os
from dataclasses import dataclass
from typing import NoReturn

import typer
from semver import Version

from semtag.core.config import load_config
from semtag.core.errors import ErrorCode
from semtag.core.result import Err
from semtag.core.workspace import Workspace, detect_workspace
from semtag.git.repository import Repository
from semtag.output.console import ConsoleProtocol, RichConsole
from semtag.services.release.channel import resolve_channel
from semtag.services.release.ci import CiEnvironment
from semtag.services.release.errors import ReleaseError
from semtag.services.release.model import Channel, ReleaseContext

# `git branch --show-current` appeared in 2.22.
MIN_GIT_VERSION = "2.22.0"


@dataclass(frozen=True, slots=True)
class CLIContext:
    workspace: Workspace
    repo: Repository
    release: ReleaseContext
    console: ConsoleProtocol


def exit_with(message: str, *, code: ErrorCode) -> NoReturn:
    typer.echo(f"error: {message}", err=True)
    raise typer.Exit(code=int(code))


def release_error_code(kind: str) -> ErrorCode:
    if kind in {"git_failed"}:
        return ErrorCode.GIT_ERROR
    if kind in {"nx_failed", "invalid_config"}:
        return ErrorCode.ENV_ERROR
    if kind in {"io_failed"}:
        return ErrorCode.IO_ERROR
    return ErrorCode.USER_ERROR


def exit_release(error: ReleaseError) -> NoReturn:
    exit_with(error.pretty(), code=release_error_code(error.kind))


def check_git_version(repo: Repository) -> str:
    found = repo.version()
    if isinstance(found, Err):
        exit_with(found.error.message, code=ErrorCode.ENV_ERROR)
    if Version.parse(found.value) < Version.parse(MIN_GIT_VERSION):
        exit_with(
            f"git version {MIN_GIT_VERSION} is required, found {found.value}",
            code=ErrorCode.ENV_ERROR,
        )
    return found.value


def build_context(
    *,
    debug: bool = False,
    json_output: bool = False,
    channel: Channel | None = None,
) -> CLIContext:
    """Gather every implicit input of a run once.

    Args:
        channel: Use this channel instead of resolving the current branch.
    """
    console = RichConsole(debug=debug, quiet=json_output)

    workspace_result = detect_workspace()
    if isinstance(workspace_result, Err):
        exit_with(workspace_result.error.message, code=ErrorCode.ENV_ERROR)
    workspace = workspace_result.value

    repo = Repository(workspace.root)
    git_version = check_git_version(repo)
    console.debug(f"git version is {git_version}")

    config_result = load_config(workspace.config_path)
    if isinstance(config_result, Err):
        exit_with(
            f"{config_result.error.path}: {config_result.error.message}",
            code=ErrorCode.ENV_ERROR,
        )
    config = config_result.value

    branch = repo.current_branch()
    if isinstance(branch, Err):
        exit_with(branch.error.message, code=ErrorCode.GIT_ERROR)
    console.debug(f"current branch is {branch.value}")
    if repo.is_detached_head():
        console.debug("HEAD is detached: true")

    if channel is None:
        resolved = resolve_channel(branch.value, config)
        if isinstance(resolved, Err):
            exit_release(resolved.error)
        channel = resolved.value
    console.debug(f"release channel is {channel}")

    return CLIContext(
        workspace=workspace,
        repo=repo,
        release=ReleaseContext(
            config=config,
            channel=channel,
            current_branch=branch.value,
            ci=CiEnvironment.from_env(os.environ),
        ),
        console=console,
    )
