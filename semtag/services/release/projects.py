"""Monorepo project graph (nx)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Protocol

from semtag.core.result import Err, Ok, Result
from semtag.core.structured import as_obj_list, as_str_dict, get_str, get_table
from semtag.platform.process import run
from semtag.services.release.errors import ReleaseError
from semtag.services.release.model import ProjectType

NX_TIMEOUT_SECONDS = 5 * 60.0


class ProjectGraph(Protocol):
    def affected_projects(
        self,
        base: str | None = None,
        project_type: ProjectType = "all",
    ) -> Result[list[str], ReleaseError]: ...


def affected_command(base: str | None, project_type: ProjectType) -> list[str]:
    cmd = ["npx", "nx", "print-affected", "--target=build"]
    if project_type != "all":
        cmd.append(f"--type={project_type}")
    if base:
        cmd.extend([f"--base={base}", "--head=HEAD"])
    else:
        cmd.append("--all")
    return cmd


def parse_affected(stdout: str) -> Result[list[str], ReleaseError]:
    """Project names of `print-affected` tasks, first occurrence order."""
    bad_output = ReleaseError(
        kind="nx_failed",
        message='the command "nx print-affected" did not return the expected output',
    )
    try:
        data: object = json.loads(stdout)
    except json.JSONDecodeError:
        return Err(bad_output)

    obj = as_str_dict(data)
    tasks = as_obj_list(obj.get("tasks")) if obj is not None else None
    if tasks is None:
        return Err(bad_output)

    projects: list[str] = []
    for item in tasks:
        task = as_str_dict(item)
        target = get_table(task, "target") if task is not None else None
        project = get_str(target, "project") if target is not None else None
        if project is None:
            return Err(bad_output)
        if project not in projects:
            projects.append(project)
    return Ok(projects)


class NxProjectGraph:
    """ProjectGraph backed by the nx CLI of the workspace."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def affected_projects(
        self,
        base: str | None = None,
        project_type: ProjectType = "all",
    ) -> Result[list[str], ReleaseError]:
        cmd = affected_command(base, project_type)
        result = run(cmd, cwd=self.root, timeout=NX_TIMEOUT_SECONDS)
        if isinstance(result, Err):
            e = result.error
            return Err(
                ReleaseError(
                    kind="nx_failed",
                    message=f"{' '.join(cmd)} failed: {e.stderr.strip() or e.returncode}",
                    hint="run `npm install` so that nx is available",
                )
            )
        return parse_affected(result.value)
