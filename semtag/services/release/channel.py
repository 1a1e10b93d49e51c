from __future__ import annotations

import re
from fnmatch import fnmatchcase

from semtag.core.config import CONFIG_FILE, SemtagConfig
from semtag.core.result import Err, Ok, Result
from semtag.services.release.errors import ReleaseError
from semtag.services.release.model import Channel


def is_beta_branch(branch: str, config: SemtagConfig) -> bool:
    return branch == config.beta_branch_name


def is_release_branch(branch: str, config: SemtagConfig) -> bool:
    """Match the release pattern exactly, as a glob, or as a regex."""
    pattern = config.release_branch_name
    if not pattern:
        return False
    if branch == pattern or fnmatchcase(branch, pattern):
        return True
    try:
        return re.search(pattern, branch) is not None
    except re.error:
        # Not a valid regex, and the glob did not match.
        return False


def resolve_channel(branch: str, config: SemtagConfig) -> Result[Channel, ReleaseError]:
    """Map the current branch to its release channel."""
    if is_beta_branch(branch, config):
        return Ok("beta")
    if is_release_branch(branch, config):
        return Ok("rc" if config.release_candidate else "stable")
    return Err(
        ReleaseError(
            kind="unrecognized_branch",
            message=f"branch not recognized: {branch}",
            hint=f"use {CONFIG_FILE} to configure betaBranchName / releaseBranchName",
        )
    )
