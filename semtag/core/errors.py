"""Error codes for CLI exit status.

Gated outcomes (pull request build, stale branch, nothing to release) are
not errors and exit with OK so CI pipelines can tell "nothing to release"
apart from "release failed".
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are used as process exit codes and should remain stable:
    - 0: Success (including skipped releases)
    - 1: User error (bad input, unknown branch, disallowed bump)
    - 2: Environment error (git missing or too old, invalid config)
    - 3: Version-control error (a git command failed)
    - 5: I/O error (manifest or output file could not be written)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    GIT_ERROR = 3
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
