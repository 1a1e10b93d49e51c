from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "unrecognized_branch",
    "invalid_semver",
    "disallowed_bump",
    "invalid_config",
    "invalid_input",
    "git_failed",
    "nx_failed",
    "io_failed",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Fatal release failure.

    Any ReleaseError aborts the run; no partial version list is emitted.
    """

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message
