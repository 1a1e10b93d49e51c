from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass


def _truthy(value: str | None) -> bool:
    return bool(value) and value.strip().lower() not in {"", "false", "0"}


@dataclass(frozen=True, slots=True)
class CiEnvironment:
    """What the CI provider says about the current run."""

    provider: str | None = None
    is_pull_request: bool = False

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> CiEnvironment:
        """Detect the CI provider and whether the run builds a pull request."""
        if env.get("GITHUB_ACTIONS") == "true":
            event = env.get("GITHUB_EVENT_NAME", "")
            return cls("github", event in {"pull_request", "pull_request_target"})

        if env.get("GITLAB_CI"):
            return cls("gitlab", bool(env.get("CI_MERGE_REQUEST_IID")))

        if env.get("TF_BUILD"):
            return cls("azure", env.get("BUILD_REASON") == "PullRequest")

        if env.get("TRAVIS"):
            return cls("travis", _truthy(env.get("TRAVIS_PULL_REQUEST")))

        if env.get("CIRCLECI"):
            return cls("circleci", bool(env.get("CIRCLE_PULL_REQUEST")))

        if env.get("BITBUCKET_BUILD_NUMBER"):
            return cls("bitbucket", bool(env.get("BITBUCKET_PR_ID")))

        if env.get("JENKINS_URL"):
            return cls("jenkins", bool(env.get("CHANGE_ID")))

        if _truthy(env.get("CI")):
            return cls("generic", _truthy(env.get("CI_PULL_REQUEST")))

        return cls()
