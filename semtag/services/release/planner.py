"""Version increment engine.

Pure functions, no I/O. Given the current version on a channel, the last
finished release and a bump level, compute the next version string.

Examples (current, last release, bump, channel -> next):
    None,            None,    patch, beta   -> 1.0.0-beta.1
    1.0.0-beta.1,    None,    patch, beta   -> 1.0.0-beta.2
    1.0.1-beta.2,    1.0.0,   minor, beta   -> 1.1.0-beta.1
    1.0.0-rc.4,      1.0.0,   patch, rc     -> 1.0.1-rc.1
    1.0.1-rc.1,      1.0.0,   patch, stable -> 1.0.1 (switching to stable)
"""

from __future__ import annotations

from semver import Version

from semtag.core.result import Err, Ok, Result
from semtag.services.release.errors import ReleaseError
from semtag.services.release.model import BumpLevel, Channel
from semtag.services.release.semver import (
    ZERO,
    bump_prerelease,
    bump_release,
    parse_version,
    prerelease_id,
    release_triple,
    start_prerelease,
)

DISALLOWED_BUMP_MESSAGE = "only patches are allowed once a release branch is stable"


def increment(
    current_tag: str | None,
    last_release_tag: str | None,
    bump: BumpLevel,
    channel: Channel,
    is_switching_to_stable: bool = False,
) -> Result[str, ReleaseError]:
    """Compute the next version.

    Args:
        current_tag: Last version on this channel (bare semver), if any.
        last_release_tag: Last finished release (bare semver), if any.
        bump: Requested bump level.
        channel: Release channel of the current branch.
        is_switching_to_stable: The release branch has just stopped producing
            rc tags and this is its first stable tag.
    """
    if not current_tag and not last_release_tag:
        return Ok("1.0.0" if channel == "stable" else f"1.0.0-{channel}.1")

    current_raw = current_tag or last_release_tag or ""
    last_release_raw = last_release_tag or str(ZERO)

    current = parse_version(current_raw)
    if current is None:
        return Err(_invalid(current_raw))
    last_release = parse_version(last_release_raw)
    if last_release is None:
        return Err(_invalid(last_release_raw))

    if is_switching_to_stable and channel == "stable":
        return Ok(str(release_triple(current)))

    if channel in ("beta", "rc"):
        return Ok(_increment_prerelease(current, last_release, bump, channel))
    return _increment_release(current, last_release, bump)


def _increment_prerelease(
    current: Version,
    last_release: Version,
    bump: BumpLevel,
    channel: Channel,
) -> str:
    last = current if current > last_release else last_release
    on_channel = prerelease_id(last) == channel

    if on_channel and last_release == ZERO:
        # Still iterating before the first release.
        return str(bump_prerelease(last))

    if on_channel:
        starts_new_line = (
            getattr(current, bump) == getattr(last_release, bump)
            and last_release.major >= current.major
            and bump != "patch"
        )
        if starts_new_line:
            return f"{bump_release(current, bump)}-{channel}.1"
        return str(bump_prerelease(last))

    # Last tag is a release or another channel's prerelease: start a new train.
    return start_prerelease(bump_release(release_triple(last_release), bump), channel)


def _increment_release(
    current: Version,
    last_release: Version,
    bump: BumpLevel,
) -> Result[str, ReleaseError]:
    if last_release == ZERO:
        return Ok("1.0.0")

    if current.prerelease:
        return Ok(str(release_triple(current)))

    if bump in ("major", "minor"):
        return Err(
            ReleaseError(
                kind="disallowed_bump",
                message=DISALLOWED_BUMP_MESSAGE,
                hint="open a new release branch for features and breaking changes",
            )
        )
    return Ok(str(bump_release(last_release, "patch")))


def _invalid(value: str) -> ReleaseError:
    return ReleaseError(kind="invalid_semver", message=f"version {value} is not a valid semver")
