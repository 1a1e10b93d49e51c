from __future__ import annotations

from dataclasses import dataclass

from semver import Version

from semtag.services.release.model import BumpLevel

ZERO = Version(0, 0, 0)


@dataclass(frozen=True, slots=True)
class VersionTag:
    """A git tag that parses as semver once its prefix is stripped."""

    name: str
    version: Version
    prefix: str = ""

    @property
    def channel(self) -> str | None:
        return prerelease_id(self.version)

    @property
    def is_release(self) -> bool:
        return self.version.prerelease is None


def parse_version(value: str) -> Version | None:
    """Strict semver parse; None if value is not valid semver."""
    try:
        return Version.parse(value)
    except (ValueError, TypeError):
        return None


def parse_tag(name: str, prefix: str = "") -> VersionTag | None:
    """Parse `<prefix>[v]<semver>`; None if the tag is not a version tag."""
    if prefix:
        if not name.startswith(prefix):
            return None
        raw = name[len(prefix) :]
    else:
        raw = name
    if raw[:1] in ("v", "="):
        raw = raw[1:]

    version = parse_version(raw)
    if version is None:
        return None
    return VersionTag(name=name, version=version, prefix=prefix)


def prerelease_id(version: Version) -> str | None:
    """First prerelease identifier: `beta` for `1.0.0-beta.3`."""
    if not version.prerelease:
        return None
    return version.prerelease.split(".", 1)[0]


def release_triple(version: Version) -> Version:
    """Drop prerelease and build metadata."""
    return Version(version.major, version.minor, version.patch)


def bump_release(version: Version, bump: BumpLevel) -> Version:
    """Increment a release component, resetting the lower ones.

    A prerelease that already sits on the target boundary is finalized rather
    than bumped again (`2.0.0-beta.1` bumped major is `2.0.0`).
    """
    major, minor, patch = version.major, version.minor, version.patch
    pre = version.prerelease is not None
    match bump:
        case "major":
            if minor or patch or not pre:
                return Version(major + 1, 0, 0)
            return Version(major, 0, 0)
        case "minor":
            if patch or not pre:
                return Version(major, minor + 1, 0)
            return Version(major, minor, 0)
        case "patch":
            if not pre:
                return Version(major, minor, patch + 1)
            return Version(major, minor, patch)
        case _:
            raise AssertionError(f"unexpected bump kind: {bump}")


def bump_prerelease(version: Version) -> Version:
    """Increment the trailing prerelease counter (`beta.1` -> `beta.2`).

    A prerelease without a numeric counter gets `.1` appended.
    """
    if not version.prerelease:
        raise ValueError(f"not a prerelease: {version}")
    parts = version.prerelease.split(".")
    if parts[-1].isdigit():
        parts[-1] = str(int(parts[-1]) + 1)
    else:
        parts.append("1")
    return Version(version.major, version.minor, version.patch, prerelease=".".join(parts))


def start_prerelease(version: Version, channel: str) -> str:
    """First tag of a prerelease train: `1.1.0` -> `1.1.0-beta.1`."""
    return f"{release_triple(version)}-{channel}.1"
