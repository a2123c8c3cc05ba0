"""
Version bumping with PEP 440 versions.

    bump_version("1.2.3", "patch")               == "1.2.4"
    bump_version("1.2.3", "preminor", "beta")    == "1.3.0b0"
    bump_version("1.3.0b0", "prerelease")        == "1.3.0b1"
    bump_version("1.3.0b1", "minor")             == "1.3.0"

Pre-release ids: alpha/a, beta/b, rc/c. Local, dev and post segments are
dropped by every bump.
"""

from typing import Literal, get_args

from packaging.version import InvalidVersion, Version

BumpType = Literal["patch", "minor", "major", "prerelease", "prepatch", "preminor", "premajor"]

BUMP_TYPES: tuple[str, ...] = get_args(BumpType)

PRE_IDS = {
    "alpha": "a",
    "a": "a",
    "beta": "b",
    "b": "b",
    "rc": "rc",
    "c": "rc",
}


def _pre_label(preid: str | None) -> str:
    if preid is None:
        return "a"
    try:
        return PRE_IDS[preid.lower()]
    except KeyError:
        raise ValueError(f"Unknown pre-release id '{preid}' (use one of: {', '.join(PRE_IDS)})")


def _format(major: int, minor: int, micro: int, pre: tuple[str, int] | None = None) -> str:
    version = f"{major}.{minor}.{micro}"
    if pre is not None:
        version += f"{pre[0]}{pre[1]}"
    return version


def bump_version(current: str, bump: str, preid: str | None = None) -> str:
    """
    Return the version following `current` for the given bump type.

    Raises:
        ValueError: On an invalid current version, bump type or pre-release id
    """
    if bump not in BUMP_TYPES:
        raise ValueError(f"Unknown bump type '{bump}' (use one of: {', '.join(BUMP_TYPES)})")

    try:
        version = Version(current)
    except InvalidVersion as e:
        raise ValueError(f"Invalid current version '{current}': {e}") from e

    major, minor, micro = version.major, version.minor, version.micro
    pre = version.pre

    if bump == "patch":
        return _format(major, minor, micro if pre else micro + 1)

    if bump == "minor":
        if pre and micro == 0:
            return _format(major, minor, 0)
        return _format(major, minor + 1, 0)

    if bump == "major":
        if pre and minor == 0 and micro == 0:
            return _format(major, 0, 0)
        return _format(major + 1, 0, 0)

    label = _pre_label(preid)

    if bump == "prepatch":
        return _format(major, minor, micro + 1, (label, 0))

    if bump == "preminor":
        return _format(major, minor + 1, 0, (label, 0))

    if bump == "premajor":
        return _format(major + 1, 0, 0, (label, 0))

    # prerelease
    if pre is None:
        return _format(major, minor, micro + 1, (label, 0))
    if preid is None or pre[0] == label:
        return _format(major, minor, micro, (pre[0], pre[1] + 1))
    return _format(major, minor, micro, (label, 0))
