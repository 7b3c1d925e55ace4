"""Inspect `Cargo.lock` after `cargo update` has run."""

from __future__ import annotations

import tomllib
from pathlib import Path

from cargo_update_dep.errors import LockfileUnreadable

LOCKFILE_NAME = "Cargo.lock"


def find_lockfile(root: Path) -> Path | None:
    """Return the nearest `Cargo.lock` in `root` or one of its parents."""
    for directory in [root, *root.parents]:
        lockfile = directory / LOCKFILE_NAME
        if lockfile.is_file():
            return lockfile
    return None


def locked_versions(lockfile: Path, package: str) -> list[str]:
    """Get all locked versions of `package` from a `Cargo.lock` file."""
    try:
        with open(lockfile, "rb") as f:
            lock = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as err:
        raise LockfileUnreadable(f"Failed to read {lockfile}: {err}") from err

    versions = []
    for entry in lock.get("package", []):
        if entry.get("name") == package:
            if version := entry.get("version"):
                versions.append(version)

    return versions
