from __future__ import annotations

from cargo_update_dep.errors import (
    LockfileUnreadable,
    MalformedMemberLocation,
    ManifestError,
    ManifestUnreadable,
    ManifestUnwritable,
    MetadataUnavailable,
    SubprocessTimeout,
    UpdateDepError,
)
from cargo_update_dep.locator import locate
from cargo_update_dep.patcher import patch_lines, patch_manifest
from cargo_update_dep.runner import CommandResult, CommandRunner, SubprocessRunner
from cargo_update_dep.updater import UpdateReport, run

__all__ = [
    "CommandResult",
    "CommandRunner",
    "LockfileUnreadable",
    "MalformedMemberLocation",
    "ManifestError",
    "ManifestUnreadable",
    "ManifestUnwritable",
    "MetadataUnavailable",
    "SubprocessRunner",
    "SubprocessTimeout",
    "UpdateDepError",
    "UpdateReport",
    "locate",
    "patch_lines",
    "patch_manifest",
    "run",
]
