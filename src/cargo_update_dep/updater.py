"""Update a dependency across every manifest of a workspace, then `Cargo.lock`."""

from __future__ import annotations

import logging
import typing
from pathlib import Path

from cargo_update_dep.errors import LockfileUnreadable, ManifestError, SubprocessTimeout
from cargo_update_dep.locator import locate
from cargo_update_dep.lockfile import find_lockfile, locked_versions
from cargo_update_dep.patcher import patch_manifest
from cargo_update_dep.runner import DEFAULT_TIMEOUT, CommandRunner, SubprocessRunner

logger = logging.getLogger(__name__)


class UpdateReport(typing.NamedTuple):
    updated_manifests: list[Path]
    """The manifests that were rewritten, in workspace member order."""

    failed_manifests: list[tuple[Path, str]]
    """Manifests that could not be read or written (only with `keep_going`)."""

    lock_updated: bool
    """Whether `cargo update` succeeded."""

    def to_json(self) -> dict[str, object]:
        output: dict[str, object] = {
            "updated_manifests": [str(path) for path in self.updated_manifests]
        }
        if self.failed_manifests:
            output["failed_manifests"] = [
                {"path": str(path), "error": message}
                for path, message in self.failed_manifests
            ]
        return output


def update_lockfile(
    root: Path,
    package: str,
    old_version: str,
    new_version: str,
    *,
    runner: CommandRunner,
    cargo: str = "cargo",
    timeout: float | None = DEFAULT_TIMEOUT,
) -> bool:
    """Pin `package` to `new_version` in `Cargo.lock` with `cargo update --precise`.

    Failures are logged and reported through the return value, never raised,
    since another Cargo process may hold the lockfile at the same time.
    """
    args = [cargo, "update", "-p", f"{package}:{old_version}", "--precise", new_version]
    try:
        result = runner.run(args, cwd=root, timeout=timeout)
    except (OSError, SubprocessTimeout) as err:
        logger.warning("Failed to run `%s`: %s", " ".join(args), err)
        return False

    logger.debug("`%s` stdout:\n%s", " ".join(args), result.stdout)
    logger.debug("`%s` stderr:\n%s", " ".join(args), result.stderr)

    if not result.ok:
        logger.warning(
            "`%s` failed with exit code %d; `Cargo.lock` was not updated:\n%s\n%s",
            " ".join(args),
            result.returncode,
            result.stdout.strip(),
            result.stderr.strip(),
        )
        return False

    check_lockfile(root, package, new_version)
    return True


def check_lockfile(root: Path, package: str, new_version: str) -> None:
    """Warn if `Cargo.lock` does not pin `package` at `new_version`."""
    lockfile = find_lockfile(root)
    if lockfile is None:
        logger.debug("No `Cargo.lock` found above %s", root)
        return

    try:
        versions = locked_versions(lockfile, package)
    except LockfileUnreadable as err:
        logger.warning("%s", err)
        return

    if new_version not in versions:
        logger.warning(
            "%s locks %s at %s, expected %s",
            lockfile,
            package,
            ", ".join(versions) or "no version",
            new_version,
        )


def run(
    root: Path,
    package: str,
    old_version: str,
    new_version: str,
    *,
    runner: CommandRunner | None = None,
    cargo: str = "cargo",
    timeout: float | None = DEFAULT_TIMEOUT,
    keep_going: bool = False,
) -> UpdateReport:
    """Update `package` from `old_version` to `new_version` in the workspace at `root`.

    Every workspace manifest is patched in member order. An unreadable or
    unwritable manifest aborts the run, unless `keep_going` is set, in which
    case it is recorded in the report and the remaining manifests are still
    patched. Manifests written before a failure are left as they are; re-running
    is safe since they no longer contain `old_version`.
    """
    runner = runner or SubprocessRunner()

    manifests = locate(root, runner=runner, cargo=cargo, timeout=timeout)

    updated = []
    failed = []
    for manifest in manifests:
        try:
            if patch_manifest(manifest, package, old_version, new_version):
                updated.append(manifest)
        except ManifestError as err:
            if not keep_going:
                raise
            logger.error("Skipping %s: %s", err.path, err.reason)
            failed.append((err.path, err.reason))

    logger.info(
        "Updated %s in %d of %d manifest(s)", package, len(updated), len(manifests)
    )

    lock_updated = update_lockfile(
        root,
        package,
        old_version,
        new_version,
        runner=runner,
        cargo=cargo,
        timeout=timeout,
    )

    return UpdateReport(
        updated_manifests=updated,
        failed_manifests=failed,
        lock_updated=lock_updated,
    )
