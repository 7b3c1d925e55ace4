"""Find the `Cargo.toml` of every member of a Cargo workspace."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from urllib.parse import unquote

from cargo_update_dep.errors import MalformedMemberLocation, MetadataUnavailable
from cargo_update_dep.runner import DEFAULT_TIMEOUT, CommandRunner, SubprocessRunner

logger = logging.getLogger(__name__)

MANIFEST_NAME = "Cargo.toml"

# Legacy package ids, e.g. `crate-a 0.1.0 (path+file:///ws/crate-a)`.
LEGACY_MEMBER = re.compile(r"file://(.*)\)")

# Package id specs emitted by newer Cargo, e.g. `path+file:///ws/crate-a#0.1.0`.
MEMBER_SPEC = re.compile(r"^path\+file://([^#]+)#\S+$")


def manifest_path(member: str) -> Path:
    """Return the manifest path of a single `workspace_members` entry."""
    match = MEMBER_SPEC.match(member) or LEGACY_MEMBER.search(member)
    if match is None:
        raise MalformedMemberLocation(member)
    # Cargo percent-encodes the path, e.g. `/tmp/my%20ws/crate-a`.
    return Path(unquote(match.group(1))) / MANIFEST_NAME


def member_manifests(metadata: object) -> list[Path]:
    """Return the manifest paths of all workspace members, in metadata order."""
    if not isinstance(metadata, dict):
        raise MetadataUnavailable("`cargo metadata` did not return a JSON object")

    members = metadata.get("workspace_members")
    if not isinstance(members, list) or not all(
        isinstance(member, str) for member in members
    ):
        raise MetadataUnavailable(
            "`cargo metadata` output has no list of `workspace_members`"
        )

    return [manifest_path(member) for member in members]


def read_metadata(
    root: Path,
    *,
    runner: CommandRunner | None = None,
    cargo: str = "cargo",
    timeout: float | None = DEFAULT_TIMEOUT,
) -> object:
    """Run `cargo metadata` in `root` and return its decoded JSON output."""
    runner = runner or SubprocessRunner()
    args = [cargo, "metadata", "--format-version", "1", "--no-deps"]
    try:
        result = runner.run(args, cwd=root, timeout=timeout)
    except OSError as err:
        raise MetadataUnavailable(f"Failed to run `{' '.join(args)}`: {err}") from err

    if not result.ok:
        raise MetadataUnavailable(
            f"`{' '.join(args)}` failed with exit code {result.returncode}:\n"
            f"{result.stderr.strip()}"
        )

    try:
        return json.loads(result.stdout)
    except json.JSONDecodeError as err:
        raise MetadataUnavailable(
            f"Failed to decode `cargo metadata` output: {err}"
        ) from err


def locate(
    root: Path,
    *,
    runner: CommandRunner | None = None,
    cargo: str = "cargo",
    timeout: float | None = DEFAULT_TIMEOUT,
) -> list[Path]:
    """Return the manifest path of each workspace member of `root`."""
    metadata = read_metadata(root, runner=runner, cargo=cargo, timeout=timeout)
    manifests = member_manifests(metadata)
    logger.info("Found %d workspace manifest(s)", len(manifests))
    for manifest in manifests:
        logger.debug("  %s", manifest)
    return manifests
