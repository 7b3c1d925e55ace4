"""Rewrite the pinned version of a dependency in a `Cargo.toml`.

The manifest is never parsed as TOML: each line is matched against two
patterns and only the quoted version on matching lines is replaced, so
comments, formatting and ordering survive untouched.

A line is considered a declaration of `foo` if it is either:

    foo = "1.2.3"
    foo = { version = "1.2.3", features = ["bar"] }

or a renamed dependency that points at `foo`:

    foo-renamed = { package = "foo", version = "1.2.3" }

Section headers are not tracked, so a match in `[dev-dependencies]` or
`[build-dependencies]` is rewritten as well.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from cargo_update_dep.errors import ManifestUnreadable, ManifestUnwritable

logger = logging.getLogger(__name__)


def declaration_patterns(package: str) -> tuple[re.Pattern[str], re.Pattern[str]]:
    """Return the patterns matching a direct and a renamed declaration."""
    name = re.escape(package)
    return (
        re.compile(rf"^\s*{name}\s*="),
        re.compile(rf'package\s*=\s*"{name}"'),
    )


def patch_lines(
    lines: list[str], package: str, old_version: str, new_version: str
) -> tuple[list[str], bool]:
    """Replace `"old_version"` with `"new_version"` on lines declaring `package`.

    Returns the new lines and whether any of them changed. The input list is
    not modified.
    """
    direct, renamed = declaration_patterns(package)
    old = f'"{old_version}"'
    new = f'"{new_version}"'

    patched = []
    updated = False
    for line in lines:
        if direct.match(line) or renamed.search(line):
            replaced = line.replace(old, new)
            if replaced != line:
                line = replaced
                updated = True
        patched.append(line)

    return patched, updated


def read_lines(path: Path) -> list[str]:
    """Read `path` as a list of lines, without line terminators."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as err:
        raise ManifestUnreadable(path, str(err)) from err
    if not text:
        return []

    lines = text.split("\n")
    # A trailing newline terminates the last line rather than starting a new one.
    if lines[-1] == "":
        lines.pop()
    return lines


def write_lines(path: Path, lines: list[str]) -> None:
    """Write `lines` to `path`, always terminating the file with one newline."""
    try:
        path.write_text("\n".join(lines) + "\n", encoding="utf-8", newline="\n")
    except OSError as err:
        raise ManifestUnwritable(path, str(err)) from err


def patch_manifest(
    path: Path, package: str, old_version: str, new_version: str
) -> bool:
    """Update `package` from `old_version` to `new_version` in the manifest at `path`.

    The file is only written if at least one line changed. Returns whether it
    was.
    """
    lines, updated = patch_lines(read_lines(path), package, old_version, new_version)
    if updated:
        write_lines(path, lines)
        logger.info("Updated %s", path)
    else:
        logger.debug("No `%s = \"%s\"` declaration in %s", package, old_version, path)
    return updated
