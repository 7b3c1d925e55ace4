"""Run external commands (`cargo metadata`, `cargo update`) with a timeout.

The updater only ever talks to Cargo through a `CommandRunner`, so tests can
swap in a fake that returns canned output instead of spawning processes.
"""

from __future__ import annotations

import logging
import subprocess
import typing
from pathlib import Path

from cargo_update_dep.errors import SubprocessTimeout

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 300.0


class CommandResult(typing.NamedTuple):
    args: list[str]
    """The command that was run."""

    returncode: int
    """The exit status of the command."""

    stdout: str
    """The captured standard output."""

    stderr: str
    """The captured standard error."""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner(typing.Protocol):
    def run(
        self, args: list[str], *, cwd: Path, timeout: float | None
    ) -> CommandResult:
        """Run `args` in `cwd`.

        Raises `SubprocessTimeout` if the command exceeds `timeout` seconds and
        `OSError` if it cannot be spawned at all.
        """
        ...


class SubprocessRunner:
    """Run commands with `subprocess.run`, capturing their output as text."""

    def run(
        self, args: list[str], *, cwd: Path, timeout: float | None
    ) -> CommandResult:
        logger.debug("Running `%s` in %s", " ".join(args), cwd)
        try:
            completed = subprocess.run(
                args,
                cwd=cwd,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as err:
            raise SubprocessTimeout(args, timeout) from err

        return CommandResult(
            args=args,
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )
