from __future__ import annotations

from pathlib import Path


class UpdateDepError(Exception):
    """Base class for every failure raised by `cargo-update-dep`."""


class MetadataUnavailable(UpdateDepError): ...


class MalformedMemberLocation(UpdateDepError):
    def __init__(self, member: str) -> None:
        self.member = member
        super().__init__(
            f"Could not extract a manifest directory from workspace member {member!r}"
        )


class ManifestError(UpdateDepError):
    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class ManifestUnreadable(ManifestError): ...


class ManifestUnwritable(ManifestError): ...


class SubprocessTimeout(UpdateDepError):
    def __init__(self, command: list[str], timeout: float) -> None:
        self.command = command
        self.timeout = timeout
        super().__init__(f"`{' '.join(command)}` did not finish within {timeout}s")


class LockfileUnreadable(UpdateDepError): ...
