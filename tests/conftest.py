import json
from pathlib import Path
from urllib.parse import quote

import pytest

from cargo_update_dep.runner import CommandResult


class FakeRunner:
    """Answer `cargo metadata` and `cargo update` without spawning processes."""

    def __init__(self, metadata=None):
        self.metadata = metadata if metadata is not None else {"workspace_members": []}
        self.metadata_result = None
        self.update_result = CommandResult([], 0, "", "")
        self.errors = {}
        self.calls = []

    def run(self, args, *, cwd, timeout):
        self.calls.append((args, cwd, timeout))
        subcommand = args[1]
        if subcommand in self.errors:
            raise self.errors[subcommand]
        if subcommand == "metadata":
            if self.metadata_result is not None:
                return self.metadata_result._replace(args=args)
            return CommandResult(args, 0, json.dumps(self.metadata), "")
        if subcommand == "update":
            return self.update_result._replace(args=args)
        raise AssertionError(f"unexpected command: {args}")


def workspace_members(*directories: Path) -> dict:
    """Build `cargo metadata` output listing `directories` as workspace members."""
    return {
        "workspace_members": [
            f"{directory.name} 0.1.0 (path+file://{quote(str(directory))})"
            for directory in directories
        ],
        "workspace_root": str(directories[0].parent) if directories else "",
    }


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def make_crate(tmp_path):
    """Create `<tmp_path>/<name>/Cargo.toml` with the given contents."""

    def make(name: str, manifest: str) -> Path:
        directory = tmp_path / name
        directory.mkdir()
        (directory / "Cargo.toml").write_text(manifest, encoding="utf-8")
        return directory

    return make


@pytest.fixture
def workspace(runner, make_crate):
    """Create crates and register them, in order, as the workspace members."""

    def make(*crates: tuple[str, str]) -> list[Path]:
        directories = [make_crate(name, manifest) for name, manifest in crates]
        runner.metadata = workspace_members(*directories)
        return [directory / "Cargo.toml" for directory in directories]

    return make
