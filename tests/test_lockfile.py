import textwrap

import pytest

from cargo_update_dep.errors import LockfileUnreadable
from cargo_update_dep.lockfile import find_lockfile, locked_versions

LOCKFILE = textwrap.dedent(
    """\
    # This file is automatically @generated by Cargo.
    # It is not intended for manual editing.
    version = 3

    [[package]]
    name = "crate-a"
    version = "0.1.0"
    dependencies = [
     "foo 1.2.4",
     "foo 2.0.0",
    ]

    [[package]]
    name = "foo"
    version = "1.2.4"
    source = "registry+https://github.com/rust-lang/crates.io-index"

    [[package]]
    name = "foo"
    version = "2.0.0"
    source = "registry+https://github.com/rust-lang/crates.io-index"
    """
)


def test_locked_versions(tmp_path) -> None:
    lockfile = tmp_path / "Cargo.lock"
    lockfile.write_text(LOCKFILE)

    assert locked_versions(lockfile, "foo") == ["1.2.4", "2.0.0"]
    assert locked_versions(lockfile, "crate-a") == ["0.1.0"]
    assert locked_versions(lockfile, "bar") == []


@pytest.mark.parametrize("contents", ["[[package]\n", "name = "])
def test_locked_versions_invalid(tmp_path, contents: str) -> None:
    lockfile = tmp_path / "Cargo.lock"
    lockfile.write_text(contents)
    with pytest.raises(LockfileUnreadable):
        locked_versions(lockfile, "foo")


def test_locked_versions_missing(tmp_path) -> None:
    with pytest.raises(LockfileUnreadable):
        locked_versions(tmp_path / "Cargo.lock", "foo")


def test_find_lockfile(tmp_path) -> None:
    member = tmp_path / "crates" / "crate-a"
    member.mkdir(parents=True)
    lockfile = tmp_path / "Cargo.lock"
    lockfile.write_text(LOCKFILE)

    assert find_lockfile(tmp_path) == lockfile
    assert find_lockfile(member) == lockfile

    nested = member / "Cargo.lock"
    nested.write_text(LOCKFILE)
    assert find_lockfile(member) == nested
