"""Command line interface for `cargo-update-dep`.

Update a dependency from one version to another in every `Cargo.toml` of a
workspace, then pin it in `Cargo.lock`:

    cargo update-dep -p serde -v 1.0.100 -n 1.0.101

The paths of the updated manifests are printed as JSON on stdout; logs go to
stderr.

The defaults of `--cargo` and `--timeout` can be set with the `CARGO` and
`CARGO_UPDATE_DEP_TIMEOUT` environment variables.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from colorama import Fore
from colorama import init as colorama_init

from cargo_update_dep.errors import UpdateDepError
from cargo_update_dep.locator import MANIFEST_NAME
from cargo_update_dep.runner import DEFAULT_TIMEOUT, CommandRunner
from cargo_update_dep.updater import UpdateReport, run

# Cargo passes the subcommand name as the first argument to `cargo-update-dep`.
SUBCOMMAND = "update-dep"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        prog="cargo-update-dep",
        description="Update a Rust dependency in every manifest of a workspace.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--version",
        required=True,
        metavar="VERSION",
        help="the current version",
    )
    parser.add_argument(
        "-n",
        "--new-version",
        required=True,
        metavar="NEW_VERSION",
        help="the wished version",
    )
    parser.add_argument(
        "-p",
        "--dependency-name",
        required=True,
        metavar="PACKAGE",
        help="the name of the dependency",
    )
    parser.add_argument(
        "-m",
        "--manifest-path",
        type=Path,
        metavar="MANIFEST_PATH",
        help="path of the main Cargo.toml to analyze, can be a workspace file "
        "(default: the current directory)",
    )
    parser.add_argument(
        "--cargo",
        default=os.environ.get("CARGO", "cargo"),
        help="path to the cargo binary (default: $CARGO or `cargo`)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=os.environ.get("CARGO_UPDATE_DEP_TIMEOUT", DEFAULT_TIMEOUT),
        help=f"timeout in seconds for each cargo command "
        f"(default: {DEFAULT_TIMEOUT:g} or CARGO_UPDATE_DEP_TIMEOUT)",
    )
    parser.add_argument(
        "--keep-going",
        action="store_true",
        help="keep updating the remaining manifests when one cannot be read or written",
    )
    parser.add_argument(
        "--verbose",
        action="count",
        default=0,
        help="increase verbosity (repeat for debug output)",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="only log errors and skip the summary on stderr",
    )

    argv = sys.argv[1:] if argv is None else argv
    if argv[:1] == [SUBCOMMAND]:
        argv = argv[1:]
    return parser.parse_args(argv)


def workspace_root(manifest_path: Path | None) -> Path:
    """Return the directory to run cargo in for the given `--manifest-path`."""
    if manifest_path is None:
        return Path.cwd()
    if manifest_path.name == MANIFEST_NAME or manifest_path.is_file():
        manifest_path = manifest_path.parent
    return manifest_path.resolve()


def log_level(verbose: int, quiet: bool) -> int:
    if quiet:
        return logging.ERROR
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return logging.WARNING


def configure_logging(verbose: int, quiet: bool) -> None:
    logging.basicConfig(
        level=log_level(verbose, quiet),
        format="%(asctime)s %(levelname)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def report_result(report: UpdateReport, *, quiet: bool = False) -> None:
    print(json.dumps(report.to_json()))
    if quiet:
        return

    if report.updated_manifests:
        print(f"{Fore.GREEN}Updated:", file=sys.stderr)
        for manifest in report.updated_manifests:
            print(f"     * {manifest}", file=sys.stderr)
    if report.failed_manifests:
        print(f"{Fore.RED}Failed:", file=sys.stderr)
        for manifest, message in report.failed_manifests:
            print(f"     * {manifest}: {message}", file=sys.stderr)
    if not report.lock_updated:
        print(
            f"{Fore.YELLOW}Cargo.lock was not updated; run `cargo update` manually.",
            file=sys.stderr,
        )


def main(argv: list[str] | None = None, runner: CommandRunner | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose, args.quiet)

    root = workspace_root(args.manifest_path)
    try:
        report = run(
            root,
            args.dependency_name,
            args.version,
            args.new_version,
            runner=runner,
            cargo=args.cargo,
            timeout=args.timeout,
            keep_going=args.keep_going,
        )
    except UpdateDepError as err:
        print(f"{Fore.RED}error:{Fore.RESET} {err}", file=sys.stderr)
        return 1

    report_result(report, quiet=args.quiet)
    return 1 if report.failed_manifests else 0


def _run() -> None:
    colorama_init(autoreset=True)
    sys.exit(main())
