# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI entrypoint for apkship.

Every operation is a subcommand of `apkship`. No interactive prompts: the
tool is meant to run unattended in CI as well as from a terminal.

The global options (--config, --project-root, --log-level, --dry-run) are
inherited by every subcommand through argparse's parent parser mechanism.

Usage:
    apkship <subcommand> [options]
    apkship release --config release.yaml
    apkship locate-signer
    apkship verify --artifact app-release.apk
"""

import argparse
import sys

from apkship.cli.commands import (
    handle_build,
    handle_doctor,
    handle_info,
    handle_keystore,
    handle_locate_signer,
    handle_release,
    handle_verify,
)
from apkship.cli.exit_codes import USER_ERROR


def _build_global_parser() -> argparse.ArgumentParser:
    """
    Build the parent parser with global options.

    add_help=False so help text doesn't collide between the parent and the
    subcommand parsers.
    """
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file. Defaults apply when omitted.",
    )
    parent.add_argument(
        "--project-root",
        type=str,
        default=None,
        dest="project_root",
        help="Android project directory. Defaults to the current directory.",
    )
    parent.add_argument(
        "--log-level",
        type=str,
        default=None,
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity (overrides the config).",
    )
    parent.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        dest="dry_run",
        help="Describe what would happen without touching anything.",
    )
    return parent


def _register_subcommands(
    subparsers: argparse._SubParsersAction,  # type: ignore[type-arg]
    parent: argparse.ArgumentParser,
) -> None:
    """Register all subcommands with their handler functions."""
    commands = [
        ("release", "Provision keystore, build, sign, verify and publish the APK.", handle_release),
        ("keystore", "Create the signing keystore from the PEM key if it is missing.", handle_keystore),
        ("build", "Clean build outputs and build the unsigned release APK.", handle_build),
        ("locate-signer", "Find apksigner under the SDK root or on PATH.", handle_locate_signer),
        ("verify", "Verify the signature of the published APK.", handle_verify),
        ("doctor", "Check that every input and tool a release needs is present.", handle_doctor),
        ("info", "Display version and environment info.", handle_info),
    ]

    for name, help_text, handler in commands:
        parser = subparsers.add_parser(name, parents=[parent], help=help_text)
        parser.set_defaults(func=handler, artifact=None)

    verify_parser = subparsers.choices["verify"]
    verify_parser.add_argument(
        "--artifact",
        type=str,
        default=None,
        help="APK to verify. Defaults to the configured published APK.",
    )


def main(argv: list[str] | None = None) -> None:
    """
    Main CLI entrypoint. This is what pyproject.toml's [project.scripts] points to.

    If no subcommand is given, we show help and exit with USER_ERROR.
    """
    parent = _build_global_parser()

    root_parser = argparse.ArgumentParser(
        prog="apkship",
        description="apkship: build, sign, verify and publish the release APK.",
        parents=[parent],
    )
    subparsers = root_parser.add_subparsers(dest="command")
    _register_subcommands(subparsers, parent)

    args = root_parser.parse_args(argv)

    if not hasattr(args, "func") or args.func is None:
        root_parser.print_help()
        sys.exit(USER_ERROR)

    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
