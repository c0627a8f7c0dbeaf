# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Thin wrapper around subprocess for running the external toolchain.

Every external call goes through `run_command` so that:
  - the command line is logged once, with passwords masked
  - a missing executable becomes a ToolNotFoundError instead of a bare
    FileNotFoundError from deep inside subprocess
  - output either passes straight through to the terminal (build, verify)
    or is discarded (the first openssl attempt)

There is no timeout. A hung tool hangs the run; Ctrl-C is the way out.
"""

import logging
import shutil
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Optional

from apkship.errors import ToolNotFoundError
from apkship.logging.logger import get_logger

_logger: logging.Logger = get_logger(__name__)

_MASK = "****"


def redact(args: Sequence[str], secrets: Sequence[str] = ()) -> list[str]:
    """
    Return a copy of `args` with every secret value replaced by a mask.

    Secrets embedded in a larger argument (like openssl's "pass:<pw>") are
    masked in place. Longer secrets are masked first so a password that is a
    prefix of another never leaves a tail behind.
    """
    ordered = sorted((s for s in secrets if s), key=len, reverse=True)
    redacted: list[str] = []
    for arg in args:
        for secret in ordered:
            arg = arg.replace(secret, _MASK)
        redacted.append(arg)
    return redacted


def find_executable(name: str, env: Optional[Mapping[str, str]] = None) -> Optional[Path]:
    """
    Look an executable up on PATH.

    When `env` is given, its PATH is searched instead of the process PATH.
    Returns None when nothing is found.
    """
    search_path = env.get("PATH") if env is not None else None
    found = shutil.which(name, path=search_path)
    return Path(found) if found else None


def run_command(
    args: Sequence[str],
    cwd: Optional[Path] = None,
    secrets: Sequence[str] = (),
    quiet: bool = False,
    env: Optional[Mapping[str, str]] = None,
) -> int:
    """
    Run a command to completion and return its exit status.

    Args:
        args: Program and arguments. Never passed through a shell.
        cwd: Working directory for the child process.
        secrets: Values to mask in the logged command line.
        quiet: Discard the child's stdout and stderr instead of inheriting them.
        env: Full environment for the child. Defaults to the current one.

    Returns:
        The child's exit status.

    Raises:
        ToolNotFoundError: If the program does not exist or is not executable.
    """
    _logger.debug(
        "Running command",
        extra={"command": " ".join(redact(args, secrets)), "cwd": str(cwd) if cwd else None},
    )

    sink = subprocess.DEVNULL if quiet else None
    try:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd) if cwd else None,
            stdout=sink,
            stderr=sink,
            env=dict(env) if env is not None else None,
            check=False,
        )
    except (FileNotFoundError, PermissionError) as err:
        raise ToolNotFoundError(
            f"Cannot execute '{args[0]}': {err.strerror or err}",
            tool=args[0],
        ) from err

    if completed.returncode != 0:
        _logger.debug(
            "Command exited non-zero",
            extra={"program": args[0], "returncode": completed.returncode},
        )
    return completed.returncode
