# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Signer locator: find apksigner.

Resolution order:
  1. $ANDROID_HOME/build-tools/<newest version>/apksigner
  2. apksigner on PATH

"Newest" is decided by comparing version numbers field by field, so
30.0.2 beats 9.0.0 even though "9" sorts after "3" as text.
"""

import logging
import re
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Optional

from apkship.errors import SignerNotFoundError
from apkship.logging.logger import get_logger
from apkship.tools.process import find_executable

_logger: logging.Logger = get_logger(__name__)

BUILD_TOOLS_DIR = "build-tools"

_VERSION_TOKEN = re.compile(r"\d+|[^\d.\-_]+")


def version_key(name: str) -> tuple[tuple[int, int, str], ...]:
    """
    Sort key that orders version strings numerically.

    Digit runs compare as integers, anything else compares as text and sorts
    before a number in the same position, so "30.0.0-rc1" < "30.0.0.1".
    """
    key = []
    for token in _VERSION_TOKEN.findall(name):
        if token.isdigit():
            key.append((1, int(token), ""))
        else:
            key.append((0, 0, token))
    return tuple(key)


def select_latest_version(names: Iterable[str]) -> Optional[str]:
    """Return the highest version in `names`, or None if there are none."""
    ordered = sorted(names, key=version_key)
    return ordered[-1] if ordered else None


def _find_in_sdk(sdk_root: Path, binary: str) -> Optional[Path]:
    build_tools = sdk_root / BUILD_TOOLS_DIR
    if not build_tools.is_dir():
        _logger.debug("No build-tools directory", extra={"path": str(build_tools)})
        return None

    latest = select_latest_version(p.name for p in build_tools.iterdir() if p.is_dir())
    if latest is None:
        return None

    candidate = build_tools / latest / binary
    _logger.debug("Probing SDK build-tools", extra={"version": latest, "path": str(candidate)})
    return candidate if candidate.is_file() else None


def locate_signer(
    env: Mapping[str, str],
    sdk_root_env: str = "ANDROID_HOME",
    binary: str = "apksigner",
) -> Path:
    """
    Find the signer executable.

    Args:
        env: Environment to read the SDK root and PATH from.
        sdk_root_env: Name of the variable holding the SDK root.
        binary: Signer executable name.

    Returns:
        Path to an existing signer file.

    Raises:
        SignerNotFoundError: If neither the SDK nor PATH provides the signer.
    """
    sdk_root = env.get(sdk_root_env)
    if sdk_root:
        found = _find_in_sdk(Path(sdk_root), binary)
        if found is not None:
            _logger.info("Found signer", extra={"signer": str(found), "source": sdk_root_env})
            return found

    on_path = find_executable(binary, env)
    if on_path is not None and on_path.is_file():
        _logger.info("Found signer", extra={"signer": str(on_path), "source": "PATH"})
        return on_path

    raise SignerNotFoundError(
        f"{binary} not found. Please ensure Android SDK build-tools are installed. "
        f"Set the {sdk_root_env} environment variable or add {binary} to PATH.",
        path=Path(sdk_root) / BUILD_TOOLS_DIR if sdk_root else None,
    )
