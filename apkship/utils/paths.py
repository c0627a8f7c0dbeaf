# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Path utilities for apkship.

Config paths are written relative to the Android project root so the same
YAML works on every machine and CI runner. Absolute paths are passed through
untouched.
"""

from pathlib import Path


def resolve_project_path(project_root: Path, configured: str) -> Path:
    """
    Turn a configured path into an absolute one anchored at the project root.

    Args:
        project_root: The Android project directory.
        configured: Path string from the config, relative or absolute.

    Returns:
        An absolute Path. `~` is expanded.
    """
    candidate = Path(configured).expanduser()
    if candidate.is_absolute():
        return candidate
    return (project_root / candidate).absolute()


def resolve_project_root(configured: str | None) -> Path:
    """
    Pick the project root: the --project-root argument, or the working directory.

    Raises:
        FileNotFoundError: If the directory does not exist.
    """
    root = Path(configured).expanduser() if configured else Path.cwd()
    root = root.absolute()
    if not root.is_dir():
        raise FileNotFoundError(f"Project root not found: {root}")
    return root
