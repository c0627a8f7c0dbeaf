# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Artifact builder: stale-output cleanup followed by one foreground release build.

Gradle's own `clean` task is skipped (it also wipes generated native code
that autolinking needs), so the output directories are removed here
instead. The native build cache is dropped as well; stale CMake state is a
known source of link failures between builds.

A zero exit status from the build tool is not taken on faith. The stage only
succeeds when the unsigned APK is actually at the expected path.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from apkship.errors import (
    STAGE_BUILD,
    BuildArtifactMissingError,
    BuildFailedError,
    ToolNotFoundError,
)
from apkship.logging.logger import get_logger
from apkship.tools.interfaces import ArtifactBuilder
from apkship.utils.filesystem import remove_tree

_logger: logging.Logger = get_logger(__name__)


@dataclass(frozen=True)
class CleanResult:
    """Which directories the pre-build cleanup actually removed."""

    removed: list[str]
    native_cache_removed: bool


def clean_build_outputs(
    project_root: Path,
    output_directories: Sequence[Path],
    native_cache: Optional[Path] = None,
) -> CleanResult:
    """
    Remove previous build outputs and the native build cache, where present.

    Raises:
        OSError: If a directory exists but cannot be removed.
    """
    _logger.info("Cleaning build outputs", extra={"project_root": str(project_root)})
    removed: list[str] = []
    for directory in output_directories:
        if remove_tree(directory):
            removed.append(str(directory))
            _logger.debug("Removed directory", extra={"path": str(directory)})

    native_cache_removed = False
    if native_cache is not None and native_cache.is_dir():
        _logger.info("Cleaning native build cache", extra={"path": str(native_cache)})
        native_cache_removed = remove_tree(native_cache)

    return CleanResult(removed=removed, native_cache_removed=native_cache_removed)


def build_release_artifact(
    project_root: Path,
    builder: ArtifactBuilder,
    unsigned_artifact: Path,
    output_directories: Sequence[Path] = (),
    native_cache: Optional[Path] = None,
) -> Path:
    """
    Clean, build, and confirm the unsigned APK exists.

    Args:
        project_root: Directory the build tool runs in.
        builder: The build tool.
        unsigned_artifact: Where the build must leave the unsigned APK.
        output_directories: Stale output directories to remove first.
        native_cache: Native build cache directory to remove first.

    Returns:
        Path to the unsigned APK.

    Raises:
        ToolNotFoundError: If the build tool cannot be executed.
        BuildFailedError: If stale outputs cannot be removed or the build
            tool exits non-zero.
        BuildArtifactMissingError: If the APK is missing after the build.
    """
    try:
        clean_build_outputs(project_root, output_directories, native_cache)
    except OSError as err:
        raise BuildFailedError(f"Cannot clean previous build outputs: {err}", path=project_root) from err

    _logger.info("Building release APK", extra={"builder": builder.name})
    try:
        status = builder.build_release(project_root)
    except ToolNotFoundError as err:
        raise ToolNotFoundError(str(err), tool=err.tool, path=project_root, stage=STAGE_BUILD) from err

    if status != 0:
        raise BuildFailedError(
            f"APK build failed - {builder.name} exited with status {status}",
            path=project_root,
        )

    if not unsigned_artifact.is_file():
        raise BuildArtifactMissingError(
            f"APK build failed - file not found at {unsigned_artifact}",
            path=unsigned_artifact,
        )

    _logger.info("APK built successfully", extra={"artifact": str(unsigned_artifact)})
    return unsigned_artifact
