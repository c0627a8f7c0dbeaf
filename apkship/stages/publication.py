# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Publication: move the verified APK to its final name.

Only ever called after verification passed. The previous published APK is
removed and the new one renamed into place, so the final path holds either
the latest verified APK or nothing.
"""

import logging
from pathlib import Path

from apkship.errors import PublicationError
from apkship.logging.logger import get_logger
from apkship.utils.filesystem import replace_file

_logger: logging.Logger = get_logger(__name__)


def publish_artifact(signed_artifact: Path, final_artifact: Path) -> Path:
    """
    Replace `final_artifact` with `signed_artifact`.

    Raises:
        PublicationError: If the signed APK is missing or the filesystem
            refuses the delete or move.
    """
    _logger.info(
        "Moving signed APK into place",
        extra={"source": str(signed_artifact), "target": str(final_artifact)},
    )
    try:
        replace_file(signed_artifact, final_artifact)
    except OSError as err:
        raise PublicationError(
            f"Could not publish {signed_artifact} to {final_artifact}: {err}",
            path=final_artifact,
        ) from err

    return final_artifact
