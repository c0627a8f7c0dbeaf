# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Key material resolver: the first gate of every run.

Nothing else happens until the PEM private key is confirmed to exist. A
missing key aborts before any keystore, build output or published APK is
created or touched.
"""

import logging
from pathlib import Path

from apkship.errors import MissingKeyError
from apkship.logging.logger import get_logger

_logger: logging.Logger = get_logger(__name__)


def resolve_private_key(private_key: Path) -> Path:
    """
    Confirm the private key file exists.

    Raises:
        MissingKeyError: If `private_key` is missing or is not a regular file.
    """
    if not private_key.is_file():
        raise MissingKeyError(f"Private key not found at {private_key}", path=private_key)

    _logger.info("Private key found", extra={"private_key": str(private_key)})
    return private_key
