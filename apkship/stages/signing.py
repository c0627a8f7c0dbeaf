# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Signing and verification.

Sign first, then verify the file the signer actually wrote. A signed APK
that fails verification is left where it is for inspection and is never
published.
"""

import logging
from pathlib import Path

from apkship.config.credentials import Credentials
from apkship.errors import (
    STAGE_SIGNING,
    SigningFailedError,
    ToolNotFoundError,
    VerificationFailedError,
)
from apkship.logging.logger import get_logger
from apkship.tools.interfaces import Signer
from apkship.utils.filesystem import safe_delete

_logger: logging.Logger = get_logger(__name__)


def sign_artifact(
    signer: Signer,
    keystore: Path,
    key_alias: str,
    credentials: Credentials,
    unsigned_artifact: Path,
    signed_artifact: Path,
) -> Path:
    """
    Sign `unsigned_artifact` into `signed_artifact`.

    Raises:
        SigningFailedError: If a previous signed APK cannot be removed, or the
            signer exits non-zero or writes nothing.
    """
    # A leftover file from an earlier run must not pass for this run's output.
    try:
        safe_delete(signed_artifact)
    except OSError as err:
        raise SigningFailedError(
            f"Cannot remove previous signed APK {signed_artifact}: {err}", path=signed_artifact
        ) from err

    _logger.info("Signing APK", extra={"input": str(unsigned_artifact)})
    try:
        status = signer.sign(
            keystore,
            credentials.keystore_password,
            key_alias,
            credentials.key_password,
            unsigned_artifact,
            signed_artifact,
        )
    except ToolNotFoundError as err:
        raise ToolNotFoundError(str(err), tool=err.tool, path=signed_artifact, stage=STAGE_SIGNING) from err

    if status != 0 or not signed_artifact.is_file():
        raise SigningFailedError(
            f"APK signing failed (exit {status}), no signed APK at {signed_artifact}",
            path=signed_artifact,
        )

    _logger.info("APK signed successfully", extra={"output": str(signed_artifact)})
    return signed_artifact


def verify_artifact(signer: Signer, signed_artifact: Path) -> Path:
    """
    Verify the signature on `signed_artifact`.

    Raises:
        VerificationFailedError: If the signer reports a bad signature.
    """
    _logger.info("Verifying signature", extra={"artifact": str(signed_artifact)})
    try:
        status = signer.verify(signed_artifact)
    except ToolNotFoundError as err:
        raise ToolNotFoundError(str(err), tool=err.tool, path=signed_artifact, stage=STAGE_SIGNING) from err

    if status != 0:
        raise VerificationFailedError(
            f"Signature verification failed (exit {status}) for {signed_artifact}",
            path=signed_artifact,
        )

    _logger.info("Signature verified successfully")
    return signed_artifact


def sign_and_verify(
    signer: Signer,
    keystore: Path,
    key_alias: str,
    credentials: Credentials,
    unsigned_artifact: Path,
    signed_artifact: Path,
) -> Path:
    """Sign, then verify the result. Returns the verified signed APK."""
    sign_artifact(signer, keystore, key_alias, credentials, unsigned_artifact, signed_artifact)
    return verify_artifact(signer, signed_artifact)
