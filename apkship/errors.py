# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Error taxonomy for the release pipeline.

Every stage failure is fatal. Each error records which stage raised it and
the path it was looking at, so the CLI can print one line that tells the
operator exactly where things stopped.

Config errors live separately in `apkship.config.exceptions` because they
happen before the pipeline ever starts.
"""

from pathlib import Path
from typing import Optional

STAGE_KEY_MATERIAL = "key_material"
STAGE_KEYSTORE = "keystore"
STAGE_BUILD = "build"
STAGE_SIGNER_LOCATOR = "signer_locator"
STAGE_SIGNING = "signing"
STAGE_PUBLICATION = "publication"


class PipelineError(Exception):
    """Base for every fatal stage failure."""

    stage: str = "pipeline"

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        return self.message


class MissingKeyError(PipelineError):
    """The configured PEM private key does not exist."""

    stage = STAGE_KEY_MATERIAL


class ToolNotFoundError(PipelineError):
    """A required external executable is not installed or not on PATH."""

    stage = STAGE_KEYSTORE

    def __init__(
        self,
        message: str,
        tool: str,
        path: Optional[Path] = None,
        stage: Optional[str] = None,
    ) -> None:
        super().__init__(message, path)
        self.tool = tool
        if stage is not None:
            self.stage = stage


class KeystoreCreationError(PipelineError):
    """openssl or keytool exited non-zero while provisioning the keystore."""

    stage = STAGE_KEYSTORE


class BuildFailedError(PipelineError):
    """The build tool itself exited non-zero."""

    stage = STAGE_BUILD


class BuildArtifactMissingError(PipelineError):
    """The build finished but the unsigned APK is not where it should be."""

    stage = STAGE_BUILD


class SignerNotFoundError(PipelineError):
    """apksigner could not be found under the SDK root or on PATH."""

    stage = STAGE_SIGNER_LOCATOR


class SigningFailedError(PipelineError):
    """The signer did not produce the signed APK."""

    stage = STAGE_SIGNING


class VerificationFailedError(PipelineError):
    """The signed APK failed signature verification."""

    stage = STAGE_SIGNING


class PublicationError(PipelineError):
    """The filesystem refused to replace the published APK."""

    stage = STAGE_PUBLICATION


class StageIOError(PipelineError):
    """The filesystem refused an operation a stage needed (mkdir, unlink, rmtree)."""

    def __init__(self, message: str, stage: str, path: Optional[Path] = None) -> None:
        super().__init__(message, path)
        self.stage = stage
