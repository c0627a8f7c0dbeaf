# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Abstract base classes for the external tools the pipeline orchestrates.

The stages never spawn processes themselves. They receive objects obeying
the contracts below and read results from exit statuses and the filesystem:

- CertificateAuthority: self-signed certificate + PKCS12 export (openssl)
- KeystoreConverter: PKCS12 -> JKS import (keytool)
- ArtifactBuilder: release build (gradle wrapper)
- Signer: APK sign + verify (apksigner)

Exit statuses are returned, not raised. Deciding what a non-zero status
means is the stage's job, because the same status can be recoverable in one
place (first certificate attempt) and fatal in another.
"""

from abc import ABC, abstractmethod
from pathlib import Path


class CertificateAuthority(ABC):
    """Issues a self-signed certificate for a key and bundles both as PKCS12."""

    name: str = "certificate-authority"

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the underlying tool is installed."""
        ...

    @abstractmethod
    def self_sign(
        self,
        private_key: Path,
        certificate_out: Path,
        subject: str,
        validity_days: int,
    ) -> int:
        """
        Write a self-signed X.509 certificate for `private_key`.

        Returns:
            Exit status; 0 means `certificate_out` was written.
        """
        ...

    @abstractmethod
    def export_pkcs12(
        self,
        certificate: Path,
        private_key: Path,
        bundle_out: Path,
        alias: str,
        password: str,
    ) -> int:
        """
        Bundle certificate and key into a password-protected PKCS12 file
        tagged with `alias`, using non-iterated key and MAC encoding.

        Returns:
            Exit status; 0 means `bundle_out` was written.
        """
        ...


class KeystoreConverter(ABC):
    """Converts a PKCS12 bundle into the keystore format the signer reads."""

    name: str = "keystore-converter"

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the underlying tool is installed."""
        ...

    @abstractmethod
    def import_pkcs12(
        self,
        bundle: Path,
        bundle_password: str,
        keystore_out: Path,
        keystore_password: str,
        key_password: str,
        alias: str,
    ) -> int:
        """
        Import `alias` from `bundle` into a new keystore, non-interactively.

        Returns:
            Exit status; 0 means `keystore_out` was written.
        """
        ...


class ArtifactBuilder(ABC):
    """Runs the project's release build in the foreground."""

    name: str = "artifact-builder"

    @abstractmethod
    def build_release(self, project_root: Path) -> int:
        """
        Build the release variant without a clean phase and without a daemon.

        Returns:
            The build tool's exit status.
        """
        ...


class Signer(ABC):
    """Signs an APK with a keystore and verifies signed APKs."""

    name: str = "signer"

    @abstractmethod
    def sign(
        self,
        keystore: Path,
        keystore_password: str,
        key_alias: str,
        key_password: str,
        unsigned_artifact: Path,
        signed_out: Path,
    ) -> int:
        """
        Sign `unsigned_artifact` into `signed_out`.

        Returns:
            Exit status of the signer.
        """
        ...

    @abstractmethod
    def verify(self, signed_artifact: Path) -> int:
        """
        Verify the signature on `signed_artifact`.

        Returns:
            Exit status; 0 means the signature is valid.
        """
        ...
