# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Keystore provisioner: PEM private key -> JKS keystore, exactly once.

The conversion runs in three tool calls:
  1. openssl req      self-signed certificate around the key (~10 years)
  2. openssl pkcs12   key + certificate bundled under the alias
  3. keytool          PKCS12 bundle imported into a JKS keystore

An existing keystore short-circuits everything. It is never regenerated or
modified, because a new keystore means a new signing identity and the store
would reject the next upload. Delete it by hand if rotation is intended.

The certificate and PKCS12 bundle are scratch files. They are removed on
every exit path, success or failure.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from apkship.config.credentials import Credentials
from apkship.config.schema import CertificateConfig
from apkship.errors import KeystoreCreationError, ToolNotFoundError
from apkship.logging.logger import get_logger
from apkship.tools.interfaces import CertificateAuthority, KeystoreConverter
from apkship.utils.filesystem import safe_delete

_logger: logging.Logger = get_logger(__name__)

TEMP_CERTIFICATE_NAME = "temp.crt"
TEMP_BUNDLE_NAME = "temp.p12"


def _discard(path: Path) -> None:
    """Remove a scratch file. A failure here is logged so it cannot hide the real error."""
    try:
        safe_delete(path)
    except OSError as err:
        _logger.warning("Could not remove file", extra={"path": str(path), "error": str(err)})


@dataclass(frozen=True)
class KeystoreResult:
    """Where the keystore is and whether this run created it."""

    keystore: Path
    created: bool


def _require_tools(authority: CertificateAuthority, converter: KeystoreConverter) -> None:
    if not authority.is_available():
        raise ToolNotFoundError(
            f"{authority.name} is required to create the keystore but is not installed",
            tool=authority.name,
        )
    if not converter.is_available():
        raise ToolNotFoundError(
            f"{converter.name} (Java JDK) is required to create the keystore but is not installed",
            tool=converter.name,
        )


def _issue_certificate(
    authority: CertificateAuthority,
    private_key: Path,
    certificate: Path,
    certificate_config: CertificateConfig,
) -> None:
    """Self-sign with the full subject, retrying once with the minimal one."""
    _logger.info("Generating certificate from private key")
    status = authority.self_sign(
        private_key,
        certificate,
        certificate_config.subject,
        certificate_config.validity_days,
    )
    if status == 0:
        return

    _logger.warning(
        "Full subject rejected, retrying with minimal subject",
        extra={"subject": certificate_config.fallback_subject, "returncode": status},
    )
    status = authority.self_sign(
        private_key,
        certificate,
        certificate_config.fallback_subject,
        certificate_config.validity_days,
    )
    if status != 0:
        raise KeystoreCreationError(
            f"Certificate generation failed (exit {status}) for key {private_key}",
            path=private_key,
        )


def provision_keystore(
    private_key: Path,
    keystore: Path,
    key_alias: str,
    credentials: Credentials,
    certificate_config: CertificateConfig,
    authority: CertificateAuthority,
    converter: KeystoreConverter,
) -> KeystoreResult:
    """
    Make sure a keystore exists at `keystore`, creating it from `private_key` if not.

    Args:
        private_key: PEM private key, already confirmed to exist.
        keystore: Target keystore path.
        key_alias: Alias for the key inside the PKCS12 bundle and the keystore.
        credentials: Keystore and per-key passwords. The PKCS12 bundle is
            protected with the keystore password.
        certificate_config: Subject, fallback subject and validity.
        authority: Certificate and PKCS12 tool.
        converter: Keystore import tool.

    Returns:
        KeystoreResult with `created=False` when an existing keystore was reused.

    Raises:
        ToolNotFoundError: If either tool is missing (only checked when a
            keystore has to be created).
        KeystoreCreationError: If the keystore directory cannot be created
            or a tool exits non-zero. Also raised when no keystore appears.
    """
    if keystore.exists():
        _logger.info("Using existing keystore", extra={"keystore": str(keystore)})
        return KeystoreResult(keystore=keystore, created=False)

    _logger.info("Creating keystore from PEM private key", extra={"keystore": str(keystore)})
    _require_tools(authority, converter)

    try:
        keystore.parent.mkdir(parents=True, exist_ok=True)
    except OSError as err:
        raise KeystoreCreationError(
            f"Cannot create keystore directory {keystore.parent}: {err}", path=keystore.parent
        ) from err
    certificate = keystore.parent / TEMP_CERTIFICATE_NAME
    bundle = keystore.parent / TEMP_BUNDLE_NAME

    try:
        _issue_certificate(authority, private_key, certificate, certificate_config)

        _logger.info("Converting to PKCS12 format")
        status = authority.export_pkcs12(
            certificate,
            private_key,
            bundle,
            key_alias,
            credentials.keystore_password,
        )
        if status != 0:
            raise KeystoreCreationError(
                f"PKCS12 export failed (exit {status})", path=bundle
            )

        _logger.info("Creating Java keystore")
        status = converter.import_pkcs12(
            bundle,
            credentials.keystore_password,
            keystore,
            credentials.keystore_password,
            credentials.key_password,
            key_alias,
        )
        if status != 0 or not keystore.is_file():
            # No keystore existed before this run; anything here is a partial write.
            _discard(keystore)
            raise KeystoreCreationError(
                f"Keystore import failed (exit {status}) for {keystore}", path=keystore
            )
    finally:
        _discard(bundle)
        _discard(certificate)

    _logger.info("Keystore created", extra={"keystore": str(keystore), "alias": key_alias})
    return KeystoreResult(keystore=keystore, created=True)
