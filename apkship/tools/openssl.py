# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CertificateAuthority backed by the openssl command line tool.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Optional

from apkship.tools.interfaces import CertificateAuthority
from apkship.tools.process import find_executable, run_command


class OpenSSLCertificateAuthority(CertificateAuthority):
    """Runs `openssl req` and `openssl pkcs12` as child processes."""

    name = "openssl"

    def __init__(self, executable: str = "openssl", env: Optional[Mapping[str, str]] = None) -> None:
        self._executable = executable
        self._env = env

    def is_available(self) -> bool:
        return find_executable(self._executable, self._env) is not None

    def self_sign(
        self,
        private_key: Path,
        certificate_out: Path,
        subject: str,
        validity_days: int,
    ) -> int:
        # stderr is dropped: a rejected subject is expected on minimal
        # environments and the caller retries with a shorter one.
        return run_command(
            [
                self._executable, "req", "-new", "-x509",
                "-key", str(private_key),
                "-out", str(certificate_out),
                "-days", str(validity_days),
                "-subj", subject,
            ],
            quiet=True,
            env=self._env,
        )

    def export_pkcs12(
        self,
        certificate: Path,
        private_key: Path,
        bundle_out: Path,
        alias: str,
        password: str,
    ) -> int:
        return run_command(
            [
                self._executable, "pkcs12", "-export",
                "-in", str(certificate),
                "-inkey", str(private_key),
                "-out", str(bundle_out),
                "-name", alias,
                "-password", f"pass:{password}",
                "-noiter", "-nomaciter",
            ],
            secrets=(password,),
            env=self._env,
        )
