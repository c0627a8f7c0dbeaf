# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
KeystoreConverter backed by the JDK's keytool.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Optional

from apkship.tools.interfaces import KeystoreConverter
from apkship.tools.process import find_executable, run_command

SOURCE_STORE_TYPE = "PKCS12"
DEST_STORE_TYPE = "JKS"


class KeytoolConverter(KeystoreConverter):
    """Runs `keytool -importkeystore` to turn a PKCS12 bundle into a JKS keystore."""

    name = "keytool"

    def __init__(self, executable: str = "keytool", env: Optional[Mapping[str, str]] = None) -> None:
        self._executable = executable
        self._env = env

    def is_available(self) -> bool:
        return find_executable(self._executable, self._env) is not None

    def import_pkcs12(
        self,
        bundle: Path,
        bundle_password: str,
        keystore_out: Path,
        keystore_password: str,
        key_password: str,
        alias: str,
    ) -> int:
        return run_command(
            [
                self._executable, "-importkeystore",
                "-srckeystore", str(bundle),
                "-srcstoretype", SOURCE_STORE_TYPE,
                "-srcstorepass", bundle_password,
                "-destkeystore", str(keystore_out),
                "-deststoretype", DEST_STORE_TYPE,
                "-deststorepass", keystore_password,
                "-destkeypass", key_password,
                "-alias", alias,
                "-noprompt",
            ],
            secrets=(bundle_password, keystore_password, key_password),
            env=self._env,
        )
