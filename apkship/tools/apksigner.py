# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Signer backed by the Android SDK's apksigner.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Optional

from apkship.tools.interfaces import Signer
from apkship.tools.process import run_command


class ApkSigner(Signer):
    """Runs `apksigner sign` and `apksigner verify` from a resolved path."""

    name = "apksigner"

    def __init__(self, executable: Path, env: Optional[Mapping[str, str]] = None) -> None:
        self.executable = executable
        self._env = env

    def sign(
        self,
        keystore: Path,
        keystore_password: str,
        key_alias: str,
        key_password: str,
        unsigned_artifact: Path,
        signed_out: Path,
    ) -> int:
        return run_command(
            [
                str(self.executable), "sign",
                "--ks", str(keystore),
                "--ks-pass", f"pass:{keystore_password}",
                "--ks-key-alias", key_alias,
                "--key-pass", f"pass:{key_password}",
                "--out", str(signed_out),
                str(unsigned_artifact),
            ],
            secrets=(keystore_password, key_password),
            env=self._env,
        )

    def verify(self, signed_artifact: Path) -> int:
        return run_command(
            [str(self.executable), "verify", str(signed_artifact)],
            env=self._env,
        )
