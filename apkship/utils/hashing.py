# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Digest of the published APK.

The completion summary prints it so the operator can match the local file
against what the store console reports after upload.
"""

import hashlib
from pathlib import Path

CHUNK_SIZE = 1 << 16


def compute_sha256(artifact: Path) -> str:
    """
    Lowercase SHA256 hex digest of `artifact`, read in 64 KiB chunks.

    Raises:
        OSError: If the file cannot be opened or read.
    """
    digest = hashlib.sha256()
    with artifact.open("rb") as stream:
        for chunk in iter(lambda: stream.read(CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()
