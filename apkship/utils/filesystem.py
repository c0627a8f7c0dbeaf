# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Filesystem helpers for apkship.

The pipeline only ever deletes or moves things it owns: stale build output,
ephemeral conversion files, the intermediate signed APK and the previously
published APK. Every helper here is a no-op on a missing path, so re-running
a half-finished release never trips over its own leftovers.
"""

import shutil
from pathlib import Path


def safe_delete(file_path: Path) -> bool:
    """
    Delete a file if it exists. Returns whether anything was actually deleted.

    This never throws on a missing file.

    Raises:
        OSError: If the file exists but can't be deleted (permissions, etc).
    """
    if file_path.exists() or file_path.is_symlink():
        file_path.unlink()
        return True
    return False


def remove_tree(dir_path: Path) -> bool:
    """
    Recursively delete a directory if it exists.

    Returns:
        True if the directory existed and was removed, False otherwise.

    Raises:
        OSError: If the directory exists but can't be removed.
    """
    if dir_path.is_dir():
        shutil.rmtree(dir_path)
        return True
    return False


def replace_file(source: Path, target: Path) -> None:
    """
    Move `source` to `target`, removing whatever was at `target` first.

    The old target is deleted before the move, so `target` is either the old
    file, absent, or the complete new file. It is never a blend of both.
    On the same filesystem the move is a rename; across filesystems
    shutil.move falls back to copy-and-delete.

    Raises:
        FileNotFoundError: If `source` does not exist.
        OSError: If the delete or the move fails.
    """
    if not source.is_file():
        raise FileNotFoundError(f"Nothing to move, source missing: {source}")
    safe_delete(target)
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.move(str(source), str(target))


def format_size(num_bytes: int) -> str:
    """Render a byte count the way `du -h` does: 512B, 4.2K, 17M, 1.3G."""
    size = float(num_bytes)
    for unit in ("B", "K", "M", "G", "T"):
        if size < 1024 or unit == "T":
            if unit == "B":
                return f"{int(size)}B"
            return f"{size:.1f}{unit}" if size < 10 else f"{size:.0f}{unit}"
        size /= 1024
    return f"{size:.0f}T"
