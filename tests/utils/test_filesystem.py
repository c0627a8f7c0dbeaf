# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for filesystem utilities: safe deletes, tree removal and file replacement.

replace_file is tested by checking that the target holds either the old
content or the complete new content, never anything in between.
"""

from pathlib import Path

import pytest

from apkship.utils.filesystem import format_size, remove_tree, replace_file, safe_delete


class TestSafeDelete:
    def test_deletes_existing_file(self, tmp_path: Path) -> None:
        target = tmp_path / "deleteme.txt"
        target.write_text("delete me", encoding="utf-8")

        result = safe_delete(target)
        assert result is True
        assert not target.exists()

    def test_returns_false_for_missing_file(self, tmp_path: Path) -> None:
        result = safe_delete(tmp_path / "nonexistent.txt")
        assert result is False


class TestRemoveTree:
    def test_removes_nested_directory(self, tmp_path: Path) -> None:
        target = tmp_path / "build" / "outputs"
        (target / "apk" / "release").mkdir(parents=True)
        (target / "apk" / "release" / "app.apk").write_bytes(b"apk")

        assert remove_tree(target) is True
        assert not target.exists()
        assert (tmp_path / "build").is_dir()

    def test_returns_false_for_missing_directory(self, tmp_path: Path) -> None:
        assert remove_tree(tmp_path / "missing") is False

    def test_ignores_plain_files(self, tmp_path: Path) -> None:
        target = tmp_path / "not-a-dir"
        target.write_text("x", encoding="utf-8")

        assert remove_tree(target) is False
        assert target.exists()


class TestReplaceFile:
    def test_moves_into_empty_slot(self, tmp_path: Path) -> None:
        source = tmp_path / "new.apk"
        source.write_bytes(b"new")
        target = tmp_path / "final.apk"

        replace_file(source, target)

        assert target.read_bytes() == b"new"
        assert not source.exists()

    def test_overwrites_existing_target(self, tmp_path: Path) -> None:
        source = tmp_path / "new.apk"
        source.write_bytes(b"second version")
        target = tmp_path / "final.apk"
        target.write_bytes(b"first version")

        replace_file(source, target)

        assert target.read_bytes() == b"second version"

    def test_missing_source_leaves_target_alone(self, tmp_path: Path) -> None:
        target = tmp_path / "final.apk"
        target.write_bytes(b"keep me")

        with pytest.raises(FileNotFoundError):
            replace_file(tmp_path / "missing.apk", target)

        assert target.read_bytes() == b"keep me"


class TestFormatSize:
    @pytest.mark.parametrize(
        ("num_bytes", "expected"),
        [
            (0, "0B"),
            (512, "512B"),
            (4300, "4.2K"),
            (17 * 1024 * 1024, "17M"),
            (int(1.3 * 1024 ** 3), "1.3G"),
        ],
    )
    def test_du_style_units(self, num_bytes: int, expected: str) -> None:
        assert format_size(num_bytes) == expected
