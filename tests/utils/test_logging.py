# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for the logger factory.

We verify:
  - text output is one readable line with extras as key=value
  - JSON output is valid and carries ts, level, module, msg
  - log levels filter correctly
  - configure_logging re-levels and re-formats existing loggers
"""

import json
import logging
from pathlib import Path

import pytest

from apkship.logging.logger import configure_logging, get_logger


@pytest.fixture(autouse=True)
def _reset_loggers() -> None:
    """
    Clear test logger handlers between tests so get_logger's handler-stacking
    guard doesn't interfere with test isolation, and undo whatever
    configure_logging did to the module loggers.
    """
    yield  # type: ignore[misc]
    for name in list(logging.Logger.manager.loggerDict):
        if not name.startswith("apkship"):
            continue
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            if name.startswith("apkship.test") or isinstance(handler, logging.FileHandler):
                handler.close()
                logger.removeHandler(handler)
    configure_logging()


class TestTextOutput:
    def test_message_and_level(self, capsys: pytest.CaptureFixture[str]) -> None:
        logger = get_logger("apkship.test.text", log_level="INFO")
        logger.info("Keystore created")
        captured = capsys.readouterr()

        assert captured.out.strip() == "INFO  Keystore created"

    def test_extras_as_key_value(self, capsys: pytest.CaptureFixture[str]) -> None:
        logger = get_logger("apkship.test.text_extra", log_level="INFO")
        logger.info("Found signer", extra={"signer": "/sdk/apksigner", "source": "PATH"})
        captured = capsys.readouterr()

        assert captured.out.strip() == "INFO  Found signer signer=/sdk/apksigner source=PATH"


class TestJsonOutput:
    def test_mandatory_fields_are_present(self, capsys: pytest.CaptureFixture[str]) -> None:
        logger = get_logger("apkship.test.fields", log_level="INFO", log_format="json")
        logger.info("test message")
        captured = capsys.readouterr()

        parsed = json.loads(captured.out.strip())
        assert "ts" in parsed
        assert parsed["level"] == "INFO"
        assert parsed["module"] == "apkship.test.fields"
        assert parsed["msg"] == "test message"

    def test_extra_fields_are_included(self, capsys: pytest.CaptureFixture[str]) -> None:
        logger = get_logger("apkship.test.extra", log_level="DEBUG", log_format="json")
        logger.info("APK built", extra={"size": 1024, "stage": "build"})
        captured = capsys.readouterr()

        parsed = json.loads(captured.out.strip())
        assert parsed["size"] == 1024
        assert parsed["stage"] == "build"


class TestLogLevelFiltering:
    def test_debug_messages_hidden_at_info_level(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        logger = get_logger("apkship.test.level_filter", log_level="INFO")
        logger.debug("this should not appear")
        captured = capsys.readouterr()
        assert captured.out.strip() == ""

    def test_info_messages_shown_at_info_level(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        logger = get_logger("apkship.test.level_show", log_level="INFO")
        logger.info("this should appear")
        captured = capsys.readouterr()
        assert "this should appear" in captured.out


class TestFileOutput:
    def test_logs_are_written_to_file(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "release.log"
        logger = get_logger(
            "apkship.test.file_output", log_level="INFO", log_file=log_file, log_format="json"
        )
        logger.info("file log test")

        content = log_file.read_text(encoding="utf-8")
        parsed = json.loads(content.strip())
        assert parsed["msg"] == "file log test"


class TestConfigureLogging:
    def test_relevels_existing_loggers(self, capsys: pytest.CaptureFixture[str]) -> None:
        logger = get_logger("apkship.test.relevel", log_level="INFO")
        configure_logging(log_level="DEBUG")
        logger.debug("now visible")
        captured = capsys.readouterr()

        assert "now visible" in captured.out

    def test_switches_format(self, capsys: pytest.CaptureFixture[str]) -> None:
        logger = get_logger("apkship.test.reformat", log_level="INFO")
        configure_logging(log_level="INFO", log_format="json")
        logger.info("as json")
        captured = capsys.readouterr()

        assert json.loads(captured.out.strip().splitlines()[-1])["msg"] == "as json"

    def test_adds_file_handler_once(self, tmp_path: Path) -> None:
        log_file = tmp_path / "run.log"
        logger = get_logger("apkship.test.add_file", log_level="INFO")
        configure_logging(log_file=log_file)
        configure_logging(log_file=log_file)
        logger.info("once")

        file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1
        assert log_file.read_text(encoding="utf-8").count("once") == 1

    def test_ignores_foreign_loggers(self) -> None:
        foreign = logging.getLogger("someone.else")
        foreign.setLevel(logging.WARNING)
        configure_logging(log_level="DEBUG")
        assert foreign.level == logging.WARNING


class TestInvalidSettings:
    def test_invalid_level_raises_value_error(self) -> None:
        with pytest.raises(ValueError, match="Invalid log level"):
            get_logger("apkship.test.invalid", log_level="INVALID")

    def test_invalid_format_raises_value_error(self) -> None:
        with pytest.raises(ValueError, match="Invalid log format"):
            get_logger("apkship.test.invalid_format", log_format="xml")
