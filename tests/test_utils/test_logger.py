from __future__ import annotations

import io
import sys
import logging
from typing import Generator
from unittest.mock import MagicMock

import pytest

from taginfo.utils.logger import (
    ColoredFormatter,
    SecretMaskingFilter,
    clear_secrets,
    get_logger,
    mask_secret,
    mask_text,
    setup_logging,
    stream_wants_color,
)


@pytest.fixture
def clean_logger_state() -> Generator[None, None, None]:
    """Reset the taginfo logger and registered secrets around a test."""
    root_logger = logging.getLogger("taginfo")
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)
    clear_secrets()

    yield

    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)
    root_logger.propagate = True
    clear_secrets()


@pytest.fixture
def captured_stream() -> io.StringIO:
    return io.StringIO()


def make_record(msg: str, *args: object, level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(
        name="taginfo.test",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=args,
        exc_info=None,
    )


@pytest.mark.unit
class TestColoredFormatter:
    """Tests for ColoredFormatter."""

    def test_color_applied_when_enabled(self) -> None:
        """Test the level name is wrapped in ANSI codes."""
        formatter = ColoredFormatter("%(levelname)s: %(message)s", use_color=True)

        assert formatter.format(make_record("hello")) == "\033[32mINFO\033[0m: hello"

    def test_plain_by_default(self) -> None:
        """Test colors are off unless requested."""
        formatter = ColoredFormatter("%(levelname)s: %(message)s")

        assert formatter.format(make_record("hello")) == "INFO: hello"

    def test_original_record_untouched(self) -> None:
        """Test coloring works on a copy of the record."""
        formatter = ColoredFormatter("%(levelname)s", use_color=True)
        record = make_record("x", level=logging.ERROR)

        formatter.format(record)

        assert record.levelname == "ERROR"

    def test_masks_exception_text(self, clean_logger_state: None) -> None:
        """Test secrets inside tracebacks are masked as well."""
        mask_secret("tok-123")
        formatter = ColoredFormatter("%(message)s")
        try:
            raise ValueError("GET https://x?token=tok-123 failed")
        except ValueError:
            record = make_record("request failed", level=logging.ERROR)
            record.exc_info = sys.exc_info()

        output = formatter.format(record)

        assert "tok-123" not in output
        assert "token=***" in output


@pytest.mark.unit
class TestStreamWantsColor:
    """Tests for stream_wants_color."""

    @pytest.fixture
    def tty(self) -> MagicMock:
        stream = MagicMock()
        stream.isatty.return_value = True
        return stream

    @pytest.mark.parametrize("var", ["NO_COLOR", "CI"])
    def test_environment_disables_color(
        self, var: str, tty: MagicMock, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test NO_COLOR and CI turn colors off even on a terminal."""
        monkeypatch.setenv(var, "1")

        assert stream_wants_color(tty) is False

    def test_terminal(self, tty: MagicMock, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test terminals get color."""
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("CI", raising=False)

        assert stream_wants_color(tty) is True

    def test_not_a_terminal(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test files and buffers get plain text."""
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("CI", raising=False)

        assert stream_wants_color(io.StringIO()) is False

    def test_broken_stream(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test streams whose isatty fails get plain text."""
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("CI", raising=False)
        stream = MagicMock()
        stream.isatty.side_effect = ValueError("closed file")

        assert stream_wants_color(stream) is False


@pytest.mark.unit
class TestSecretMasking:
    """Tests for secret registration and masking."""

    def test_mask_text(self, clean_logger_state: None) -> None:
        """Test registered secrets are replaced."""
        mask_secret("ghp_abc123")

        assert mask_text("token ghp_abc123 used") == "token *** used"

    def test_empty_secret_ignored(self, clean_logger_state: None) -> None:
        """Test empty values are never registered."""
        mask_secret("")
        mask_secret(None)

        assert mask_text("nothing here") == "nothing here"

    def test_longest_secret_first(self, clean_logger_state: None) -> None:
        """Test overlapping secrets do not leave fragments behind."""
        mask_secret("abc")
        mask_secret("abcdef")

        assert mask_text("x abcdef y") == "x *** y"

    def test_filter_masks_formatted_message(self, clean_logger_state: None) -> None:
        """Test the filter masks secrets passed as arguments."""
        mask_secret("s3cr3t")
        record = make_record("Authorization: token %s", "s3cr3t")

        assert SecretMaskingFilter().filter(record) is True
        assert record.getMessage() == "Authorization: token ***"

    def test_setup_logging_masks_output(
        self, clean_logger_state: None, captured_stream: io.StringIO
    ) -> None:
        """Test handlers installed by setup_logging mask secrets."""
        setup_logging(level=logging.INFO, stream=captured_stream)
        mask_secret("hunter2")

        get_logger("test").info("password is %s", "hunter2")

        assert "hunter2" not in captured_stream.getvalue()
        assert "password is ***" in captured_stream.getvalue()


@pytest.mark.unit
class TestSetupLogging:
    """Tests for setup_logging."""

    def test_configures_root_logger(
        self, clean_logger_state: None, captured_stream: io.StringIO
    ) -> None:
        """Test one handler at the requested level is installed."""
        setup_logging(level=logging.DEBUG, stream=captured_stream)

        root_logger = logging.getLogger("taginfo")
        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) == 1
        assert root_logger.propagate is False

    def test_reconfiguring_replaces_handler(
        self, clean_logger_state: None, captured_stream: io.StringIO
    ) -> None:
        """Test repeated calls do not stack handlers."""
        setup_logging(stream=captured_stream)
        setup_logging(stream=captured_stream)

        assert len(logging.getLogger("taginfo").handlers) == 1

    def test_level_filters_output(
        self, clean_logger_state: None, captured_stream: io.StringIO
    ) -> None:
        """Test messages below the level are dropped."""
        setup_logging(level=logging.WARNING, stream=captured_stream)
        logger = get_logger("resolver")

        logger.info("hidden")
        logger.warning("shown")

        output = captured_stream.getvalue()
        assert "hidden" not in output
        assert "WARNING: shown" in output

    def test_verbose_format_includes_logger_name(
        self, clean_logger_state: None, captured_stream: io.StringIO
    ) -> None:
        """Test verbose formatting adds the logger name."""
        setup_logging(level=logging.INFO, verbose=True, stream=captured_stream)

        get_logger("sources.github").info("listing")

        assert "taginfo.sources.github" in captured_stream.getvalue()


@pytest.mark.unit
class TestGetLogger:
    """Tests for get_logger."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            (None, "taginfo"),
            ("taginfo", "taginfo"),
            ("http", "taginfo.http"),
            ("taginfo.sources", "taginfo.sources"),
        ],
    )
    def test_names(self, name, expected: str, clean_logger_state: None) -> None:
        """Test names are placed under the taginfo namespace."""
        assert get_logger(name).name == expected

    def test_library_safe_default(self, clean_logger_state: None) -> None:
        """Test a NullHandler is attached before logging is configured."""
        logger = get_logger("fresh.module")

        assert any(isinstance(h, logging.NullHandler) for h in logger.handlers)

