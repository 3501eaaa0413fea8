"""Tests for pyvfkit logging setup."""

import logging
import logging.handlers
from collections.abc import Iterator

import pytest

from pyvfkit._logging import LIBRARY_LOGGER_NAME, ClickEchoHandler, configure_logging, get_logger
from pyvfkit.cmdline import build_cmdline
from pyvfkit.models import new_efi_bootloader, new_virtual_machine


@pytest.fixture
def lib_logger() -> Iterator[logging.Logger]:
    """Library logger with its handlers and level restored after the test."""
    logger = logging.getLogger(LIBRARY_LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_null_handler_installed_on_import(self, lib_logger: logging.Logger) -> None:
        assert any(isinstance(h, logging.NullHandler) for h in lib_logger.handlers)

    def test_installs_single_click_handler(self, lib_logger: logging.Logger) -> None:
        configure_logging()
        configure_logging()
        handlers = [h for h in lib_logger.handlers if isinstance(h, ClickEchoHandler)]
        assert len(handlers) == 1

    def test_handler_is_synchronous(self, lib_logger: logging.Logger) -> None:
        """No queue or listener thread sits between the logger and stderr."""
        configure_logging()
        assert not any(isinstance(h, logging.handlers.QueueHandler) for h in lib_logger.handlers)

    def test_level(self, lib_logger: logging.Logger) -> None:
        configure_logging(level=logging.DEBUG)
        assert lib_logger.level == logging.DEBUG

    def test_quiet_wins_over_level(self, lib_logger: logging.Logger) -> None:
        configure_logging(level=logging.DEBUG, quiet=True)
        assert lib_logger.level == logging.ERROR

    def test_module_loggers_are_children(self) -> None:
        assert get_logger("pyvfkit.cmdline").parent is logging.getLogger(LIBRARY_LOGGER_NAME)


class TestClickEchoHandler:
    """Tests for records reaching stderr."""

    def test_debug_record_written_to_stderr(
        self, lib_logger: logging.Logger, capsys: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(level=logging.DEBUG)
        build_cmdline(new_virtual_machine(1, 0, new_efi_bootloader("/vm/efi.store")))
        err = capsys.readouterr().err
        assert "DEBUG" in err
        assert "pyvfkit.cmdline - Built vfkit command line" in err
