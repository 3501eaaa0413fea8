"""Centralized logging for pyvfkit.

Library logging conventions (Python docs, PEP 282):
- Attach NullHandler to library root logger
- Never add other handlers -- that's the application's job
- Support PYVFKIT_LOG_LEVEL env var for level control
- Provide configure_logging() for the pyvfkit command

Encoding is synchronous and logs a handful of records per run, so the CLI
handler writes straight to stderr through click.echo().

CLI output format:
    DEBUG [2026-02-25 10:02:54] pyvfkit.cmdline - Built vfkit command line

References:
- https://docs.python.org/3/howto/logging.html#configuring-logging-for-a-library
"""

import logging
import os

import click

LIBRARY_LOGGER_NAME: str = "pyvfkit"

logging.getLogger(LIBRARY_LOGGER_NAME).addHandler(logging.NullHandler())

# PYVFKIT_LOG_LEVEL=DEBUG|INFO|WARNING|ERROR; unknown names are ignored
_env_level = logging.getLevelNamesMapping().get(os.environ.get("PYVFKIT_LOG_LEVEL", "").strip().upper())
if _env_level:
    logging.getLogger(LIBRARY_LOGGER_NAME).setLevel(_env_level)


class ClickEchoHandler(logging.Handler):
    """Write records to stderr via click.echo, dimmed so they stand apart from argv output."""

    def __init__(self) -> None:
        super().__init__()
        self.setFormatter(
            logging.Formatter(fmt="%(levelname)s [%(asctime)s] %(name)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
        )

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(click.style(self.format(record), dim=True), err=True)
        except Exception:  # noqa: BLE001
            self.handleError(record)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module name (pass __name__)."""
    return logging.getLogger(name)


def configure_logging(*, level: int | str | None = None, quiet: bool = False) -> None:
    """Send pyvfkit records to stderr for the command-line entry point.

    Installs one ClickEchoHandler on the library logger (repeat calls do
    not stack handlers), then applies the level.

    Args:
        level: Log level (e.g. logging.DEBUG, "WARNING"). Overrides PYVFKIT_LOG_LEVEL.
        quiet: Only report errors. Wins over level.
    """
    lib_logger = logging.getLogger(LIBRARY_LOGGER_NAME)

    if not any(isinstance(h, ClickEchoHandler) for h in lib_logger.handlers):
        lib_logger.addHandler(ClickEchoHandler())

    if quiet:
        lib_logger.setLevel(logging.ERROR)
    elif level is not None:
        lib_logger.setLevel(level)
