from __future__ import annotations

import logging
import os
from pathlib import Path

DEFAULT_LOG_PATH = "~/.cache/pass-cli-installer/install.log"

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


class ConsoleFormatter(logging.Formatter):
    """One line per record; tracebacks only go to the log file."""

    def format(self, record: logging.LogRecord) -> str:
        bare = logging.makeLogRecord(record.__dict__)
        bare.exc_info = None
        bare.exc_text = None
        return super().format(bare)


def _open_log_file(requested: str) -> tuple[logging.Handler, str]:
    try:
        Path(requested).parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(requested), requested
    except OSError:
        fallback = str(Path.cwd() / "pass-cli-installer.log")
        return logging.FileHandler(fallback), fallback


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Send installer logs to ``log_path`` (``~`` expanded) and the console.

    The file gets every record at ``level`` and up, with tracebacks; the
    console only warnings and errors, without tracebacks, so it does not
    drown the CLI's own output. An unwritable ``log_path`` falls back to
    ``./pass-cli-installer.log``. Only the first call configures anything.

    Returns the log file actually in use.
    """

    root = logging.getLogger()
    if getattr(root, "_pass_cli_log_path", None):
        return root._pass_cli_log_path

    root.setLevel(level)
    file_handler, chosen_path = _open_log_file(os.path.expanduser(log_path))
    file_handler.setFormatter(logging.Formatter(fmt=_LOG_FORMAT, datefmt=_DATE_FORMAT))
    root.addHandler(file_handler)

    if also_console:
        console = logging.StreamHandler()
        console.setLevel(logging.WARNING)
        console.setFormatter(ConsoleFormatter(fmt=_LOG_FORMAT, datefmt=_DATE_FORMAT))
        root.addHandler(console)

    root._pass_cli_log_path = chosen_path

    logging.getLogger(__name__).info("Logging to %s (requested %s)", chosen_path, log_path)
    return chosen_path
