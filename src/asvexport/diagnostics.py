"""
Diagnostics sink: timestamped log records to stdout and an append-only log file.

Each record reads `[yyyy-MM-dd HH:mm:ss] message`. Records carrying an exception
add its message, stack trace and inner cause. File records are separated by a
blank line. Writing the log file never raises.
"""

from __future__ import annotations

import logging
import sys
import traceback
from pathlib import Path
from typing import Optional

LOG_FORMAT = "[%(asctime)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(__name__)


class DiagnosticsFormatter(logging.Formatter):
    """Formats attached exceptions as message, stack trace and inner cause."""

    def __init__(self):
        super().__init__(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    def formatException(self, ei) -> str:
        _, exc, tb = ei
        lines = [f"Exception: {exc}"]
        stack = "".join(traceback.format_tb(tb)).rstrip() if tb else ""
        lines.append(f"Stack Trace: {stack}")
        inner = None
        if exc is not None:
            inner = exc.__cause__
            if inner is None and not exc.__suppress_context__:
                inner = exc.__context__
        if inner is not None:
            lines.append(f"Inner Exception: {inner}")
        return "\n".join(lines)


class DiagnosticsFileHandler(logging.FileHandler):
    """
    Append-mode file handler that swallows its own I/O failures.

    The file is opened lazily on first emit; an unopenable path leaves the
    handler inert instead of breaking the run that is being logged.
    """

    terminator = "\n\n"

    def __init__(self, filename: Path):
        super().__init__(filename, mode="a", encoding="utf-8", delay=True)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            super().emit(record)
        except Exception:
            self.handleError(record)

    def handleError(self, record: logging.LogRecord) -> None:
        # Log file failures must not surface; stdout still carries the record.
        pass


def setup_logging(log_file: Optional[Path], verbose: bool = False) -> None:
    """
    Configure root logging for one run.

    Args:
        log_file: Append-only diagnostics file; None logs to stdout only
        verbose: Enable debug-level logging if True
    """
    level = logging.DEBUG if verbose else logging.INFO
    formatter = DiagnosticsFormatter()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        handlers.append(DiagnosticsFileHandler(log_file))
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)


def record(message: str, error: Optional[BaseException] = None, log: logging.Logger = logger) -> None:
    """Log a diagnostics event, at error level when an exception is attached."""
    if error is None:
        log.info(message)
    else:
        log.error(message, exc_info=(type(error), error, error.__traceback__))


def install_exception_hook() -> None:
    """Log any exception escaping the entry point before the interpreter exits non-zero."""
    previous_hook = sys.excepthook

    def exception_hook(exc_type, exc, tb) -> None:
        if issubclass(exc_type, KeyboardInterrupt):
            previous_hook(exc_type, exc, tb)
            return
        logging.getLogger("asvexport").error("Unhandled Exception", exc_info=(exc_type, exc, tb))

    sys.excepthook = exception_hook
