"""
Central registry of the server's loggers.

Loggers are declared at import time with LOGGING_PROVIDER.new_logger() and configured once by
LOGGING_PROVIDER.init_logging() after the settings have been loaded. Messages logged before that go
to the default handlers of the logging module.
"""

import logging
import sys
from pathlib import Path
from types import TracebackType

from .settings import LOG_FILE
from .settings import VERBOSE

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class LoggingProvider:
    """Creates loggers and attaches handlers to them once the configuration is known."""

    def __init__(self) -> None:
        self.loggers: dict[str, logging.Logger] = {}
        self.console_loggers: set[str] = set()
        self.exception_loggers: list[logging.Logger] = []
        self.log_file: Path | None = None
        self.level = logging.INFO
        self.initialized = False

    def new_logger(self, name: str, log_to_console: bool = True, hook_exception: bool = False) -> logging.Logger:
        """
        Declare a named logger.

        log_to_console: Also write this logger's records to stderr (in addition to the log file, if any).
        hook_exception: Report uncaught exceptions through this logger.
        """
        if name in self.loggers:
            raise ValueError(f"Logger {name!r} declared twice")

        logger = logging.getLogger(name)
        logger.propagate = False
        self.loggers[name] = logger
        if log_to_console:
            self.console_loggers.add(name)
        if hook_exception:
            self.exception_loggers.append(logger)
            sys.excepthook = self._log_uncaught_exception

        if self.initialized:
            self._configure(logger)
        return logger

    def init_logging(self, log_file: Path | None = None) -> None:
        """
        Attach handlers to all declared loggers.

        log_file: Overrides the log-file setting (used by the tests).
        """
        self.log_file = log_file if log_file is not None else LOG_FILE.get()
        self.level = logging.DEBUG if VERBOSE.get() else logging.INFO

        if self.log_file is not None:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)

        self.initialized = True
        for logger in self.loggers.values():
            self._configure(logger)

    def _configure(self, logger: logging.Logger) -> None:
        "Replace the handlers of one logger according to the current configuration."
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

        logger.setLevel(self.level)
        formatter = logging.Formatter(LOG_FORMAT)

        if self.log_file is not None:
            file_handler = logging.FileHandler(self.log_file, encoding="utf-8")
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        # stderr only: stdout is reserved for protocol messages
        if logger.name in self.console_loggers and (self.log_file is None or self.level == logging.DEBUG):
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

    def _log_uncaught_exception(
        self, exc_type: type[BaseException], exc: BaseException, tb: TracebackType | None
    ) -> None:
        "sys.excepthook replacement."
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc, tb)
            return
        for logger in self.exception_loggers:
            logger.critical("Uncaught exception", exc_info=(exc_type, exc, tb))


LOGGING_PROVIDER = LoggingProvider()
