"""
Logging configuration for stylectl.

Provides centralized logging setup with verbosity levels:
- 0 (default): WARNING - errors and warnings only
- 1 (-d):      INFO - resolved config source, preset, reporter, file counts
- 2 (-dd):     DEBUG - per-file progress and rule set details
- 3+ (-ddd):   TRACE - everything (per-rule timings, token counts)

Log verbosity is independent of the ``--verbose`` flag, which only
controls whether rule names are printed next to violations.
"""

import logging
import sys
from typing import Optional

# Custom TRACE level (more verbose than DEBUG)
TRACE = 5
logging.addLevelName(TRACE, "TRACE")


def trace(self, message, *args, **kwargs):
    """Log at TRACE level."""
    if self.isEnabledFor(TRACE):
        self._log(TRACE, message, args, **kwargs)


# Add trace method to Logger class
logging.Logger.trace = trace


class FileLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that prefixes messages with the file being checked.

    Usage:
        logger = FileLoggerAdapter(get_logger("stylectl.core.checker"), "src/app.py")
        logger.debug("parsed")  # Logs: [src/app.py] parsed
    """

    def __init__(self, logger: logging.Logger, path: str):
        super().__init__(logger, {})
        self.path = path

    def process(self, msg, kwargs):
        return f"[{self.path}] {msg}", kwargs

    def trace(self, msg, *args, **kwargs):
        if self.isEnabledFor(TRACE):
            self.log(TRACE, msg, *args, **kwargs)


def setup_logging(verbosity: int = 0, quiet: bool = False) -> logging.Logger:
    """Configure logging based on verbosity level.

    Args:
        verbosity: Number of -d flags (0=WARNING, 1=INFO, 2=DEBUG, 3+=TRACE)
        quiet: If True, suppress all output except errors

    Returns:
        The configured root logger for stylectl
    """
    if quiet:
        level = logging.ERROR
    elif verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    elif verbosity == 2:
        level = logging.DEBUG
    else:  # verbosity >= 3
        level = TRACE

    logger = logging.getLogger("stylectl")
    logger.setLevel(level)

    logger.handlers.clear()

    # Logs go to stderr so reporter output on stdout stays machine-readable
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    if verbosity >= 2:
        fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        datefmt = "%H:%M:%S"
    elif verbosity == 1:
        fmt = "[%(levelname)s] %(message)s"
        datefmt = None
    else:
        fmt = "%(message)s"
        datefmt = None

    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    logger.addHandler(handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger for a module.

    Args:
        name: Module name (e.g., "stylectl.core.checker").
              If None, returns the root stylectl logger.

    Returns:
        Logger instance
    """
    if name is None:
        return logging.getLogger("stylectl")
    return logging.getLogger(name)


def get_file_logger(name: str, path: str) -> FileLoggerAdapter:
    """Get a logger that tags every message with a checked file path."""
    return FileLoggerAdapter(get_logger(name), path)
