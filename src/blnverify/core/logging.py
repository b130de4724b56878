"""Logging for blnverify.

All loggers live under the ``BLN`` prefix:

    BLN             batch progress and summaries
    BLN.chain       why a chain was rejected (DEBUG, shown with ``-v``)
    BLN.symmetry    symmetry violations, printed raw on stdout
    BLN.threshold   solver diagnostics
    BLN.report      batch summary, written to the log file only

Records created through a :class:`BlnLogger` carry the number of the block
being verified, which :class:`BlnFormatter` renders as `` - block N``.
"""

import dataclasses
import functools
import logging
import logging.config
import pathlib
import threading
import typing

LOG_FILENAME = "blnverify.log"

LOGGER_NAMES = ("BLN", "BLN.chain", "BLN.symmetry", "BLN.threshold", "BLN.report")

# bumped on every configuration change so cached level checks refresh
_generation = [0]


def invalidate_level_flags() -> None:
    _generation[0] += 1


@dataclasses.dataclass(slots=True)
class LevelFlag:
    """Truthy when *logger_name* is enabled for *level*.

    ``isEnabledFor`` is only consulted again after the logging configuration
    changed, so the flag is cheap to test inside per-step loops::

        if logger.debug_on:
            logger.debug("step %s", step)
    """

    logger_name: str
    level: int
    _generation: int = dataclasses.field(default=-1, init=False)
    _enabled: bool = dataclasses.field(default=False, init=False)

    def __bool__(self) -> bool:
        if self._generation != _generation[0]:
            self._enabled = logging.getLogger(self.logger_name).isEnabledFor(self.level)
            self._generation = _generation[0]
        return self._enabled


class BlnLogger(logging.Logger):
    """Logger whose records carry the current block number as ``record.block``."""

    _context = threading.local()

    @classmethod
    def current_block(cls) -> int | None:
        return getattr(cls._context, "block", None)

    @classmethod
    def update_block(cls, block: int) -> None:
        cls._context.block = block

    @classmethod
    def reset_block(cls) -> None:
        cls._context.block = None

    @functools.cached_property
    def debug_on(self) -> LevelFlag:
        return LevelFlag(self.name, logging.DEBUG)

    def makeRecord(self, *args, **kwargs) -> logging.LogRecord:
        record = super().makeRecord(*args, **kwargs)
        record.block = self.current_block()
        return record


class BlnFormatter(logging.Formatter):
    """Provides ``%(block_tag)s``: `` - block N`` inside a block, else empty."""

    def format(self, record: logging.LogRecord) -> str:
        block = getattr(record, "block", None)
        record.block_tag = f" - block {block}" if block is not None else ""
        return super().format(record)


def _config(log_file: pathlib.Path, verbose: bool) -> dict[str, typing.Any]:
    console = ["console", "logfile"]
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "bln": {
                "()": BlnFormatter,
                "format": "%(asctime)s - %(name)s - %(levelname)s%(block_tag)s - %(message)s",
            },
            "raw": {"format": "%(message)s"},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": "DEBUG" if verbose else "WARNING",
                "formatter": "bln",
                "stream": "ext://sys.stderr",
            },
            "symmetry": {
                "class": "logging.StreamHandler",
                "level": "INFO",
                "formatter": "raw",
                "stream": "ext://sys.stdout",
            },
            "logfile": {
                "class": "logging.FileHandler",
                "level": "DEBUG",
                "formatter": "bln",
                "filename": log_file.as_posix(),
            },
        },
        "loggers": {
            "BLN": {"level": "INFO", "handlers": console, "propagate": False},
            "BLN.chain": {
                "level": "DEBUG" if verbose else "INFO",
                "handlers": console,
                "propagate": False,
            },
            "BLN.symmetry": {
                "level": "INFO",
                "handlers": ["symmetry", "logfile"],
                "propagate": False,
            },
            "BLN.threshold": {"level": "INFO", "handlers": console, "propagate": False},
            "BLN.report": {"level": "INFO", "handlers": ["logfile"], "propagate": False},
        },
        "root": {"level": "WARNING", "handlers": console},
    }


def configure_loggers(log_dir: str | pathlib.Path, verbose: bool = False) -> None:
    """Install the handlers, writing the log file to *log_dir*.

    With *verbose* the console also shows DEBUG records, in particular the
    reason each rejected chain was rejected.
    """
    log_dir = pathlib.Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(_config(log_dir / LOG_FILENAME, verbose))
    invalidate_level_flags()


def set_level(name: str, level_name: str) -> None:
    """Set logger *name* to the level called *level_name* (``"DEBUG"``, ...)."""
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown logging level: {level_name}")
    getLogger(name).setLevel(level)
    invalidate_level_flags()


def getLogger(name: str) -> BlnLogger:
    """Return the logger called *name* as a :class:`BlnLogger`.

    A plain logger already registered under *name* is replaced; its level,
    handlers and position in the hierarchy are kept.
    """
    plain = logging.getLogger(name)
    if isinstance(plain, BlnLogger):
        return plain
    upgraded = BlnLogger(plain.name, plain.level)
    upgraded.parent = plain.parent
    upgraded.propagate = plain.propagate
    upgraded.disabled = plain.disabled
    upgraded.handlers = list(plain.handlers)
    upgraded.filters = list(plain.filters)

    manager = logging.Logger.manager
    manager.loggerDict[plain.name] = upgraded
    for child in manager.loggerDict.values():
        if isinstance(child, logging.Logger) and child.parent is plain:
            child.parent = upgraded
    return upgraded
