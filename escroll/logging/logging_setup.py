"""Logging for the export API and runner.

Everything logs to stderr and to <ROOT_DIR>/logs/app.log; stdout is left to
the NDJSON written by services.scroll_export. Timestamps use TIMEZONE, the
level follows LOG_LEVEL ("info" or "debug").
"""

from datetime import datetime
from pytz import timezone
import logging.config
import logging
import os
from logging import Logger


debug_mode = os.getenv("LOG_LEVEL", "info").lower() == "debug"
loglevel = logging.INFO if not debug_mode else logging.DEBUG

_ANSI_RESET = "\033[0m"
_COLOR_MAP: dict[str, str] = {
    "cyan":    "\033[36m",
    "green":   "\033[32m",
    "yellow":  "\033[33m",
    "red":     "\033[31m",
    "magenta": "\033[35m",
    "blue":    "\033[34m",
    "white":   "\033[37m",
}
_LEVEL_PREFIX: dict[int, str] = {
    logging.ERROR: "⛔ ",
    logging.CRITICAL: "⛔ ",
    logging.WARNING: "⚠️ ",
}


class TimezoneFormatter(logging.Formatter):
    """Formats timestamps in a fixed timezone and marks warnings and errors.

    A failed scroll ("At least one shard failed (2/10)") and a premature
    "Read 0 (1/5)" stand out from the per-page progress lines this way.
    """

    def __init__(self, tz_name, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.tz = timezone(tz_name)

    def formatTime(self, record, datefmt=None):
        dt = datetime.fromtimestamp(record.created, self.tz)
        return dt.strftime(datefmt) if datefmt else dt.isoformat()

    def format(self, record):
        # console and file handler format the same record, work on a copy
        record = logging.makeLogRecord(record.__dict__)
        record.msg = _LEVEL_PREFIX.get(record.levelno, "") + record.getMessage()
        record.args = ()
        return super().format(record)


class ColoredFormatter(TimezoneFormatter):
    """Console formatter coloring records logged with ``color=<name>``."""

    def format(self, record) -> str:
        line = super().format(record)
        ansi = _COLOR_MAP.get(getattr(record, "color", None) or "", "")
        return f"{ansi}{line}{_ANSI_RESET}" if ansi else line


class ColorLogger:
    """Wraps :class:`logging.Logger`, adding an optional ``color=`` keyword.

    Usage::

        logger.info("Scroll export API ready.", color="green")

    Only the console handler renders the color; app.log stays plain.
    """

    def __init__(self, logger: Logger):
        self._logger = logger

    def _log(self, level: int, msg, args, color: str | None, kwargs: dict) -> None:
        if color is not None:
            kwargs["extra"] = {**(kwargs.get("extra") or {}), "color": color}
        kwargs.setdefault("stacklevel", 3)
        self._logger.log(level, msg, *args, **kwargs)

    def debug(self, msg, *args, color: str | None = None, **kwargs):
        self._log(logging.DEBUG, msg, args, color, kwargs)

    def info(self, msg, *args, color: str | None = None, **kwargs):
        self._log(logging.INFO, msg, args, color, kwargs)

    def warning(self, msg, *args, color: str | None = None, **kwargs):
        self._log(logging.WARNING, msg, args, color, kwargs)

    def error(self, msg, *args, color: str | None = None, **kwargs):
        self._log(logging.ERROR, msg, args, color, kwargs)

    def critical(self, msg, *args, color: str | None = None, **kwargs):
        self._log(logging.CRITICAL, msg, args, color, kwargs)

    def exception(self, msg, *args, color: str | None = None, **kwargs):
        kwargs.setdefault("exc_info", True)
        self._log(logging.ERROR, msg, args, color, kwargs)

    def log(self, level: int, msg, *args, color: str | None = None, **kwargs):
        self._log(level, msg, args, color, kwargs)

    def __getattr__(self, name):
        """Delegate everything else (setLevel, handlers, ...) to the wrapped logger."""
        return getattr(self._logger, name)


def setup_logging() -> ColorLogger:
    log_dir = os.path.join(os.getenv("ROOT_DIR", os.getcwd()), "logs")
    tz_name = os.getenv("TIMEZONE", "Europe/Berlin")
    os.makedirs(log_dir, exist_ok=True)

    line_format = "%(asctime)s - %(levelname)s - %(message)s"
    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "()": TimezoneFormatter,
                "format": line_format,
                "datefmt": "%Y-%m-%d %H:%M:%S",
                "tz_name": tz_name,
            },
            "colored": {
                "()": ColoredFormatter,
                "format": line_format,
                "datefmt": "%Y-%m-%d %H:%M:%S",
                "tz_name": tz_name,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "colored",
                "level": loglevel,
                "stream": "ext://sys.stderr",
            },
            "file": {
                "class": "logging.FileHandler",
                "formatter": "standard",
                "level": loglevel,
                "filename": os.path.join(log_dir, "app.log"),
                "encoding": "utf-8",
            },
        },
        "root": {
            "handlers": ["console", "file"],
            "level": loglevel,
        },
    }

    logging.config.dictConfig(logging_config)

    # one line per scroll page is enough, hide httpx's per-request lines
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug_mode else logging.WARNING)

    return ColorLogger(logging.getLogger("escroll"))
