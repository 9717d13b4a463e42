"""
Logging setup for the dashboard.

All loggers live under the "tickerdash" namespace. Console output goes to
stderr so CLI output on stdout stays clean; with log_to_file enabled a
rotating plain-text log and a JSON-lines log sit side by side.
"""

import json
import logging
import logging.config
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

LOGGER_NAMESPACE = "tickerdash"

_ROTATE_BYTES = 5 * 1024 * 1024
_ROTATE_BACKUPS = 3

_FORMATTERS: Dict[str, Dict[str, Any]] = {
    "console": {
        "format": "%(asctime)s %(levelname)-7s %(name)s | %(message)s",
        "datefmt": "%H:%M:%S",
    },
    "file": {
        "format": "%(asctime)s %(levelname)-7s %(name)s [%(funcName)s:%(lineno)d] %(message)s",
        "datefmt": "%Y-%m-%d %H:%M:%S",
    },
}

# Noisy third-party loggers pulled by yfinance
_QUIET_LOGGERS = ("yfinance", "urllib3", "requests", "peewee")

# Attributes every LogRecord has; anything else came in through extra=
_STANDARD_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


def structured_log_path(log_file_path: str) -> str:
    """dashboard.log -> dashboard.jsonl next to it."""
    return str(Path(log_file_path).with_suffix(".jsonl"))


def setup_logging(
    level: str = "INFO",
    log_to_file: bool = False,
    log_file_path: str = "logs/tickerdash.log",
    enable_structured_logging: bool = True
) -> None:
    """
    Configure the tickerdash loggers.

    Args:
        level: Level for the package loggers and the console handler
        log_to_file: Also write rotating log files
        log_file_path: Plain-text log file; the JSON log uses the same stem
        enable_structured_logging: Write the JSON-lines log when logging to file
    """
    if log_to_file:
        Path(log_file_path).parent.mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(
        get_logging_config(level.upper(), log_to_file, log_file_path, enable_structured_logging)
    )

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _rotating_handler(path: str, formatter: str) -> Dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": "DEBUG",
        "formatter": formatter,
        "filename": path,
        "maxBytes": _ROTATE_BYTES,
        "backupCount": _ROTATE_BACKUPS,
        "encoding": "utf-8",
    }


def get_logging_config(
    level: str,
    log_to_file: bool,
    log_file_path: str,
    enable_structured_logging: bool
) -> Dict[str, Any]:
    """Build the dictConfig mapping."""
    formatters = dict(_FORMATTERS)
    handlers: Dict[str, Dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": "console",
            "stream": sys.stderr,
        }
    }
    package_handlers: List[str] = ["console"]

    if log_to_file:
        handlers["file"] = _rotating_handler(log_file_path, "file")
        package_handlers.append("file")

        if enable_structured_logging:
            formatters["json"] = {"()": StructuredFormatter}
            handlers["json_file"] = _rotating_handler(structured_log_path(log_file_path), "json")
            package_handlers.append("json_file")

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "handlers": handlers,
        "root": {"level": "WARNING", "handlers": ["console"]},
        "loggers": {
            LOGGER_NAMESPACE: {
                "level": level,
                "handlers": package_handlers,
                "propagate": False,
            }
        },
    }


class StructuredFormatter(logging.Formatter):
    """
    One JSON object per line.

    Values passed through extra= are collected under "extra"; exceptions
    are rendered under "exception".
    """

    def format(self, record):
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "where": f"{record.module}.{record.funcName}:{record.lineno}",
            "message": record.getMessage(),
        }

        extra = {k: v for k, v in vars(record).items() if k not in _STANDARD_RECORD_ATTRS}
        if extra:
            payload["extra"] = extra

        if record.exc_info and record.exc_info[0] is not None:
            payload["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(payload, default=str)


def get_logger(name: str) -> logging.Logger:
    """Logger inside the tickerdash namespace (pass __name__)."""
    if name == LOGGER_NAMESPACE or name.startswith(LOGGER_NAMESPACE + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


# Helpers for the recurring log lines

def log_quote_fetch(logger: logging.Logger, symbol: str, outcome: str, **kwargs):
    """outcome is 'resolved', 'unknown' or 'failed'; failures log at WARNING."""
    logger.log(
        logging.WARNING if outcome == "failed" else logging.INFO,
        f"Quote {outcome}: {symbol}",
        extra={"operation": "quote_fetch", "symbol": symbol, "outcome": outcome, **kwargs},
    )


def log_widget_event(logger: logging.Logger, event: str, widget_id: str, **kwargs):
    logger.info(
        f"Widget {widget_id} {event}",
        extra={"operation": "widget_event", "event": event, "widget_id": widget_id, **kwargs},
    )


def log_error_with_context(logger: logging.Logger, error: Exception, context: Dict[str, Any]):
    """Log an exception with its traceback and the state it happened in."""
    logger.error(
        f"{type(error).__name__}: {error}",
        extra={"operation": "error", "error_type": type(error).__name__, "context": context},
        exc_info=error,
    )
