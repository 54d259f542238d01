# src/common/logger.py
"""
Structured logging for the platform services.

Console output is JSON or colored text. With LOG_TO_FILE each service writes
its own size-rotated file ("app_order_service.log") and every service shares
one error log.
"""

from __future__ import annotations

import inspect
import json
import logging
import os
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from src.common.constants import TypeMsg


DEFAULT_LOGGER_NAME = "food_delivery"

_file_handler: logging.Handler | None = None
_error_handler: logging.Handler | None = None
_service_name: str | None = None
_initialized: bool = False

_loggers: dict[str, logging.Logger] = {}


@dataclass(frozen=True)
class LoggingOptions:
    level: str = "DEBUG"
    format: str = "colored"
    to_file: bool = False
    file_path: str = "logs/app.log"
    max_bytes: int = 10 * 1024 * 1024


def _logging_options() -> LoggingOptions:
    # src.config imports the logger indirectly, import lazily
    try:
        from src.config import settings
        section = settings.logging
        return LoggingOptions(
            level=str(section.LOG_LEVEL),
            format=str(section.LOG_FORMAT),
            to_file=bool(section.LOG_TO_FILE),
            file_path=str(section.LOG_FILE_PATH),
            max_bytes=int(section.LOG_MAX_BYTES),
        )
    except (ImportError, AttributeError, TypeError, ValueError):
        return LoggingOptions()


# =============================================================================
# FORMATTERS
# =============================================================================

class JsonFormatter(logging.Formatter):
    """Single-line JSON, one object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if _service_name:
            log_data["service"] = _service_name

        if hasattr(record, "extra_data"):
            log_data["extra"] = record.extra_data

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class ColoredFormatter(logging.Formatter):
    """Console formatter for development."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"
    GRAY = "\033[90m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.GRAY)
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        service = f" {self.GRAY}<{_service_name}>{self.RESET}" if _service_name else ""

        caller_info = ""
        extra_data = getattr(record, "extra_data", None) or {}
        if extra_data.get("caller_function"):
            caller_info = (
                f" {self.GRAY}[{extra_data.get('caller_module')}.{extra_data['caller_function']}() "
                f"{extra_data.get('caller_file')}:{extra_data.get('caller_line')}]{self.RESET}"
            )

        message = f"{timestamp} {color}[{record.levelname}]{self.RESET}{service}{caller_info} {record.getMessage()}"

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return message


def _make_formatter(log_format: str) -> logging.Formatter:
    return JsonFormatter() if log_format == "json" else ColoredFormatter()


# =============================================================================
# FILE HANDLERS
# =============================================================================

class TimestampRotatingFileHandler(RotatingFileHandler):
    """
    Writes to "<name>.log"; on rollover the full file is archived as
    "<name>_<timestamp>.log" and a fresh one is opened.
    """

    def __init__(self, log_dir: Path, name: str, max_bytes: int, encoding: str = "utf-8"):
        self.log_dir = log_dir
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.name_stem = name
        super().__init__(filename=str(log_dir / f"{name}.log"), maxBytes=max_bytes, backupCount=0, encoding=encoding)

    def shouldRollover(self, record: logging.LogRecord) -> bool:
        if self.maxBytes <= 0:
            return False
        if self.stream is None:
            self.stream = self._open()
        self.stream.seek(0, 2)
        return self.stream.tell() >= self.maxBytes

    def doRollover(self) -> None:
        if self.stream:
            self.stream.close()
            self.stream = None

        archive = self.log_dir / f"{self.name_stem}_{datetime.now():%Y-%m-%d_%H-%M-%S}.log"
        if os.path.exists(self.baseFilename):
            try:
                os.rename(self.baseFilename, archive)
            except OSError:
                # file is busy, keep writing into it
                pass

        self.stream = self._open()


def _file_handlers(options: LoggingOptions) -> list[logging.Handler]:
    """Process-wide service log and error log, created on first use."""
    global _file_handler, _error_handler

    log_path = Path(options.file_path)
    if _file_handler is None:
        name = f"{log_path.stem}_{_service_name}" if _service_name else log_path.stem
        _file_handler = TimestampRotatingFileHandler(log_path.parent, name, options.max_bytes)
        _file_handler.setFormatter(_make_formatter(options.format))

    if _error_handler is None:
        _error_handler = TimestampRotatingFileHandler(log_path.parent, "error", options.max_bytes)
        _error_handler.setLevel(logging.ERROR)
        _error_handler.setFormatter(_make_formatter(options.format))

    return [_file_handler, _error_handler]


# =============================================================================
# LOGGER
# =============================================================================

def setup_logging(service_name: str | None = None) -> None:
    """
    Initializes logging for the process. Only the first call has an effect.

    Args:
        service_name: Tags every record and names the log file
    """
    global _initialized, _service_name

    if _initialized:
        return
    _initialized = True
    _service_name = service_name

    get_logger(DEFAULT_LOGGER_NAME)

    for noisy in ("asyncpg", "aio_pika", "aiormq", "httpx", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """Returns a configured logger, cached by name."""
    if name in _loggers:
        return _loggers[name]

    options = _logging_options()

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, options.level.upper(), logging.DEBUG))

    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(_make_formatter(options.format))
    logger.addHandler(console_handler)

    if options.to_file:
        for handler in _file_handlers(options):
            logger.addHandler(handler)

    logger.propagate = False

    _loggers[name] = logger
    return logger


# =============================================================================
# LOGGING HELPERS
# =============================================================================

def _get_caller_info() -> dict[str, Any]:
    """Function, module, file and line of the first caller outside this module."""
    frame = inspect.currentframe()
    try:
        # this function <- log helper <- caller
        caller_frame = frame.f_back.f_back if frame and frame.f_back else None
        while caller_frame is not None and caller_frame.f_globals.get("__name__") == __name__:
            caller_frame = caller_frame.f_back
        if caller_frame is None:
            return {}

        caller_module = inspect.getmodule(caller_frame)
        return {
            "caller_function": caller_frame.f_code.co_name,
            "caller_module": caller_module.__name__ if caller_module else "unknown",
            "caller_file": os.path.basename(caller_frame.f_code.co_filename) or "unknown",
            "caller_line": caller_frame.f_lineno,
        }
    finally:
        del frame


def _record_extra(caller_info: dict[str, Any], extra: dict[str, Any] | None) -> dict[str, Any]:
    return {"extra_data": {**caller_info, **(extra or {})}}


async def log_info(
    message: str,
    *,
    type_msg: TypeMsg = TypeMsg.INFO,
    logger_name: str = DEFAULT_LOGGER_NAME,
    extra: dict[str, Any] | None = None,
) -> None:
    """
    Async logging entry point used across the services.

    Args:
        message: Message text
        type_msg: Level of the message
        logger_name: Logger name
        extra: Additional structured data, e.g. {"order_id": 42}
    """
    logger = get_logger(logger_name)
    emit = getattr(logger, TypeMsg(type_msg).value, logger.info)
    emit(message, extra=_record_extra(_get_caller_info(), extra))


async def log_warning(message: str, logger_name: str = DEFAULT_LOGGER_NAME, extra: dict[str, Any] | None = None) -> None:
    await log_info(message, type_msg=TypeMsg.WARNING, logger_name=logger_name, extra=extra)


async def log_error(
    message: str,
    logger_name: str = DEFAULT_LOGGER_NAME,
    extra: dict[str, Any] | None = None,
    exc_info: bool = False,
) -> None:
    """ERROR level; exc_info attaches the active traceback."""
    logger = get_logger(logger_name)
    logger.error(message, extra=_record_extra(_get_caller_info(), extra), exc_info=exc_info)
