import logging
import os
from collections import OrderedDict
from logging import Logger
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

import structlog

from mongowrap.core.config import CoreSettings
from mongowrap.core.utils import ifnone


def default_formatter(fmt: Optional[str] = None) -> logging.Formatter:
    """Returns a logging formatter with a default format if none is specified."""
    default_fmt = "[%(asctime)s] %(levelname)s: %(name)s: %(message)s"
    return logging.Formatter(fmt or default_fmt)


def setup_logger(
    name: str = "mongowrap",
    *,
    log_dir: Optional[Path] = None,
    logger_level: int = logging.DEBUG,
    stream_level: int = logging.ERROR,
    add_stream_handler: bool = True,
    file_level: int = logging.DEBUG,
    file_mode: str = "a",
    add_file_handler: bool = True,
    propagate: bool = False,
    max_bytes: int = 10 * 1024 * 1024,  # 10 MB
    backup_count: int = 5,
    use_structlog: Optional[bool] = None,
    structlog_json: bool = True,
) -> Logger | structlog.stdlib.BoundLogger:
    """Configure and initialize logging for mongowrap components programmatically.

    Sets up a rotating file handler and a console handler on the given logger. The log file defaults
    to ``{LOGGER_DIR}/{name}.log`` for the package root logger and ``{LOGGER_DIR}/modules/{name}.log``
    for every child logger.

    Args:
        name: Logger name, defaults to "mongowrap".
        log_dir: Custom directory for log file.
        logger_level: Overall logger level.
        stream_level: StreamHandler level (e.g., ERROR).
        add_stream_handler: Whether to add a stream handler.
        file_level: FileHandler level (e.g., DEBUG).
        file_mode: Mode for file handler, default is 'a' (append).
        add_file_handler: Whether to add a file handler.
        propagate: Whether the logger should propagate messages to ancestor loggers.
        max_bytes: Maximum size in bytes before rotating log file.
        backup_count: Number of backup files to retain.
        use_structlog: If True, configure and return a structlog BoundLogger. If None, uses config default.
        structlog_json: If True, render JSON; otherwise use the console/dev renderer.

    Returns:
        Logger | structlog.stdlib.BoundLogger: Configured logger instance.
    """
    default_config = CoreSettings()
    use_structlog = ifnone(use_structlog, default_config.MONGOWRAP_LOGGER.USE_STRUCTLOG)

    if name == "mongowrap":
        child_log_path = f"{name}.log"
    else:
        child_log_path = os.path.join("modules", f"{name}.log")

    if log_dir:
        log_file_path = os.path.join(log_dir, child_log_path)
    elif use_structlog:
        log_file_path = os.path.join(default_config.MONGOWRAP_DIR_PATHS.STRUCT_LOGGER_DIR, child_log_path)
    else:
        log_file_path = os.path.join(default_config.MONGOWRAP_DIR_PATHS.LOGGER_DIR, child_log_path)

    if add_file_handler:
        os.makedirs(Path(log_file_path).parent, exist_ok=True)

    # structlog renders the full line itself, so stdlib handlers only print the message
    formatter = logging.Formatter("%(message)s") if use_structlog else default_formatter()

    logger = logging.getLogger(name)
    logger.handlers.clear()
    logger.setLevel(logger_level)
    logger.propagate = propagate

    if add_stream_handler:
        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(stream_level)
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    if add_file_handler:
        file_handler = RotatingFileHandler(
            filename=str(log_file_path), maxBytes=max_bytes, backupCount=backup_count, mode=file_mode
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if not use_structlog:
        return logger

    renderer = structlog.processors.JSONRenderer() if structlog_json else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _enforce_key_order_processor(["timestamp", "event", "duration_ms", "level", "logger"]),
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    return structlog.get_logger(name)


def _enforce_key_order_processor(key_order: list[str]):
    def _processor(_logger, _method_name, event_dict):
        ordered = OrderedDict()
        for key in key_order:
            if key in event_dict:
                ordered[key] = event_dict.pop(key)
        for k in sorted(event_dict.keys()):
            ordered[k] = event_dict[k]
        return ordered

    return _processor


def get_logger(
    name: str | None = "mongowrap", use_structlog: bool | None = None, **kwargs
) -> logging.Logger | structlog.stdlib.BoundLogger:
    """
    Create or retrieve a named logger instance.

    Names are always rooted at ``mongowrap``; ``get_logger("database.client")`` configures
    ``mongowrap.database.client``. Any ancestor logger that already has handlers is reconfigured
    without a stream handler so propagated records are not printed twice.

    Args:
        name (str): The name of the logger. Defaults to "mongowrap".
        use_structlog (bool): Whether to use structured logging. If None, uses config default.
        **kwargs: Additional keyword arguments to be passed to `setup_logger`.

    Returns:
        logging.Logger | structlog.stdlib.BoundLogger: A configured logger instance.

    Example:
        .. code-block:: python

            from mongowrap.core.logging import get_logger

            logger = get_logger("database.client")
            logger.info("Logger configured with custom settings.")
    """
    if not name:
        name = "mongowrap"

    full_name = name if name.startswith("mongowrap") else f"mongowrap.{name}"
    kwargs.setdefault("propagate", True)

    if kwargs.get("propagate"):
        parts = full_name.split(".")
        parent_name = parts[0]
        if logging.getLogger(parent_name).handlers:
            setup_logger(parent_name, add_stream_handler=False, use_structlog=use_structlog, **kwargs)
        for part in parts[1:-1]:
            parent_name = f"{parent_name}.{part}"
            if logging.getLogger(parent_name).handlers:
                setup_logger(parent_name, add_stream_handler=False, use_structlog=use_structlog, **kwargs)
    return setup_logger(full_name, use_structlog=use_structlog, **kwargs)
