"""structlog events rendered by the stdlib root logger, so app and server logs share handlers."""
from __future__ import annotations
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import List, Optional

import structlog

LOG_FILE = "dashboards.log"

# Applied to structlog events and to plain stdlib records (uvicorn, sqlite helpers) alike
_PRE_CHAIN = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
]


def _formatter(debug: bool) -> structlog.stdlib.ProcessorFormatter:
    if debug:
        render = [structlog.dev.ConsoleRenderer()]
    else:
        render = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_PRE_CHAIN,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *render],
    )


def setup_logging(debug: bool = False, log_dir: Optional[str] = None) -> None:
    """
    Console lines when `debug`, JSON lines otherwise. Everything goes to
    stdout; with `log_dir`, also to a rotating dashboards.log there.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_PRE_CHAIN,
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    file_error = None
    if log_dir:
        try:
            os.makedirs(log_dir, exist_ok=True)
            handlers.append(
                RotatingFileHandler(os.path.join(log_dir, LOG_FILE), maxBytes=10_000_000, backupCount=5, encoding="utf-8")
            )
        except OSError as exc:
            file_error = exc

    formatter = _formatter(debug)
    root = logging.getLogger()
    root.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug else logging.INFO)

    if file_error is not None:
        get_logger(__name__).warning("file_logging_disabled", log_dir=log_dir, error=str(file_error))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
