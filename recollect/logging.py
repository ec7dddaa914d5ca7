import logging
import sys

import structlog

_NOISY_LOGGERS = ("httpx", "httpcore", "aiosqlite", "exa_py")

_shared = [
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="%H:%M:%S"),
]


def _exception_chain(json_output: bool) -> list:
    # ConsoleRenderer formats exc_info itself; JSON needs it rendered to a string first
    return [structlog.processors.format_exc_info] if json_output else []


def _renderer(json_output: bool):
    if json_output:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(level: str = "INFO", json_output: bool = False):
    structlog.configure(
        processors=[*_shared, *_exception_chain(json_output), _renderer(json_output)],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper())),
        logger_factory=structlog.WriteLoggerFactory(file=sys.stderr),
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None):
    return structlog.get_logger(name or "recollect")


def uvicorn_log_config(json_output: bool = False) -> dict:
    """Route uvicorn's stdlib loggers through the structlog renderer."""
    formatter = {
        "()": structlog.stdlib.ProcessorFormatter,
        "processor": _renderer(json_output),
        "foreign_pre_chain": [*_shared, *_exception_chain(json_output)],
    }
    handler = {"formatter": "default", "class": "logging.StreamHandler", "stream": "ext://sys.stderr"}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": formatter},
        "handlers": {"default": handler},
        "loggers": {
            "uvicorn": {"handlers": ["default"], "level": "INFO", "propagate": False},
            "uvicorn.error": {"level": "INFO"},
            "uvicorn.access": {"handlers": ["default"], "level": "INFO", "propagate": False},
        },
    }
