"""structlog setup: JSON lines in deployed environments, console output locally."""

import logging

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from wordgame.config import Settings

# Third-party loggers that flood INFO with per-statement or per-request lines
_NOISY_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncio")


def _app_context(environment: str, version: str) -> Processor:
    def add_app_context(_logger: WrappedLogger, _name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("app", "tamil-word-game")
        event_dict.setdefault("env", environment)
        event_dict.setdefault("version", version)
        return event_dict

    return add_app_context


def setup_logging(settings: Settings) -> None:
    """Configure structlog once per process from ``log_format`` and ``log_level``."""
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if settings.log_format == "json":
        processors += [
            _app_context(settings.environment, settings.app_version),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]
    else:
        processors += [
            structlog.processors.StackInfoRenderer(),
            structlog.dev.ConsoleRenderer(),
        ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=level, format="%(message)s")
    logging.getLogger().setLevel(level)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
