"""structlog setup for the dashboard process.

Engine, runner and fetcher events go through structlog; uvicorn and ccxt
log through the stdlib and are rendered by the same root handler, so one
process writes one stream in one format.
"""

import logging

import structlog

#: Stdlib loggers of libraries we run under. Their chatter (ccxt request
#: traces, uvicorn access lines) is held at WARNING unless our own level
#: is stricter.
THIRD_PARTY_LOGGERS: tuple[str, ...] = (
    "ccxt",
    "uvicorn",
    "uvicorn.error",
    "uvicorn.access",
    "httpx",
)


def _build_renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def setup_logging(log_level: str = "INFO", log_format: str = "console") -> None:
    """Route structlog and stdlib logging through one root handler.

    Args:
        log_level: Root level name (AppSettings.log_level / LOG_LEVEL).
        log_format: "json" for machine-readable lines, anything else for
            the coloured console renderer (AppSettings.log_format /
            LOG_FORMAT).
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    structlog.configure(
        processors=[
            *pre_chain,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _build_renderer(log_format.lower()),
        ],
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger with the given name."""
    return structlog.get_logger(name)
