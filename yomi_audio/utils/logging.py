"""structlog setup for the audio server.

Two outputs share one processor chain:

    json_output=True   -> one JSON object per line (production)
    json_output=False  -> coloured key=value lines (development)

Records emitted through the standard ``logging`` module (uvicorn, httpx,
aiosqlite) are rendered by the same chain via ProcessorFormatter.  The
per-request chatter of the HTTP client libraries is held at WARNING so the
request log stays one line per request.
"""

import logging
import sys

import structlog

_QUIET_LOGGERS = ("httpx", "httpcore", "aiosqlite")


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
    ]


def _renderer(json_output: bool) -> structlog.types.Processor:
    if json_output:
        return structlog.processors.JSONRenderer(ensure_ascii=False)
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def _route_stdlib(level: int, processors: list, renderer: structlog.types.Processor) -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=processors,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def configure_logging(log_level: str = "INFO", json_output: bool = False) -> None:
    """Install the structlog configuration and the stdlib bridge.

    Args:
        log_level: Level name such as ``"DEBUG"`` or ``"warning"``.
        json_output: Render JSON lines instead of console output.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    processors = _shared_processors()
    renderer = _renderer(json_output)

    structlog.configure(
        processors=[*processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _route_stdlib(level, processors, renderer)


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a logger bound with ``logger_name=name``, configuring defaults first if needed."""
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(logger_name=name)
