"""structlog setup shared by the API server and the CLI."""

import logging
import sys

import structlog

# uvicorn installs its own handlers; these are rerouted through the root logger
_UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _renderer(json_output: bool):
    if json_output:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=True)


def configure_logging(log_level: str = "info", json_output: bool = False) -> None:
    """Route structlog and stdlib loggers through a single stdout handler.

    Args:
        log_level: Root level name, e.g. "debug" or "warning".
        json_output: One JSON object per line when true; coloured console
            lines otherwise.
    """
    pre_chain = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(json_output),
            ],
            foreign_pre_chain=pre_chain,
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for name in _UVICORN_LOGGERS:
        uv_logger = logging.getLogger(name)
        uv_logger.handlers.clear()
        uv_logger.propagate = True
    # Per-request access lines duplicate the trace-id context
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def bind_request_context(trace_id: str, **extra: str) -> None:
    """Attach ``trace_id`` (and e.g. method/path) to every log line of this request."""
    structlog.contextvars.bind_contextvars(trace_id=trace_id, **extra)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
