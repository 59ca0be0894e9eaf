"""structlog + stdlib logging configuration for ClusterRank runs.

Cluster tables go to stdout, so every log line, structlog or stdlib,
is rendered to stderr: JSON lines when ``json_output`` is set,
structlog's console renderer otherwise.
"""

import logging
import sys
from typing import TextIO

import structlog


def configure_logging(
    json_output: bool = False,
    log_level: str = "INFO",
    stream: TextIO | None = None,
) -> None:
    """Configure unified logging for both structlog and stdlib.

    Args:
        json_output: Render logs as JSON lines instead of console text.
        log_level: Root log level (``"DEBUG"``, ``"INFO"``, ...).  Per
            iteration PageRank errors and bucket summaries are only
            emitted at ``"DEBUG"``.
        stream: Destination stream, ``sys.stderr`` when omitted.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"unknown log level: {log_level!r}")

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
        shared_processors.append(structlog.processors.format_exc_info)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
