"""Logging setup for the bootkit process.

stdout belongs to command outcomes (plain text or ``--json``), so every log
record goes to stderr through a single root handler. Records from stdlib
loggers (``logging.getLogger(__name__)`` across bootkit) and from structlog
loggers share one processor chain and one renderer:

- console lines by default
- one JSON object per line with ``--log-json``, tracebacks included
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable

import structlog

LOGGER_NAME = "bootkit"

_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]


def _renderers(log_json: bool) -> list[structlog.types.Processor]:
    if log_json:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    quiet_loggers: Iterable[str] = ("pluggy",),
) -> None:
    """Route all logging to stderr for one CLI invocation.

    Calling it again replaces the root handler instead of adding another.

    Args:
        verbose: DEBUG for the ``bootkit`` logger tree (binding overrides,
            discovered modules, dispatch decisions). Otherwise WARNING.
        log_json: Render JSON lines instead of console lines.
        quiet_loggers: Plugin-machinery loggers held at WARNING even in
            verbose mode.
    """
    structlog.configure(
        processors=[
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_SHARED_PROCESSORS,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *_renderers(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(stderr_handler)
    root.setLevel(logging.WARNING)

    logging.getLogger(LOGGER_NAME).setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)
