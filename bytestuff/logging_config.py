"""JSON logging for the bytestuff command line.

structlog renders one JSON object per line. The CLI owns stdout for encoded
or decoded data, so it passes ``stream=sys.stderr``; codec modules stay
silent and ``framing`` reports dropped frames through stdlib logging, which
is routed to the same stream.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog


def configure_logging(service_name: str, level: str = "INFO", stream: TextIO | None = None) -> None:
    """Route structlog and stdlib log records to ``stream`` as JSON lines.

    Args:
        service_name: CLI command bound as ``service`` on every entry.
        level: Threshold name such as "DEBUG" or "WARNING"; applies to both
            structlog and the stdlib root logger.
        stream: Destination text stream, stdout when omitted.
    """
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level!r}")

    if stream is None:
        stream = sys.stdout

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=False,
    )

    # FrameReader warnings arrive through the stdlib root logger
    logging.basicConfig(format="%(message)s", stream=stream, level=numeric_level)

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(service=service_name)
