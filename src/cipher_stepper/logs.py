import logging
import sys
from collections import deque
from typing import Deque, Tuple

import structlog

# Recent log lines for the terminal UI's log panel.
LOG_BUFFER: Deque[Tuple[str, str]] = deque(maxlen=5000)


def capture_to_buffer(logger, method_name, event_dict):
    """structlog processor that keeps a copy of each event for the UI log panel."""
    extras = " ".join(f"{k}={v}" for k, v in event_dict.items() if k not in ("event", "level", "timestamp"))
    message = f"{event_dict.get('timestamp', '')}  {event_dict.get('event', '')}  {extras}".strip()
    LOG_BUFFER.append((event_dict.get("level", method_name), message))
    return event_dict


def configure_logging(level: str = "INFO", json: bool = False, capture: bool = False) -> None:
    """Configure structlog for the CLI, the API and the library."""
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%H:%M:%S" if capture else "iso"),
    ]
    if capture:
        # While the live UI owns the terminal, log lines only go to the panel.
        processors.append(capture_to_buffer)
        processors.append(structlog.processors.KeyValueRenderer(key_order=["event"]))
        logger_factory = structlog.ReturnLoggerFactory()
    else:
        processors.append(structlog.processors.JSONRenderer(indent=2) if json else structlog.dev.ConsoleRenderer())
        logger_factory = structlog.PrintLoggerFactory(file=sys.stderr)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelNamesMapping()[level.upper()]),
        logger_factory=logger_factory,
        cache_logger_on_first_use=False,
    )
