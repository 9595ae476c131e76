# lazyvec/runtime/logging.py
#
# Structured logging for lazyvec. Library modules obtain their logger from
# get_logger(); records flow through the stdlib "lazyvec" logger, which has
# only a NullHandler until an application (or the lazyvec-prof tool) calls
# setup_logging().

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from .config import get_config

_ROOT = "lazyvec"

logging.getLogger(_ROOT).addHandler(logging.NullHandler())


def add_library_context(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Tag every entry with the library name."""
    event_dict["library"] = _ROOT
    return event_dict


_shared_processors: list[Processor] = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    add_library_context,
]


def setup_logging() -> structlog.stdlib.BoundLogger:
    """Attach a structlog-rendering handler to the "lazyvec" logger."""
    config = get_config()

    if config.observability.log_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    library_logger = logging.getLogger(_ROOT)
    library_logger.handlers.clear()
    library_logger.addHandler(handler)
    library_logger.setLevel(config.observability.log_level.upper())
    library_logger.propagate = False

    return get_logger("setup")


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger backed by the stdlib logger ``lazyvec.<name>``."""
    return structlog.wrap_logger(
        logging.getLogger(f"{_ROOT}.{name}"),
        processors=_shared_processors
        + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
    )
