import logging
import sys
from contextlib import AbstractContextManager
from typing import Any
from uuid import UUID

import structlog

SERVICE_NAME = "lootpacks-service"


def _add_service_name(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def configure_logging(log_level: str = "INFO") -> None:
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            _add_service_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def lootpack_log_context(
    *,
    user_id: str,
    pack_type_id: UUID | None = None,
) -> AbstractContextManager[None]:
    """Binds the acting user (and pack type) to every log line emitted inside the block."""
    values: dict[str, str] = {"user_id": user_id}
    if pack_type_id is not None:
        values["pack_type_id"] = str(pack_type_id)
    return structlog.contextvars.bound_contextvars(**values)
