import logging
from typing import Optional

import structlog

from interviewhub.config import Settings, settings as default_settings


def _service_fields(app_name: str, environment: str):
    def add_service_fields(logger, method_name, event_dict):
        event_dict.setdefault("service", app_name)
        event_dict.setdefault("environment", environment)
        return event_dict

    return add_service_fields


def configure_logging(config: Optional[Settings] = None) -> int:
    """Route stdlib and structlog output through one JSON pipeline.

    DEBUG when ``config.debug`` is set, INFO otherwise. SQLAlchemy engine
    chatter is held at WARNING unless debugging. Returns the level applied.
    """
    config = config or default_settings
    level = logging.DEBUG if config.debug else logging.INFO

    logging.basicConfig(format="%(message)s", level=level)
    # basicConfig is a no-op once handlers exist (uvicorn, pytest)
    logging.getLogger().setLevel(level)
    logging.getLogger("sqlalchemy.engine").setLevel(level if config.debug else logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,  # first, so request context reaches every event
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            _service_fields(config.app_name, config.environment),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    return level
