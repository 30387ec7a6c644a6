"""
Sprint VIX structured logging.

Every event carries the service name and the environment it ran in, so
lines from the dashboard, the terminal runner and the agent tool can be
told apart once they land in the same sink. JSON in production, coloured
console output everywhere else.
"""

import logging
import sys
from typing import Any, Dict, List, Optional

import structlog

from sprint_vix.platform.config import LoggingSettings, load_logging_settings

SERVICE_NAME = "sprint-vix"
DEFAULT_LOGGER_NAME = "sprint_vix"

# HTTP and SDK clients log every request at INFO; keep them at WARNING
NOISY_LOGGERS = ("urllib3", "requests", "httpx", "google_genai", "google_adk")


def add_service_context(app_env: str):
    """Processor stamping service and environment onto each event."""

    def processor(_logger: Any, _method: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        event_dict.setdefault("service", SERVICE_NAME)
        event_dict.setdefault("env", app_env)
        return event_dict

    return processor


def build_processors(settings: LoggingSettings) -> List[Any]:
    renderer = (
        structlog.processors.JSONRenderer()
        if settings.app_env == "production"
        else structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    )
    return [
        structlog.contextvars.merge_contextvars,
        add_service_context(settings.app_env),
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer,
    ]


def configure_logging(settings: Optional[LoggingSettings] = None) -> None:
    """Configure structlog for the dashboard or the terminal runner."""
    settings = settings or load_logging_settings()

    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    structlog.configure(
        processors=build_processors(settings),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))


def get_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    """Logger for a module; unnamed callers share the package logger."""
    return structlog.get_logger(name or DEFAULT_LOGGER_NAME)
