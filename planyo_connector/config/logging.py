"""Structured logging configuration using structlog."""
import logging
import re
import sys
from typing import Any, Optional

import structlog
from pythonjsonlogger import jsonlogger

from planyo_connector.config.settings import LoggingSettings, settings

REDACTED_KEYS = frozenset({"api_key", "hash_key"})
QUERY_CREDENTIAL_PATTERN = re.compile(r"\b(api_key|hash_key)=[^&\s]*")


def add_site_id_prefix(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Add [SITE_ID] prefix to log message if site_id is present.

    This processor runs before formatters to ensure the prefix appears
    in both JSON and console outputs.

    Args:
        logger: The logger instance
        method_name: The name of the method being called
        event_dict: The event dictionary containing log data

    Returns:
        Modified event dictionary with site id prefix
    """
    site_id = event_dict.get("site_id")
    if site_id:
        current_event = event_dict.get("event", "")
        event_dict["event"] = f"[{site_id}] {current_event}"
    return event_dict


def redact_credentials(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Mask API credentials bound to a log event or embedded in a request URL."""
    for key, value in event_dict.items():
        if key in REDACTED_KEYS:
            event_dict[key] = "***"
        elif isinstance(value, str) and "_key=" in value:
            event_dict[key] = QUERY_CREDENTIAL_PATTERN.sub(r"\1=***", value)
    return event_dict


def _build_handler(logging_settings: LoggingSettings) -> logging.Handler:
    """Create the stdout handler for the configured log format."""
    handler = logging.StreamHandler(sys.stdout)
    if logging_settings.format == "json":
        handler.setFormatter(jsonlogger.JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
    handler.setLevel(getattr(logging, logging_settings.level))
    return handler


def configure_logging(logging_settings: Optional[LoggingSettings] = None) -> None:
    """Configure structlog for the application.

    Args:
        logging_settings: Level and format to use, defaults to the
            application settings
    """
    logging_settings = logging_settings or settings.logging
    log_level = getattr(logging, logging_settings.level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(_build_handler(logging_settings))

    # httpx logs full request URLs, which carry the api key and hash
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            redact_credentials,
            add_site_id_prefix,
            structlog.processors.JSONRenderer()
            if logging_settings.format == "json"
            else structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.typing.FilteringBoundLogger:
    """Get a configured logger instance.

    Args:
        name: Logger name, typically __name__

    Returns:
        Configured logger instance
    """
    return structlog.get_logger(name)
