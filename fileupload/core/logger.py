import logging
from dataclasses import dataclass, field
from enum import StrEnum

import orjson
import structlog
from asgi_correlation_id import correlation_id
from beartype import beartype

from fileupload.core.settings import settings


class LoggerError(Exception):
    """Exception for logger related issues."""


class LogLevel(StrEnum):
    """LogLevel types for logger configuration."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogIcon(StrEnum):
    """Icons prefixed to console log lines."""

    DEFAULT = "📋"

    SUCCESS = "✅"
    ERROR = "❌"
    WARNING = "⚠️"

    # Lifecycle
    START = "🚀"
    PROCESSING = "🔄"
    COMPLETE = "✨"
    SKIP = "⏭️"

    # Server
    ADAPTER = "🔌"
    NETWORK = "🌐"
    HEALTHCHECK = "❤️"

    # Uploads
    FILE = "📄"
    FOLDER = "📁"
    UPLOAD = "📤"


@dataclass(frozen=True)
class LoggerConfig:
    """Logger configuration: console output in debug, JSON lines otherwise."""
    debug: bool = field(default_factory=lambda: settings.DEBUG)
    log_level: LogLevel = field(default_factory=lambda: LogLevel(settings.LOG_LEVEL))
    max_event_length: int = 80


def add_correlation_id(logger, method_name: str, event_dict: dict) -> dict:
    """Add the request id bound by the router, if any."""
    request_id = correlation_id.get()
    if request_id:
        event_dict["correlation_id"] = request_id
    return event_dict


class EventFormatter:
    """
    Normalize event messages.

    Messages are upper-cased and cut to ``max_length``. The ``icon`` key must
    be a LogIcon; it is removed from the event and, in debug mode only,
    prefixed to the message.
    """

    def __init__(self, debug: bool, max_length: int = 80) -> None:
        self.debug = debug
        self.max_length = max_length

    @staticmethod
    def resolve_icon(value: object) -> LogIcon:
        try:
            return LogIcon(value)
        except ValueError as err:
            raise LoggerError(f"Unknown log icon {value!r}, use a LogIcon member") from err

    @beartype
    def __call__(self, logger, name: str, event_dict: dict) -> dict:
        icon = self.resolve_icon(event_dict.pop("icon", LogIcon.DEFAULT))
        event = str(event_dict.get("event", ""))[: self.max_length].upper()
        event_dict["event"] = f"{icon.value} {event}" if self.debug else event
        return event_dict


CONSOLE_HEAD_KEYS = ("timestamp", "level", "correlation_id", "event", "filename", "lineno")


def render_console(logger, name: str, event_dict: dict) -> str:
    """Render ``time LEVEL [request id] EVENT | key=value ... | file:line``."""
    level = str(event_dict.get("level", LogLevel.INFO.value)).upper()
    request_id = event_dict.get("correlation_id")
    head = " ".join(
        filter(None, [event_dict.get("timestamp", ""), level, f"[{request_id}]" if request_id else ""])
    )

    extras = [f"{key}={value}" for key, value in event_dict.items() if key not in CONSOLE_HEAD_KEYS]
    filename = event_dict.get("filename")
    location = f"{filename}:{event_dict.get('lineno', '')}" if filename else ""

    return " | ".join(filter(None, [head, event_dict.get("event", ""), *extras, location]))


def build_processors(config: LoggerConfig) -> list:
    """Processor chain shared by both outputs, ending with the output's renderer."""
    processors = [
        structlog.contextvars.merge_contextvars,
        add_correlation_id,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
            additional_ignores=["logger"]
        ),
        EventFormatter(debug=config.debug, max_length=config.max_event_length),
    ]
    if config.debug:
        return processors + [structlog.processors.format_exc_info, render_console]
    return processors + [
        structlog.processors.dict_tracebacks,
        structlog.processors.JSONRenderer(serializer=orjson.dumps),
    ]


def setup_logging(config: LoggerConfig) -> None:
    """Configure structlog for console or JSON output."""
    # orjson renders bytes, so JSON output needs the bytes logger
    logger_factory = structlog.PrintLoggerFactory() if config.debug else structlog.BytesLoggerFactory()

    structlog.configure(
        processors=build_processors(config),
        logger_factory=logger_factory,
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(config.log_level.value)),
        cache_logger_on_first_use=True,
    )


setup_logging(LoggerConfig())

logger = structlog.get_logger()
