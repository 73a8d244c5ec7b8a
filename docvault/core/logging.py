"""Structured logging configuration with structlog.

Every record, whether emitted through structlog or the stdlib ``logging``
module, is rendered by the same processor chain: JSON for production and
colored key/value output for development. Records carry the request_id of
the HTTP request that produced them and, once the bearer token resolves,
the acting user_id. Credential-bearing fields are masked before rendering.
"""

import logging
import sys
from contextvars import ContextVar

import structlog

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
user_id_var: ContextVar[str | None] = ContextVar("user_id", default=None)

# httpx logs every chatbot LLM call at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access", "watchfiles", "arq.worker")

SECRET_FIELDS = frozenset({"password", "password_hash", "token", "access_token", "authorization"})
REDACTED = "***"


def _add_request_context(logger, method_name, event_dict):
    rid = request_id_var.get()
    if rid:
        event_dict["request_id"] = rid
    uid = user_id_var.get()
    if uid:
        event_dict.setdefault("user_id", uid)
    return event_dict


def _redact_secrets(logger, method_name, event_dict):
    for key in SECRET_FIELDS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def _renderer(log_format: str):
    if log_format == "console":
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def configure_logging(log_level: str = "INFO", log_format: str = "json") -> None:
    """Route structlog and stdlib logging through one handler on stdout.

    Args:
        log_level: Root level name (DEBUG, INFO, WARNING, ERROR)
        log_format: "json" or "console"
    """
    shared_processors: list = [
        structlog.contextvars.merge_contextvars,
        _add_request_context,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.ExtraAdder(),
        _redact_secrets,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_format),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)
