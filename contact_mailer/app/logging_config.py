"""
Structured logging configuration for the contact mailer.

JSON logs in production (for log aggregation), colored human-readable logs in
development, and quiet WARNING-level logs in test so pytest's caplog still
sees every record. Request-scoped fields (request_id, method, path, client IP,
response time) are attached to each record emitted inside a request.
"""

import logging
import sys
import time
import uuid
from typing import Any, Dict
from datetime import datetime, timezone

from flask import Flask, g, has_request_context, request
from pythonjsonlogger import jsonlogger
from .services.request_utils import get_client_ip

HANDLER_NAME = "contact_mailer"


class ContextualJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter that adds Flask request context to every record."""

    def __init__(self, *args, app_env: str = "production", **kwargs):
        super().__init__(*args, **kwargs)
        self.app_env = app_env

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["app_env"] = self.app_env

        if has_request_context():
            log_record["request_id"] = getattr(g, "request_id", None)
            log_record["method"] = request.method
            log_record["path"] = request.path
            log_record["remote_addr"] = get_client_ip(request)

            if request.referrer:
                log_record["referrer"] = request.referrer

            request_start_time = getattr(g, "request_start_time", None)
            if request_start_time:
                log_record["response_time_ms"] = round((time.time() - request_start_time) * 1000, 2)

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)


class DevelopmentFormatter(logging.Formatter):
    """Human-readable, color-coded formatter for the terminal."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, "")
        reset = self.COLORS["RESET"]

        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        base = f"{color}[{timestamp}] {record.levelname:8s}{reset} {record.name:24s} | {record.getMessage()}"

        context_parts = []
        event = getattr(record, "event", None)
        if event:
            context_parts.append(f"event={event}")
        if has_request_context():
            request_id = getattr(g, "request_id", None)
            if request_id:
                context_parts.append(f"request_id={request_id[:8]}")
            context_parts.append(f"{request.method} {request.path}")

        if context_parts:
            base += f" [{' | '.join(context_parts)}]"

        if record.exc_info:
            base += "\n" + self.formatException(record.exc_info)

        return base


def resolve_log_level(app_env: str, log_level_str=None) -> int:
    if log_level_str:
        return getattr(logging, str(log_level_str).upper(), logging.INFO)
    if app_env == "test":
        return logging.WARNING
    if app_env == "development":
        return logging.DEBUG
    return logging.INFO


def configure_logging(app: Flask) -> None:
    """
    Configure logging for the Flask application.

    Picks the formatter from APP_ENV / LOG_JSON_ENABLED, sets the level from
    LOG_LEVEL (or the environment default) and attaches one stdout handler to
    both app.logger and the root logger.
    """
    app_env = app.config.get("APP_ENV", "production")
    log_level = resolve_log_level(app_env, app.config.get("LOG_LEVEL"))

    json_enabled = app.config.get("LOG_JSON_ENABLED", None)
    if json_enabled is None:
        json_enabled = app_env == "production"

    if json_enabled:
        formatter = ContextualJsonFormatter(fmt="%(message)s", app_env=app_env)
    else:
        formatter = DevelopmentFormatter()

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setLevel(log_level)
    handler.setFormatter(formatter)

    # In test mode keep foreign handlers so pytest's caplog handler survives
    if app_env != "test":
        app.logger.handlers.clear()
    for existing in [h for h in app.logger.handlers if h.get_name() == HANDLER_NAME]:
        app.logger.removeHandler(existing)
    app.logger.addHandler(handler)
    app.logger.setLevel(log_level)
    app.logger.propagate = (app_env == "test")

    root_logger = logging.getLogger()
    if app_env != "test":
        root_logger.handlers.clear()
        root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    if app_env == "development":
        logging.getLogger("werkzeug").setLevel(logging.WARNING)

    app.logger.info(
        "Logging configured",
        extra={
            "app_env": app_env,
            "log_level": logging.getLevelName(log_level),
            "json_enabled": json_enabled,
        },
    )


def setup_request_logging(app: Flask) -> None:
    """Register request_id generation, start/finish logging and uncaught error logging."""

    @app.before_request
    def before_request_logging():
        g.request_id = str(uuid.uuid4())
        g.request_start_time = time.time()
        app.logger.info(
            "Request started",
            extra={"event": "request.started", "method": request.method, "path": request.path},
        )

    @app.after_request
    def after_request_logging(response):
        if hasattr(g, "request_id"):
            response.headers.setdefault("X-Request-ID", g.request_id)
        if hasattr(g, "request_start_time"):
            app.logger.info(
                "Request completed",
                extra={
                    "event": "request.completed",
                    "status_code": response.status_code,
                    "response_time_ms": round((time.time() - g.request_start_time) * 1000, 2),
                },
            )
        return response

    @app.errorhandler(Exception)
    def handle_exception(error: Exception):
        from werkzeug.exceptions import HTTPException

        # 4xx/405 etc. are expected; let Flask render them
        if isinstance(error, HTTPException):
            return error

        app.logger.error(
            f"Uncaught exception: {error}",
            exc_info=True,
            extra={"event": "exception.uncaught", "exception_type": type(error).__name__},
        )
        raise error
