# -*- coding: utf-8 -*-
"""Logging configuration for structlog + Logfire."""

from __future__ import annotations

import logging
import logfire
import structlog
from typing import Any
from structlog.types import EventDict, Processor
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from supply_tracker.config import AppSettings, Settings, get_settings
from supply_tracker.utils.validation import mask_address

# Map standard logging levels to Logfire levels
LOG_LEVEL_TO_LOGFIRE: dict[str, str] = {
    "DEBUG": "debug",
    "INFO": "info",
    "WARNING": "warn",
    "ERROR": "error",
    "CRITICAL": "fatal",
}

# Raw address fields that must never reach log sinks unmasked.
_ADDRESS_KEYS = frozenset({"wallet", "wallet_address", "token_address"})


class ServiceContext:
    """Processor attaching logger name, app name, service metadata and environment."""

    def __init__(self, app_settings: AppSettings) -> None:
        self._context: dict[str, Any] = {
            "app_name": app_settings.app_name,
            "environment": app_settings.environment,
        }
        if app_settings.service_name:
            self._context["service_name"] = app_settings.service_name
        if app_settings.service_version:
            self._context["service_version"] = app_settings.service_version

    def __call__(self, logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        stdlib_logger = getattr(logger, "_logger", None)
        event_dict["logger"] = (
            getattr(stdlib_logger, "name", None) or getattr(logger, "name", "") or ""
        )
        for key, value in self._context.items():
            event_dict.setdefault(key, value)
        return event_dict


def mask_address_fields(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Replace raw wallet/token addresses with their masked form."""
    for key in _ADDRESS_KEYS.intersection(event_dict):
        value = event_dict[key]
        if isinstance(value, str):
            event_dict[key] = mask_address(value)
    wallets = event_dict.get("wallets")
    if isinstance(wallets, (list, tuple)):
        event_dict["wallets"] = [mask_address(w) if isinstance(w, str) else w for w in wallets]
    return event_dict


def _build_handlers(settings: Settings) -> tuple[list[logging.Handler], list[int]]:
    """Return stdlib handlers for console/file output and the level of each."""
    logging_settings = settings.logging
    handlers: list[logging.Handler] = []
    levels: list[int] = []

    if logging_settings.log_to_console:
        console_level = getattr(logging, logging_settings.console_level, logging.INFO)
        console_handler = logging.StreamHandler()
        console_handler.setLevel(console_level)
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(console_handler)
        levels.append(console_level)

    if logging_settings.log_to_file:
        file_level = getattr(logging, logging_settings.file_level, logging.INFO)
        log_file_path = Path(logging_settings.log_file_path)
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            log_file_path,
            when=logging_settings.log_file_when,
            interval=logging_settings.log_file_interval,
            backupCount=logging_settings.log_file_backup_count,
            encoding="utf-8",
            utc=logging_settings.log_file_utc,
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(file_handler)
        levels.append(file_level)

    return handlers, levels


def build_processors(settings: Settings) -> list[Processor]:
    """Return the structlog processor chain (without the final renderer)."""
    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        ServiceContext(settings.app),
        mask_address_fields,
    ]
    if settings.logging.logfire_enabled:
        processors.append(logfire.StructlogProcessor())  # type: ignore[arg-type]
    return processors


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog (and Logfire when enabled) from settings."""
    settings = settings or get_settings()
    app_settings = settings.app
    logging_settings = settings.logging

    handlers, levels = _build_handlers(settings)
    if handlers:
        logging.basicConfig(level=min(levels), handlers=handlers, force=True)

    if logging_settings.logfire_enabled:
        logfire.configure(
            token=logging_settings.logfire_token,
            service_name=app_settings.service_name or app_settings.app_name,
            service_version=app_settings.service_version,
            min_level=LOG_LEVEL_TO_LOGFIRE.get(logging_settings.logfire_level, "info"),  # type: ignore[arg-type]
            environment=app_settings.environment,
        )

    processors = build_processors(settings)

    # File output is always JSON; console follows json_format unless a file is also written.
    if handlers:
        use_json = logging_settings.log_to_file or logging_settings.json_format
        renderer: Any = (
            structlog.processors.JSONRenderer()
            if use_json
            else structlog.dev.ConsoleRenderer()
        )
        processors.append(renderer)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
