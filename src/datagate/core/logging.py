"""
Structured logging for datagate.

Manifesto:
    A data-access layer sits under every request an application serves, so
    its logs must be cheap, structured and easy to correlate:

    - **Structures:** key/value events instead of formatted strings
    - **Correlates:** collection / driver / request ids bound via contextvars
    - **Flexes:** console output for development, JSON for production

    The library never configures logging on import. Applications call
    ``configure_logging()`` once at startup (or
    ``DataGateSettings.configure_logging()``); until then structlog's
    defaults apply and every event still reaches ``structlog.testing``.

Architecture:
    ::

        configure_logging(level, json_format, service, add_timestamp)
            │
            ▼
        _processor_chain():
            TimeStamper(iso)?  merge_contextvars  add_log_level
            add_logger_name    add_service_name   rename_for_ecs (JSON only)
            └─► JSONRenderer | ConsoleRenderer

        logger = get_logger(__name__)
        logger.debug("record_inserted", collection="users", record_id=1)

Examples:
    >>> configure_logging(level="DEBUG", json_format=True, service="orders-api")
    >>> get_logger(__name__).info("pool_hit", key="datagate:MemoryDriver:users:ab12")
    {"key": "...", "event": "pool_hit", "@timestamp": "...", "log.level": "info",
     "service.name": "orders-api", ...}

Tags:
    logging, structlog, observability, json-logging, datagate

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from contextvars import Token
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

_service_name = "datagate"

# ECS field names used by log shippers
_ECS_RENAMES = {"timestamp": "@timestamp", "level": "log.level"}


def add_service_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Stamp ``service.name`` unless the event already carries one."""
    event_dict.setdefault("service.name", _service_name)
    return event_dict


def rename_for_ecs(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Rename ``timestamp`` / ``level`` to their ECS equivalents."""
    for old, new in _ECS_RENAMES.items():
        if old in event_dict:
            event_dict[new] = event_dict.pop(old)
    return event_dict


def _processor_chain(json_format: bool, add_timestamp: bool) -> list[Processor]:
    chain: list[Processor] = []
    if add_timestamp:
        chain.append(structlog.processors.TimeStamper(fmt="iso"))
    chain += [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        add_service_name,
    ]
    if json_format:
        chain += [rename_for_ecs, structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        chain.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    return chain


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "datagate",
    add_timestamp: bool = True,
) -> None:
    """Configure structlog (and the stdlib root logger it writes through).

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR)
        json_format: JSON when True, console when False, JSON unless stdout is a tty when None
        service: Value of ``service.name`` on every event
        add_timestamp: Prefix events with an ISO timestamp
    """
    global _service_name
    _service_name = service

    if json_format is None:
        json_format = not sys.stdout.isatty()

    numeric_level = logging.getLevelNamesMapping()[level.upper()]

    structlog.configure(
        processors=_processor_chain(json_format, add_timestamp),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=numeric_level)


def get_logger(name: str | None = None, **initial: Any) -> Any:
    """Structured logger for ``name``, optionally pre-bound with ``initial`` values."""
    logger = structlog.get_logger(name)
    return logger.bind(**initial) if initial else logger


def bind_context(**kwargs: Any) -> Mapping[str, Token]:
    """Bind values to every event logged from the current context.

    Returns the contextvar tokens; :class:`LogContext` uses them to restore
    the previous values.
    """
    return structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


class LogContext:
    """Bind context for a block, restoring whatever was bound before.

    Example:
        async with LogContext(collection="users", operation="import"):
            await gate.insert_many(rows)
    """

    def __init__(self, **kwargs: Any):
        self._values = kwargs
        self._tokens: Mapping[str, Token] = {}

    def __enter__(self) -> LogContext:
        self._tokens = bind_context(**self._values)
        return self

    def __exit__(self, *exc_info: object) -> None:
        structlog.contextvars.reset_contextvars(**self._tokens)

    async def __aenter__(self) -> LogContext:
        return self.__enter__()

    async def __aexit__(self, *exc_info: object) -> None:
        self.__exit__(*exc_info)


__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "unbind_context",
    "clear_context",
    "LogContext",
]
