"""
Structured logging: timestamp, event_type, level, logger name.

structlog with ISO timestamps and consistent keys. Every module uses
get_logger(__name__) and logs a snake_case event_type plus key/value fields.
Output goes to stderr so the human-readable report on stdout stays clean.
API keys in rpc_url and error fields are masked before rendering.

Uses only Python stdlib logging and structlog; no wallet_analyzer imports to avoid circular imports.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL_VALUE = getattr(logging, LOG_LEVEL, logging.INFO)

# JSON output by default (LOG_FORMAT=json); anything else is human-readable
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()

# Fields that may carry an RPC endpoint; httpx error text includes the request URL
REDACTED_FIELDS = ("rpc_url", "error")

_HELIUS_KEY_RE = re.compile(r"(api-key=)[^&\s'\"]+")
_ALCHEMY_KEY_RE = re.compile(r"(/v2/)[^/?\s'\"]+")


def mask_rpc_url(text: str) -> str:
    """Hide API keys in an RPC URL, or in any text quoting one (Helius query param or Alchemy path segment)."""
    text = _HELIUS_KEY_RE.sub(r"\1***", text)
    return _ALCHEMY_KEY_RE.sub(r"\1***", text)


def _add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Ensure timestamp is always present (ISO 8601)."""
    if "timestamp" not in event_dict:
        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _normalize_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Rename structlog 'event' to event_type."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    return event_dict


def _redact_rpc_keys(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    for key in REDACTED_FIELDS:
        value = event_dict.get(key)
        if isinstance(value, str):
            event_dict[key] = mask_rpc_url(value)
    return event_dict


def configure_structlog() -> None:
    """Configure structlog once: timestamp, level, event_type, key redaction, then the renderer."""
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _add_timestamp,
        _normalize_event,
        _redact_rpc_keys,
    ]
    if LOG_FORMAT == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVEL_VALUE),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger for the given module name.

        logger = get_logger(__name__)
        logger.info("transaction_classified", signature=sig, tx_type="swap")
    Output (JSON): {"event_type": "transaction_classified", "signature": "...", "tx_type": "swap",
    "level": "info", "timestamp": "...", "logger": "module.name"}
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_wallet(wallet: str) -> structlog.BoundLogger:
    """Return a logger with the queried wallet bound to all subsequent log calls."""
    return get_logger("wallet_analyzer").bind(wallet=wallet)
