from __future__ import annotations

import json
import logging
import sys
from collections.abc import Mapping
from contextvars import ContextVar, Token
from datetime import UTC, datetime
from typing import Any

from alert_relay.core.settings import get_settings

# Fields bound here (request ID, GitHub event and delivery) are stamped on every
# record emitted while the binding is active.
_log_context: ContextVar[Mapping[str, str]] = ContextVar("log_context", default={})
_configured = False

_RECORD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}
_SENSITIVE_KEY_FRAGMENTS = ("secret", "token", "password", "api_key", "apikey")


def bind_log_context(**fields: str | None) -> Token[Mapping[str, str]]:
    merged = dict(_log_context.get())
    merged.update({key: value for key, value in fields.items() if value})
    return _log_context.set(merged)


def reset_log_context(token: Token[Mapping[str, str]]) -> None:
    _log_context.reset(token)


def get_log_context() -> Mapping[str, str]:
    return _log_context.get()


def set_request_id(request_id: str | None) -> Token[Mapping[str, str]]:
    return bind_log_context(request_id=request_id)


def reset_request_id(token: Token[Mapping[str, str]]) -> None:
    reset_log_context(token)


def get_request_id() -> str | None:
    return _log_context.get().get("request_id")


def bind_github_delivery(event: str | None, delivery: str | None) -> Token[Mapping[str, str]]:
    return bind_log_context(github_event=event, github_delivery=delivery)


def _json_safe_value(value: Any) -> Any:
    if value is None or isinstance(value, str | int | float | bool):
        return value
    if isinstance(value, Mapping):
        return {str(k): _json_safe_value(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_json_safe_value(item) for item in value]
    return str(value)


def _is_sensitive_key(key: str) -> bool:
    lowered = key.lower()
    return any(fragment in lowered for fragment in _SENSITIVE_KEY_FRAGMENTS)


class JsonLogFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, event name, bound context, extras."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "msg": record.getMessage(),
            "component": getattr(record, "component", record.name),
            **get_log_context(),
        }

        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRIBUTES or key == "component" or key.startswith("_"):
                continue
            payload[key] = "[redacted]" if _is_sensitive_key(key) else _json_safe_value(value)

        if record.exc_info and record.exc_info[0] is not None:
            payload.setdefault("error_type", record.exc_info[0].__name__)
            payload.setdefault("error", str(record.exc_info[1])[:500])

        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def configure_logging() -> None:
    global _configured
    if _configured:
        return

    level_name = get_settings().LOG_LEVEL.strip().upper() or "INFO"

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(JsonLogFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level_name, logging.INFO))

    _configured = True


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(name)
