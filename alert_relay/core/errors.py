from __future__ import annotations

import re

_MAX_ERROR_LENGTH = 500
_SENSITIVE_PATTERNS = (
    re.compile(r"bearer\s+[a-z0-9\-_\.]+", re.IGNORECASE),
    re.compile(r"(api[_-]?key|token|secret|password)\s*[:=]\s*[^\s,;]+", re.IGNORECASE),
    re.compile(r"https://hooks\.slack\.com/\S+", re.IGNORECASE),
)


class RelayError(Exception):
    """Base class for failures raised while relaying a webhook."""


class SignatureError(RelayError):
    """The inbound request could not be authenticated.

    ``str(exc)`` is the plain-text body returned to the caller.
    """


class RelayConfigurationError(RelayError):
    """A setting the relay needs for this request is missing."""


class SlackDeliveryError(RelayError):
    def __init__(self, message: str, *, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


def sanitize_message(message: str, *, default_message: str = "unknown error") -> str:
    sanitized = message.strip() or default_message
    for pattern in _SENSITIVE_PATTERNS:
        sanitized = pattern.sub("[redacted]", sanitized)
    return sanitized[:_MAX_ERROR_LENGTH]


def sanitize_error(exc: Exception, *, default_message: str) -> str:
    return sanitize_message(str(exc), default_message=default_message)
