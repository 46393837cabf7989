"""Relay GitHub code scanning alert webhooks to a Slack incoming webhook.

The relay is a linear pipeline with early exits:

1. reject anything that is not a POST (405),
2. reject bodies over the size cap (413), either from ``Content-Length`` or
   while streaming, without buffering more than the cap,
3. verify the ``X-Hub-Signature-256`` HMAC against the shared secret (401),
4. parse the JSON body and, when it carries both an ``action`` and an
   ``alert``, post a formatted message to Slack,
5. acknowledge with ``200 OK``.

Slack delivery failures are logged and never change the response; any other
failure after authentication is reported as a generic 500.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError
from starlette.responses import JSONResponse, PlainTextResponse, Response

from alert_relay.core.errors import (
    RelayConfigurationError,
    SignatureError,
    SlackDeliveryError,
    sanitize_error,
    sanitize_message,
)
from alert_relay.core.logging import bind_github_delivery, get_logger, reset_log_context
from alert_relay.core.settings import Settings
from alert_relay.core.signatures import SIGNATURE_HEADER, verify_signature
from alert_relay.integrations.models import CodeScanningAlertEvent
from alert_relay.integrations.slack import SlackWebhookConnector, build_alert_message

logger = get_logger("relay.webhook")

GITHUB_EVENT_HEADER = "x-github-event"
GITHUB_DELIVERY_HEADER = "x-github-delivery"
DEFAULT_MAX_BODY_BYTES = 26_214_400
_LOG_EXTRA = {"component": "webhook"}


@dataclass(frozen=True)
class RelayConfig:
    webhook_secret: str | None
    slack_webhook_url: str | None
    slack_timeout_seconds: float = 5.0
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES

    @classmethod
    def from_settings(cls, settings: Settings) -> "RelayConfig":
        return cls(
            webhook_secret=settings.GITHUB_WEBHOOK_SECRET,
            slack_webhook_url=settings.SLACK_WEBHOOK_URL,
            slack_timeout_seconds=settings.SLACK_TIMEOUT_SECONDS,
            max_body_bytes=settings.MAX_BODY_BYTES,
        )


def method_not_allowed(headers: Mapping[str, str] | None = None) -> Response:
    return JSONResponse(status_code=405, content={"error": "Method Not Allowed"}, headers=headers)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant: {name}")


def parse_payload(body: bytes) -> Any:
    # NaN, Infinity and -Infinity are not JSON.
    return json.loads(body, parse_constant=_reject_constant)


def _is_present(value: Any) -> bool:
    # Objects and arrays count as present even when empty.
    if value is None or isinstance(value, bool):
        return bool(value)
    if isinstance(value, int | float | str):
        return bool(value)
    return True


def should_notify(payload: Any) -> bool:
    if not isinstance(payload, dict):
        return False
    return _is_present(payload.get("action")) and _is_present(payload.get("alert"))


def _declared_length(headers: Mapping[str, str]) -> int | None:
    raw = headers.get("content-length")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


async def read_limited_body(stream: AsyncIterator[bytes], limit: int) -> bytes | None:
    """Collect ``stream`` into bytes, or return None once it exceeds ``limit``.

    Consumption stops at the first chunk that crosses the limit.
    """
    chunks: list[bytes] = []
    size = 0
    async for chunk in stream:
        size += len(chunk)
        if size > limit:
            return None
        chunks.append(chunk)
    return b"".join(chunks)


class WebhookRelay:
    def __init__(
        self,
        config: RelayConfig,
        *,
        connector: SlackWebhookConnector | None = None,
    ) -> None:
        self.config = config
        self._connector = connector

    def _get_connector(self) -> SlackWebhookConnector:
        if self._connector is not None:
            return self._connector
        if not self.config.slack_webhook_url:
            raise RelayConfigurationError("SLACK_WEBHOOK_URL must be configured")
        return SlackWebhookConnector(
            self.config.slack_webhook_url,
            timeout_seconds=self.config.slack_timeout_seconds,
        )

    async def handle(
        self,
        *,
        method: str,
        headers: Mapping[str, str],
        stream: AsyncIterator[bytes],
    ) -> Response:
        if method.upper() != "POST":
            return method_not_allowed()

        context_token = bind_github_delivery(
            headers.get(GITHUB_EVENT_HEADER), headers.get(GITHUB_DELIVERY_HEADER)
        )
        try:
            declared = _declared_length(headers)
            if declared is not None and declared > self.config.max_body_bytes:
                return self._payload_too_large(declared)

            body = await read_limited_body(stream, self.config.max_body_bytes)
            if body is None:
                return self._payload_too_large(declared)

            return await self._process(headers, body)
        finally:
            reset_log_context(context_token)

    def _payload_too_large(self, declared: int | None) -> Response:
        logger.warning(
            "webhook.body_too_large",
            extra={**_LOG_EXTRA, "content_length": declared, "limit": self.config.max_body_bytes},
        )
        return PlainTextResponse("Payload Too Large", status_code=413)

    async def _process(self, headers: Mapping[str, str], body: bytes) -> Response:
        try:
            verify_signature(self.config.webhook_secret, body, headers.get(SIGNATURE_HEADER))
        except SignatureError as exc:
            logger.warning("webhook.unauthorized", extra={**_LOG_EXTRA, "reason": str(exc)})
            return PlainTextResponse(str(exc), status_code=401)

        try:
            payload = parse_payload(body)
            if should_notify(payload):
                await self._notify(CodeScanningAlertEvent.model_validate(payload))
            else:
                logger.info("webhook.skipped", extra=_LOG_EXTRA)
        except (ValueError, ValidationError, RelayConfigurationError) as exc:
            logger.error(
                "webhook.processing_failed",
                extra={
                    **_LOG_EXTRA,
                    "error_type": type(exc).__name__,
                    "error": sanitize_error(exc, default_message="webhook processing error"),
                },
            )
            return PlainTextResponse("Internal Server Error", status_code=500)
        except Exception:
            logger.exception("webhook.processing_failed", extra=_LOG_EXTRA)
            return PlainTextResponse("Internal Server Error", status_code=500)

        return PlainTextResponse("OK", status_code=200)

    async def _notify(self, event: CodeScanningAlertEvent) -> None:
        message = build_alert_message(event)
        connector = self._get_connector()
        alert_extra = {
            **_LOG_EXTRA,
            "action": event.action,
            "repository": event.repository.full_name,
            "severity": event.alert.severity_level.value,
        }

        try:
            await connector.send_message(message)
        except SlackDeliveryError as exc:
            logger.error(
                "slack.delivery_failed",
                extra={
                    **alert_extra,
                    "status_code": exc.status_code,
                    "error": sanitize_error(exc, default_message="slack delivery error"),
                    "response_body": sanitize_message(exc.body, default_message=""),
                },
            )
            return

        logger.info("slack.delivered", extra=alert_extra)
