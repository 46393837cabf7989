from __future__ import annotations

import time
from typing import Any

import httpx

from alert_relay.core.errors import SlackDeliveryError
from alert_relay.integrations.models import (
    CodeScanningAlertEvent,
    SlackAction,
    SlackAttachment,
    SlackField,
    SlackMessage,
)

ALERT_HEADLINE = "*New Code Scanning Alert*"
ALERT_FOOTER = "GitHub Advanced Security"
VIEW_ALERT_LABEL = "View Alert"


def build_alert_message(event: CodeScanningAlertEvent, *, now: float | None = None) -> SlackMessage:
    alert = event.alert
    instance = alert.most_recent_instance
    severity = alert.severity_level
    severity_label = alert.severity.upper() if alert.severity else "UNKNOWN"

    return SlackMessage(
        text=f"{severity.emoji} {ALERT_HEADLINE}",
        attachments=[
            SlackAttachment(
                color=severity.color,
                fields=[
                    SlackField(title="Repository", value=event.repository.full_name, short=True),
                    SlackField(title="Severity", value=f"{severity.emoji} {severity_label}", short=True),
                    SlackField(title="Rule", value=instance.rule.description or "N/A", short=False),
                    SlackField(title="File", value=f"`{instance.location.path}`", short=True),
                    SlackField(title="Line", value=str(instance.location.start_line), short=True),
                ],
                actions=[SlackAction(text=VIEW_ALERT_LABEL, url=alert.html_url)],
                footer=ALERT_FOOTER,
                ts=time.time() if now is None else now,
            )
        ],
    )


class SlackWebhookConnector:
    """Posts messages to a Slack incoming webhook."""

    def __init__(
        self,
        webhook_url: str,
        *,
        timeout_seconds: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.webhook_url = webhook_url
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def send_message(self, message: SlackMessage) -> None:
        await self._post_payload(message.model_dump(mode="json"))

    async def send_test_message(self, text: str) -> None:
        await self._post_payload({"text": text})

    async def _post_payload(self, payload: dict[str, Any]) -> None:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, transport=self._transport
            ) as client:
                response = await client.post(self.webhook_url, json=payload)
        except httpx.HTTPError as exc:
            raise SlackDeliveryError(f"Slack webhook request failed: {type(exc).__name__}") from exc

        if not response.is_success:
            raise SlackDeliveryError(
                f"Slack webhook returned {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )
