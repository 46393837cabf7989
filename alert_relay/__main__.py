from __future__ import annotations

import asyncio
import os

import uvicorn

from alert_relay.core.errors import SlackDeliveryError, sanitize_error
from alert_relay.core.logging import configure_logging, get_logger
from alert_relay.core.settings import get_settings
from alert_relay.integrations.slack import SlackWebhookConnector

logger = get_logger("relay.main")

TEST_MESSAGE = "Alert relay Slack integration test message."


async def send_test_message() -> int:
    settings = get_settings()
    if not settings.SLACK_WEBHOOK_URL:
        logger.error("slack.test_unconfigured", extra={"component": "cli"})
        return 1

    connector = SlackWebhookConnector(
        settings.SLACK_WEBHOOK_URL,
        timeout_seconds=settings.SLACK_TIMEOUT_SECONDS,
    )
    try:
        await connector.send_test_message(TEST_MESSAGE)
    except SlackDeliveryError as exc:
        logger.error(
            "slack.test_failed",
            extra={
                "component": "cli",
                "status_code": exc.status_code,
                "error": sanitize_error(exc, default_message="slack delivery error"),
            },
        )
        return 1

    logger.info("slack.test_sent", extra={"component": "cli"})
    return 0


def main() -> None:
    configure_logging()
    settings = get_settings()
    mode = settings.RELAY_MODE.strip().lower()

    if mode == "send-test":
        raise SystemExit(asyncio.run(send_test_message()))

    host = os.getenv("API_HOST", settings.API_HOST)
    port = int(os.getenv("PORT", str(settings.API_PORT)))
    uvicorn.run("alert_relay.main:app", host=host, port=port)


if __name__ == "__main__":
    main()
