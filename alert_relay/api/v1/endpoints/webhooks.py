from fastapi import APIRouter, Depends, Request
from fastapi.exception_handlers import http_exception_handler
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from alert_relay.core.settings import get_settings
from alert_relay.relay import RelayConfig, WebhookRelay, method_not_allowed

router = APIRouter()


def get_relay() -> WebhookRelay:
    return WebhookRelay(RelayConfig.from_settings(get_settings()))


relay_dependency = Depends(get_relay)


@router.post("/webhooks/github")
async def github_webhook(request: Request, relay: WebhookRelay = relay_dependency) -> Response:
    return await relay.handle(
        method=request.method,
        headers=request.headers,
        stream=request.stream(),
    )


async def webhook_http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    # The router matched this path but not the method: answer with the relay's 405 body.
    if exc.status_code == 405 and request.scope.get("endpoint") is github_webhook:
        return method_not_allowed(exc.headers)
    return await http_exception_handler(request, exc)
