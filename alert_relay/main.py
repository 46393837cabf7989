from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from alert_relay.api.v1.endpoints.health import healthz
from alert_relay.api.v1.endpoints.webhooks import webhook_http_exception_handler
from alert_relay.api.v1.router import router as v1_router
from alert_relay.core.logging import configure_logging
from alert_relay.middleware.request_id import RequestIDMiddleware

configure_logging()

app = FastAPI(title="Alert Relay")

app.add_middleware(RequestIDMiddleware)
app.add_exception_handler(StarletteHTTPException, webhook_http_exception_handler)

app.include_router(v1_router, prefix="/api/v1")
app.add_api_route("/healthz", healthz, methods=["GET"])
