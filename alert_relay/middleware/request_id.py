import uuid
from time import perf_counter

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from alert_relay.core.logging import get_logger, reset_request_id, set_request_id

logger = get_logger("relay.request")


def resolve_request_id(request: Request) -> str:
    # Falls back to GitHub's delivery GUID before minting a new ID.
    return (
        request.headers.get("X-Request-ID")
        or request.headers.get("X-GitHub-Delivery")
        or str(uuid.uuid4())
    )


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a stable request ID to every response and log request timing."""

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        request_id = resolve_request_id(request)
        request.state.request_id = request_id
        request_id_token = set_request_id(request_id)
        started = perf_counter()
        response: Response | None = None
        request_extra = {
            "component": "api",
            "method": request.method,
            "path": request.url.path,
            "content_length": request.headers.get("content-length"),
        }

        logger.info("request.start", extra=request_extra)
        try:
            response = await call_next(request)
            return response
        except Exception:
            logger.exception("request.error", extra=request_extra)
            raise
        finally:
            logger.info(
                "request.end",
                extra={
                    **request_extra,
                    "status_code": response.status_code if response is not None else 500,
                    "duration_ms": int((perf_counter() - started) * 1000),
                },
            )
            if response is not None:
                response.headers["X-Request-ID"] = request_id
            reset_request_id(request_id_token)
