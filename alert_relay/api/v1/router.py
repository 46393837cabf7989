from fastapi import APIRouter

from alert_relay.api.v1.endpoints import health, webhooks

router = APIRouter()
router.include_router(health.router)
router.include_router(webhooks.router)
