from fastapi import APIRouter

from lead_router.api.v1.endpoints import health, routing

router = APIRouter(prefix="/api/v1")

router.include_router(routing.router)
router.include_router(health.router)
