# src/services/utils/health.py
"""
/health endpoint shared by every service app.
"""

from __future__ import annotations

from fastapi import APIRouter

from src.config import settings
from src.infra.database import get_db
from src.infra.event_bus import get_event_bus
from src.shared.models.common import HealthStatus


def build_health_router(service_name: str, *, uses_db: bool = True, uses_bus: bool = False) -> APIRouter:
    """Router with GET /health reporting PostgreSQL and RabbitMQ state."""
    router = APIRouter(tags=["Health"])

    @router.get("/health", response_model=HealthStatus)
    async def health_check() -> HealthStatus:
        dependencies: dict[str, str] = {}
        if uses_db:
            dependencies["postgres"] = "healthy" if await get_db().health_check() else "unhealthy"
        if uses_bus:
            dependencies["rabbitmq"] = "healthy" if await get_event_bus().health_check() else "unhealthy"

        status = "healthy" if all(v == "healthy" for v in dependencies.values()) else "degraded"
        return HealthStatus(
            service=service_name,
            status=status,
            version=settings.system.VERSION,
            dependencies=dependencies,
        )

    return router
