from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.common.exceptions import register_exception_handlers
from src.common.logger import log_info, setup_logging, TypeMsg
from src.config import settings
from src.infra.database import close_db, init_db
from src.infra.event_bus import close_event_bus, init_event_bus
from src.services.delivery_service.consumer import start_consumer
from src.services.delivery_service.dependencies import (
    cleanup_dependencies,
    get_delivery_service,
    init_dependencies,
)
from src.services.delivery_service.routes import router
from src.services.utils.health import build_health_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging("delivery_service")
    await log_info("Starting Delivery Service...", type_msg=TypeMsg.INFO)
    await init_db()
    event_bus = await init_event_bus()
    init_dependencies()
    await start_consumer(event_bus, get_delivery_service())

    yield

    await log_info("Shutting down Delivery Service...", type_msg=TypeMsg.INFO)
    await cleanup_dependencies()
    await close_event_bus()
    await close_db()


app = FastAPI(
    title="Delivery Service",
    description="Driver assignment and delivery tracking",
    version=settings.system.VERSION,
    lifespan=lifespan,
)

register_exception_handlers(app)
app.include_router(router, prefix="/api/v1")
app.include_router(build_health_router("delivery_service", uses_bus=True))
