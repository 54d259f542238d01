from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.common.exceptions import register_exception_handlers
from src.common.logger import log_info, setup_logging, TypeMsg
from src.config import settings
from src.infra.database import DatabaseManager, close_db, init_db
from src.infra.event_bus import close_event_bus, init_event_bus
from src.services.order_service.consumer import start_consumer
from src.services.order_service.dependencies import cleanup_dependencies, init_dependencies
from src.services.order_service.repository import OrderRepository
from src.services.order_service.routes import router
from src.services.utils.health import build_health_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging("order_service")
    await log_info("Starting Order Service...", type_msg=TypeMsg.INFO)
    await init_db()
    event_bus = await init_event_bus()
    init_dependencies()
    await start_consumer(event_bus, OrderRepository(DatabaseManager()))

    yield

    await log_info("Shutting down Order Service...", type_msg=TypeMsg.INFO)
    await cleanup_dependencies()
    await close_event_bus()
    await close_db()


app = FastAPI(
    title="Order Service",
    description="Order placement, lifecycle and delivery status tracking",
    version=settings.system.VERSION,
    lifespan=lifespan,
)

register_exception_handlers(app)
app.include_router(router, prefix="/api/v1")
app.include_router(build_health_router("order_service", uses_bus=True))
