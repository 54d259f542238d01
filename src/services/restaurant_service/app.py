from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.common.exceptions import register_exception_handlers
from src.common.logger import log_info, setup_logging, TypeMsg
from src.config import settings
from src.infra.database import close_db, init_db
from src.services.restaurant_service.dependencies import cleanup_dependencies, init_dependencies
from src.services.restaurant_service.routes import router
from src.services.utils.health import build_health_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging("restaurant_service")
    await log_info("Starting Restaurant Service...", type_msg=TypeMsg.INFO)
    await init_db()
    init_dependencies()

    yield

    await log_info("Shutting down Restaurant Service...", type_msg=TypeMsg.INFO)
    await cleanup_dependencies()
    await close_db()


app = FastAPI(
    title="Restaurant Service",
    description="Restaurants, menus and catalog search",
    version=settings.system.VERSION,
    lifespan=lifespan,
)

register_exception_handlers(app)
app.include_router(router, prefix="/api/v1")
app.include_router(build_health_router("restaurant_service"))
