from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.common.exceptions import register_exception_handlers
from src.common.logger import log_info, setup_logging, TypeMsg
from src.config import settings
from src.infra.database import close_db, init_db
from src.services.customer_service.routes import router
from src.services.utils.health import build_health_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging("customer_service")
    await log_info("Starting Customer Service...", type_msg=TypeMsg.INFO)
    await init_db()

    yield

    await log_info("Shutting down Customer Service...", type_msg=TypeMsg.INFO)
    await close_db()


app = FastAPI(
    title="Customer Service",
    description="Customer profiles, registration and roles",
    version=settings.system.VERSION,
    lifespan=lifespan,
)

register_exception_handlers(app)
app.include_router(router, prefix="/api/v1")
app.include_router(build_health_router("customer_service"))
