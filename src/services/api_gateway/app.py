from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.common.exceptions import register_exception_handlers
from src.common.logger import log_info, setup_logging, TypeMsg
from src.config import settings
from src.services.api_gateway.dependencies import cleanup_dependencies, init_dependencies
from src.services.api_gateway.routes import auth_router, proxy_router
from src.services.utils.health import build_health_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging("api_gateway")
    await log_info("Starting API Gateway...", type_msg=TypeMsg.INFO)
    init_dependencies()

    yield

    await log_info("Shutting down API Gateway...", type_msg=TypeMsg.INFO)
    await cleanup_dependencies()


app = FastAPI(
    title="API Gateway",
    description="Authentication and routing to the platform services",
    version=settings.system.VERSION,
    lifespan=lifespan,
)

register_exception_handlers(app)
app.include_router(build_health_router("api_gateway", uses_db=False))
app.include_router(auth_router, prefix="/api/v1")
app.include_router(proxy_router, prefix="/api/v1")
