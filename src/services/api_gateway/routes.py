from fastapi import APIRouter, Depends, Request, status

from src.services.api_gateway.dependencies import get_auth_service, get_service_proxy, get_token_identity
from src.services.api_gateway.models import AuthResponse, LoginRequest, RegisterRequest
from src.services.api_gateway.proxy import ServiceProxy
from src.services.api_gateway.service import AuthService
from src.shared.identity import Identity

PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]

auth_router = APIRouter(prefix="/auth", tags=["Auth"])
proxy_router = APIRouter(tags=["Proxy"])


@auth_router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, service: AuthService = Depends(get_auth_service)):
    return await service.register(request)


@auth_router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest, service: AuthService = Depends(get_auth_service)):
    return await service.login(request)


@proxy_router.api_route("/{service}", methods=PROXY_METHODS, include_in_schema=False)
async def proxy_root(
    service: str,
    request: Request,
    identity: Identity | None = Depends(get_token_identity),
    proxy: ServiceProxy = Depends(get_service_proxy),
):
    return await proxy.forward(request, service, "", identity)


@proxy_router.api_route("/{service}/{path:path}", methods=PROXY_METHODS, include_in_schema=False)
async def proxy_path(
    service: str,
    path: str,
    request: Request,
    identity: Identity | None = Depends(get_token_identity),
    proxy: ServiceProxy = Depends(get_service_proxy),
):
    return await proxy.forward(request, service, path, identity)
