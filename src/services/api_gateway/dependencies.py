from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.config import settings
from src.infra.api_clients import CustomerClient
from src.services.api_gateway.auth import decode_token
from src.services.api_gateway.proxy import ServiceProxy
from src.services.api_gateway.service import AuthService
from src.shared.identity import Identity

_customer_client: CustomerClient | None = None
_proxy: ServiceProxy | None = None

bearer_scheme = HTTPBearer(auto_error=False)


def service_routes() -> dict[str, str]:
    """Proxy table: first path segment -> downstream base URL."""
    deployment = settings.deployment
    return {
        "customers": deployment.customer_service_url,
        "restaurants": deployment.restaurant_service_url,
        "orders": deployment.order_service_url,
        "deliveries": deployment.delivery_service_url,
    }


def init_dependencies() -> None:
    global _customer_client, _proxy
    if not settings.auth.JWT_SECRET:
        raise RuntimeError("JWT_SECRET is not configured")
    _customer_client = CustomerClient()
    _proxy = ServiceProxy(service_routes(), timeout=settings.http_client.PEER_TIMEOUT_SECONDS)


async def cleanup_dependencies() -> None:
    global _customer_client, _proxy
    if _customer_client:
        await _customer_client.close()
        _customer_client = None
    if _proxy:
        await _proxy.close()
        _proxy = None


def get_customer_client() -> CustomerClient:
    if _customer_client is None:
        raise RuntimeError("CustomerClient is not initialized, call init_dependencies()")
    return _customer_client


def get_service_proxy() -> ServiceProxy:
    if _proxy is None:
        raise RuntimeError("ServiceProxy is not initialized, call init_dependencies()")
    return _proxy


def get_auth_service() -> AuthService:
    return AuthService(
        customer_client=get_customer_client(),
        secret=settings.auth.JWT_SECRET,
        ttl_seconds=settings.auth.JWT_TTL_SECONDS,
        hash_iterations=settings.auth.PASSWORD_HASH_ITERATIONS,
    )


async def get_token_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Identity | None:
    """None without a bearer token; AuthenticationError (401) for an invalid one."""
    if credentials is None:
        return None
    claims = decode_token(credentials.credentials, settings.auth.JWT_SECRET)
    return Identity(username=claims.sub, roles=(claims.role,))
