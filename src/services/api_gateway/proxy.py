# src/services/api_gateway/proxy.py
"""
Reverse proxy to the downstream services.
Identity headers are always rebuilt here from the verified token.
"""

from __future__ import annotations

from typing import Optional

import httpx
from fastapi import Request, Response

from src.common.constants import AUTH_ROLE_HEADER, AUTH_USER_HEADER
from src.common.exceptions import NotFoundError, PeerServiceError
from src.common.logger import log_warning
from src.shared.identity import Identity

# Not forwarded in either direction
HOP_BY_HOP_HEADERS = frozenset({
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailers",
    "transfer-encoding",
    "upgrade",
    "host",
    "content-length",
})

STRIPPED_REQUEST_HEADERS = HOP_BY_HOP_HEADERS | {
    "authorization",
    AUTH_USER_HEADER.lower(),
    AUTH_ROLE_HEADER.lower(),
}

# httpx has already decoded the body
STRIPPED_RESPONSE_HEADERS = HOP_BY_HOP_HEADERS | {"content-encoding"}

# Service-to-service endpoints: (service, first path segment)
INTERNAL_ROUTES = frozenset({
    ("customers", "username"),
    ("customers", "create"),
})


class ServiceProxy:
    def __init__(
        self,
        routes: dict[str, str],
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            routes: First path segment -> downstream base URL
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport
        """
        self.routes = routes
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def close(self) -> None:
        await self.client.aclose()

    @staticmethod
    def forward_headers(request: Request, identity: Identity | None) -> dict[str, str]:
        headers = {
            name: value
            for name, value in request.headers.items()
            if name.lower() not in STRIPPED_REQUEST_HEADERS
        }
        if identity is not None:
            headers.update(identity.as_headers())
        return headers

    async def forward(self, request: Request, service: str, path: str, identity: Identity | None) -> Response:
        base_url = self.routes.get(service)
        if base_url is None:
            raise NotFoundError(f"Unknown service: {service}")

        if (service, path.strip("/").split("/", 1)[0]) in INTERNAL_ROUTES:
            raise NotFoundError(f"Unknown route: /api/v1/{service}/{path}")

        url = f"{base_url}/api/v1/{service}"
        if path:
            url = f"{url}/{path}"

        try:
            upstream = await self.client.request(
                request.method,
                url,
                params=request.query_params.multi_items(),
                headers=self.forward_headers(request, identity),
                content=await request.body(),
            )
        except httpx.RequestError as e:
            await log_warning(f"Proxy to {service} failed: {e.__class__.__name__}")
            raise PeerServiceError(
                f"{service} unreachable",
                details={"service": service, "path": path},
            ) from e

        return Response(
            content=upstream.content,
            status_code=upstream.status_code,
            headers={
                name: value
                for name, value in upstream.headers.items()
                if name.lower() not in STRIPPED_RESPONSE_HEADERS
            },
        )
