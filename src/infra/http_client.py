# src/infra/http_client.py
"""
Base for typed peer-service clients.
Peer 404 becomes NotFoundError, 409 DuplicateResourceError, any other failure
(including a body that is not JSON or does not fit the expected model)
PeerServiceError.
"""

from __future__ import annotations

from typing import Any, Awaitable, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from src.common.exceptions import DuplicateResourceError, NotFoundError, PeerServiceError
from src.common.logger import log_warning
from src.shared.models.enrichment import Enrichment

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


class BaseClient:
    service_name: str = "peer"

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def close(self) -> None:
        await self.client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        try:
            response = await self.client.request(method, path, params=params, json=json, headers=headers)
        except httpx.RequestError as e:
            raise PeerServiceError(
                f"{self.service_name} unreachable: {e.__class__.__name__}",
                details={"service": self.service_name, "path": path},
            ) from e

        if response.status_code == 404:
            raise NotFoundError(
                f"{self.service_name} has no resource at {path}",
                details={"service": self.service_name, "path": path},
            )

        if response.status_code == 409:
            raise DuplicateResourceError(
                f"{self.service_name} reports a conflict at {path}",
                details={"service": self.service_name, "path": path},
            )

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise PeerServiceError(
                f"{self.service_name} answered {response.status_code}",
                details={"service": self.service_name, "path": path, "status": response.status_code},
            ) from e

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise PeerServiceError(
                f"{self.service_name} answered a non-JSON body",
                details={"service": self.service_name, "path": path},
            ) from e

    def _parse(self, model: Type[M], data: Any) -> M:
        """Validates a peer payload into a DTO."""
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise PeerServiceError(
                f"{self.service_name} answered an unexpected {model.__name__} payload",
                details={"service": self.service_name, "errors": e.error_count()},
            ) from e

    async def _get(self, path: str, params: Optional[dict[str, Any]] = None, headers: Optional[dict[str, str]] = None) -> Any:
        return await self._request("GET", path, params=params, headers=headers)

    async def _post(self, path: str, json: Optional[dict[str, Any]] = None, headers: Optional[dict[str, str]] = None) -> Any:
        return await self._request("POST", path, json=json, headers=headers)

    async def _put(self, path: str, json: Optional[dict[str, Any]] = None, headers: Optional[dict[str, str]] = None) -> Any:
        return await self._request("PUT", path, json=json, headers=headers)


async def fetch_enrichment(call: Awaitable[T], what: str) -> Enrichment[T]:
    """
    Awaits a peer read and folds the outcome into an Enrichment.

    Args:
        call: Pending peer client call
        what: Short description for the log line
    """
    try:
        return Enrichment.present(await call)
    except NotFoundError:
        return Enrichment.missing()
    except PeerServiceError as e:
        await log_warning(f"Enrichment of {what} failed: {e.message}")
        return Enrichment.failed(e.message)
    except ValidationError as e:
        await log_warning(f"Enrichment of {what} failed: invalid payload ({e.error_count()} errors)")
        return Enrichment.failed(f"Invalid payload for {what}")
