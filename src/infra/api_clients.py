# src/infra/api_clients.py
"""
Typed clients for the peer services.
Each service builds only the clients it calls.
"""

from typing import Optional

import httpx

from src.config import settings
from src.infra.http_client import BaseClient
from src.shared.models.customer_dto import CustomerAccountDTO, CustomerDTO, CreateCustomerRequest
from src.shared.models.delivery_dto import DeliveryDTO
from src.shared.models.order_dto import OrderDTO
from src.shared.models.restaurant_dto import MenuItemDTO, RestaurantDTO


def _timeout() -> float:
    return settings.http_client.PEER_TIMEOUT_SECONDS


class CustomerClient(BaseClient):
    service_name = "customer_service"

    def __init__(self, base_url: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        base_url = base_url or f"{settings.deployment.customer_service_url}/api/v1/customers"
        super().__init__(base_url, timeout=_timeout(), transport=transport)

    async def get_by_username(self, username: str) -> CustomerAccountDTO:
        data = await self._get(f"/username/{username}")
        return self._parse(CustomerAccountDTO, data)

    async def get_by_id(self, customer_id: int) -> CustomerDTO:
        data = await self._get(f"/id/{customer_id}")
        return self._parse(CustomerDTO, data)

    async def create(self, request: CreateCustomerRequest) -> CustomerDTO:
        data = await self._post("/create", json=request.model_dump(mode="json"))
        return self._parse(CustomerDTO, data)

    async def make_restaurant_owner(self, headers: dict[str, str]) -> CustomerDTO:
        """Promotes the caller identified by the forwarded identity headers."""
        data = await self._put("/make-restaurant-owner", headers=headers)
        return self._parse(CustomerDTO, data)


class RestaurantClient(BaseClient):
    service_name = "restaurant_service"

    def __init__(self, base_url: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        base_url = base_url or f"{settings.deployment.restaurant_service_url}/api/v1/restaurants"
        super().__init__(base_url, timeout=_timeout(), transport=transport)

    async def get_restaurant(self, restaurant_id: int) -> RestaurantDTO:
        data = await self._get(f"/{restaurant_id}")
        return self._parse(RestaurantDTO, data)

    async def get_menu_item(self, item_id: int) -> MenuItemDTO:
        data = await self._get(f"/menu/{item_id}")
        return self._parse(MenuItemDTO, data)


class OrderClient(BaseClient):
    service_name = "order_service"

    def __init__(self, base_url: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        base_url = base_url or f"{settings.deployment.order_service_url}/api/v1/orders"
        super().__init__(base_url, timeout=_timeout(), transport=transport)

    async def get_order(self, order_id: int) -> OrderDTO:
        data = await self._get(f"/{order_id}")
        return self._parse(OrderDTO, data)


class DeliveryClient(BaseClient):
    service_name = "delivery_service"

    def __init__(self, base_url: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        base_url = base_url or f"{settings.deployment.delivery_service_url}/api/v1/deliveries"
        super().__init__(base_url, timeout=_timeout(), transport=transport)

    async def get_by_order_id(self, order_id: int) -> DeliveryDTO:
        data = await self._get(f"/order/{order_id}")
        return self._parse(DeliveryDTO, data)

