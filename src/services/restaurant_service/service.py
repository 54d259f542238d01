import asyncio
from typing import List

from src.common.exceptions import NotFoundError, UnauthorizedError
from src.common.logger import log_info, TypeMsg
from src.infra.api_clients import CustomerClient
from src.infra.http_client import fetch_enrichment
from src.services.restaurant_service.repository import RestaurantRepository
from src.shared.identity import Identity
from src.shared.models.enums import CustomerRole
from src.shared.models.restaurant_dto import (
    MenuItemDTO,
    MenuItemRequest,
    RestaurantDTO,
    RestaurantRequest,
    RestaurantResponse,
    UpdateMenuItemRequest,
)


class RestaurantService:
    """
    Restaurant catalog.

    Owner data lives in the customer service: ownership checks and owner
    names go through CustomerClient.
    """

    def __init__(self, repository: RestaurantRepository, customer_client: CustomerClient):
        self.repository = repository
        self.customer_client = customer_client

    # ---- restaurants ----

    async def create_restaurant(self, identity: Identity, request: RestaurantRequest) -> RestaurantResponse:
        owner = await self.customer_client.get_by_username(identity.username)

        if owner.role == CustomerRole.CUSTOMER:
            await log_info(f"Promoting {identity.username} to restaurant owner", type_msg=TypeMsg.INFO)
            await self.customer_client.make_restaurant_owner(identity.as_headers())

        restaurant = await self.repository.create_restaurant(request, owner.id)
        await log_info(f"Restaurant {restaurant.id} created by {identity.username}", type_msg=TypeMsg.INFO)
        return await self._with_owner_name(restaurant)

    async def get_restaurant(self, restaurant_id: int) -> RestaurantResponse:
        return await self._with_owner_name(await self._require_restaurant(restaurant_id))

    async def search_by_city(self, city: str) -> List[RestaurantResponse]:
        return await self._with_owner_names(await self.repository.find_active_by_city(city))

    async def search_by_cuisine(self, cuisine_type: str) -> List[RestaurantResponse]:
        return await self._with_owner_names(await self.repository.find_active_by_cuisine(cuisine_type))

    async def get_all_active(self) -> List[RestaurantResponse]:
        return await self._with_owner_names(await self.repository.find_all_active())

    async def update_restaurant(
        self, restaurant_id: int, identity: Identity, request: RestaurantRequest
    ) -> RestaurantResponse:
        restaurant = await self._require_restaurant(restaurant_id)
        await self._require_owner(restaurant, identity)

        updated = await self.repository.update_restaurant(restaurant_id, request)
        if not updated:
            raise NotFoundError(f"Restaurant {restaurant_id} not found")
        return await self._with_owner_name(updated)

    async def toggle_restaurant_active(self, restaurant_id: int, identity: Identity) -> None:
        restaurant = await self._require_restaurant(restaurant_id)
        await self._require_owner(restaurant, identity)

        active = await self.repository.toggle_active(restaurant_id)
        await log_info(f"Restaurant {restaurant_id} active={active}", type_msg=TypeMsg.INFO)

    # ---- menu ----

    async def add_menu_item(self, restaurant_id: int, identity: Identity, request: MenuItemRequest) -> MenuItemDTO:
        restaurant = await self._require_restaurant(restaurant_id)
        await self._require_owner(restaurant, identity)
        return await self.repository.add_menu_item(restaurant_id, request)

    async def get_menu_item(self, item_id: int) -> MenuItemDTO:
        item = await self.repository.get_menu_item(item_id)
        if not item:
            raise NotFoundError(f"Menu item {item_id} not found")
        return item

    async def get_menu(self, restaurant_id: int) -> List[MenuItemDTO]:
        """Available items only."""
        return await self.repository.get_available_menu(restaurant_id)

    async def update_menu_item(self, item_id: int, identity: Identity, request: UpdateMenuItemRequest) -> MenuItemDTO:
        item = await self.get_menu_item(item_id)
        await self._require_owner(await self._require_restaurant(item.restaurant_id), identity)

        updated = await self.repository.update_menu_item(item_id, request.model_dump(exclude_none=True))
        if not updated:
            raise NotFoundError(f"Menu item {item_id} not found")
        return updated

    async def toggle_menu_item_availability(self, item_id: int, identity: Identity) -> None:
        item = await self.get_menu_item(item_id)
        await self._require_owner(await self._require_restaurant(item.restaurant_id), identity)

        available = await self.repository.toggle_menu_item_availability(item_id)
        await log_info(f"Menu item {item_id} available={available}", type_msg=TypeMsg.INFO)

    # ---- helpers ----

    async def _require_restaurant(self, restaurant_id: int) -> RestaurantDTO:
        restaurant = await self.repository.get_restaurant(restaurant_id)
        if not restaurant:
            raise NotFoundError(f"Restaurant {restaurant_id} not found")
        return restaurant

    async def _require_owner(self, restaurant: RestaurantDTO, identity: Identity) -> None:
        try:
            caller = await self.customer_client.get_by_username(identity.username)
        except NotFoundError as e:
            raise UnauthorizedError("You don't own this restaurant") from e
        if caller.id != restaurant.owner_id:
            raise UnauthorizedError("You don't own this restaurant")

    async def _with_owner_name(self, restaurant: RestaurantDTO) -> RestaurantResponse:
        """Owner name is best-effort; a customer service failure leaves it blank."""
        owner = await fetch_enrichment(
            self.customer_client.get_by_id(restaurant.owner_id),
            f"owner of restaurant {restaurant.id}",
        )
        return RestaurantResponse(
            **restaurant.model_dump(),
            owner_name=owner.value.full_name if owner.is_present else "",
            owner_enrichment=owner.status,
        )

    async def _with_owner_names(self, restaurants: List[RestaurantDTO]) -> List[RestaurantResponse]:
        return list(await asyncio.gather(*(self._with_owner_name(r) for r in restaurants)))
