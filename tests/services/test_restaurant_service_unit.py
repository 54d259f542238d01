# tests/services/test_restaurant_service_unit.py
"""
Unit tests for RestaurantService: ownership checks and owner-name enrichment.
"""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.common.exceptions import NotFoundError, PeerServiceError, UnauthorizedError
from src.infra.api_clients import CustomerClient
from src.services.restaurant_service.repository import RestaurantRepository
from src.services.restaurant_service.service import RestaurantService
from src.shared.identity import Identity
from src.shared.models.customer_dto import CustomerAccountDTO
from src.shared.models.enrichment import EnrichmentStatus
from src.shared.models.enums import CustomerRole
from src.shared.models.restaurant_dto import MenuItemRequest, RestaurantRequest, UpdateMenuItemRequest

OWNER_IDENTITY = Identity(username="bob", roles=("RESTAURANT_OWNER",))


@pytest.fixture
def owner(customer) -> CustomerAccountDTO:
    return customer.model_copy(update={
        "id": 11,
        "username": "bob",
        "first_name": "Bob",
        "last_name": "Rossi",
        "role": CustomerRole.RESTAURANT_OWNER,
    })


@pytest.fixture
def repo(restaurant, menu_items) -> MagicMock:
    repo = MagicMock(spec=RestaurantRepository)
    repo.get_restaurant = AsyncMock(return_value=restaurant)
    repo.create_restaurant = AsyncMock(return_value=restaurant)
    repo.update_restaurant = AsyncMock(return_value=restaurant)
    repo.find_active_by_city = AsyncMock(return_value=[restaurant])
    repo.find_active_by_cuisine = AsyncMock(return_value=[restaurant])
    repo.find_all_active = AsyncMock(return_value=[restaurant, restaurant.model_copy(update={"id": 4})])
    repo.toggle_active = AsyncMock(return_value=False)
    repo.add_menu_item = AsyncMock(return_value=menu_items[101])
    repo.get_menu_item = AsyncMock(return_value=menu_items[101])
    repo.get_available_menu = AsyncMock(return_value=list(menu_items.values()))
    repo.update_menu_item = AsyncMock(return_value=menu_items[101])
    repo.toggle_menu_item_availability = AsyncMock(return_value=False)
    return repo


@pytest.fixture
def customer_client(owner) -> MagicMock:
    client = MagicMock(spec=CustomerClient)
    client.get_by_username = AsyncMock(return_value=owner)
    client.get_by_id = AsyncMock(return_value=owner)
    client.make_restaurant_owner = AsyncMock(return_value=owner)
    return client


@pytest.fixture
def service(repo, customer_client) -> RestaurantService:
    return RestaurantService(repo, customer_client)


@pytest.fixture
def restaurant_request() -> RestaurantRequest:
    return RestaurantRequest(name="Pasta Place", cuisine_type="Italian", address="12 Main St", city="Springfield")


# =============================================================================
# RESTAURANTS
# =============================================================================

@pytest.mark.asyncio
async def test_create_by_plain_customer_promotes_first(service, repo, customer_client, customer, identity, restaurant_request) -> None:
    customer_client.get_by_username.return_value = customer

    await service.create_restaurant(identity, restaurant_request)

    customer_client.make_restaurant_owner.assert_awaited_once_with(identity.as_headers())
    repo.create_restaurant.assert_awaited_once_with(restaurant_request, 7)


@pytest.mark.asyncio
async def test_create_by_owner_skips_promotion(service, repo, customer_client, restaurant_request) -> None:
    result = await service.create_restaurant(OWNER_IDENTITY, restaurant_request)

    customer_client.make_restaurant_owner.assert_not_called()
    repo.create_restaurant.assert_awaited_once_with(restaurant_request, 11)
    assert result.owner_name == "Bob Rossi"
    assert result.owner_enrichment == EnrichmentStatus.PRESENT


@pytest.mark.asyncio
async def test_get_restaurant_missing(service, repo) -> None:
    repo.get_restaurant.return_value = None

    with pytest.raises(NotFoundError):
        await service.get_restaurant(99)


@pytest.mark.asyncio
async def test_owner_name_blank_when_customer_service_down(service, customer_client) -> None:
    customer_client.get_by_id.side_effect = PeerServiceError("customer-service unreachable: ConnectError")

    result = await service.get_restaurant(3)

    assert result.owner_name == ""
    assert result.owner_enrichment == EnrichmentStatus.FAILED


@pytest.mark.asyncio
async def test_owner_name_blank_when_owner_gone(service, customer_client) -> None:
    customer_client.get_by_id.side_effect = NotFoundError("gone")

    result = await service.get_restaurant(3)

    assert result.owner_name == ""
    assert result.owner_enrichment == EnrichmentStatus.MISSING


@pytest.mark.asyncio
async def test_searches_enrich_every_result(service, repo, customer_client) -> None:
    assert [r.id for r in await service.get_all_active()] == [3, 4]
    assert customer_client.get_by_id.await_count == 2

    await service.search_by_city("springfield")
    repo.find_active_by_city.assert_awaited_once_with("springfield")

    await service.search_by_cuisine("italian")
    repo.find_active_by_cuisine.assert_awaited_once_with("italian")


@pytest.mark.asyncio
async def test_update_by_non_owner_is_rejected(service, repo, identity, customer_client, customer, restaurant_request) -> None:
    customer_client.get_by_username.return_value = customer

    with pytest.raises(UnauthorizedError, match="don't own"):
        await service.update_restaurant(3, identity, restaurant_request)

    repo.update_restaurant.assert_not_called()


@pytest.mark.asyncio
async def test_unknown_caller_is_rejected(service, repo, customer_client) -> None:
    customer_client.get_by_username.side_effect = NotFoundError("no such user")

    with pytest.raises(UnauthorizedError):
        await service.toggle_restaurant_active(3, Identity(username="ghost"))

    repo.toggle_active.assert_not_called()


@pytest.mark.asyncio
async def test_toggle_by_owner(service, repo) -> None:
    await service.toggle_restaurant_active(3, OWNER_IDENTITY)

    repo.toggle_active.assert_awaited_once_with(3)


# =============================================================================
# MENU
# =============================================================================

@pytest.mark.asyncio
async def test_add_menu_item_by_owner(service, repo) -> None:
    request = MenuItemRequest(name="Carbonara", price=Decimal("12.50"))

    item = await service.add_menu_item(3, OWNER_IDENTITY, request)

    assert item.id == 101
    repo.add_menu_item.assert_awaited_once_with(3, request)


@pytest.mark.asyncio
async def test_add_menu_item_missing_restaurant(service, repo) -> None:
    repo.get_restaurant.return_value = None

    with pytest.raises(NotFoundError):
        await service.add_menu_item(99, OWNER_IDENTITY, MenuItemRequest(name="X", price=Decimal("1.00")))


@pytest.mark.asyncio
async def test_get_menu_item_missing(service, repo) -> None:
    repo.get_menu_item.return_value = None

    with pytest.raises(NotFoundError):
        await service.get_menu_item(999)


@pytest.mark.asyncio
async def test_update_menu_item_applies_present_fields(service, repo) -> None:
    await service.update_menu_item(101, OWNER_IDENTITY, UpdateMenuItemRequest(price=Decimal("13.00")))

    repo.update_menu_item.assert_awaited_once_with(101, {"price": Decimal("13.00")})


@pytest.mark.asyncio
async def test_toggle_menu_item_checks_owner_of_item_restaurant(service, repo, identity, customer_client, customer) -> None:
    customer_client.get_by_username.return_value = customer

    with pytest.raises(UnauthorizedError):
        await service.toggle_menu_item_availability(101, identity)

    repo.get_restaurant.assert_awaited_once_with(3)
    repo.toggle_menu_item_availability.assert_not_called()


@pytest.mark.asyncio
async def test_get_menu(service, repo) -> None:
    assert [i.name for i in await service.get_menu(3)] == ["Carbonara", "Tiramisu"]
