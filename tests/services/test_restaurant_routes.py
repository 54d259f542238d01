# tests/services/test_restaurant_routes.py
"""
HTTP tests for the restaurant service.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from src.common.exceptions import NotFoundError, UnauthorizedError
from src.services.restaurant_service.app import app
from src.services.restaurant_service.dependencies import get_restaurant_service
from src.services.restaurant_service.service import RestaurantService
from src.shared.models.restaurant_dto import RestaurantResponse

AUTH = {"X-Auth-User": "bob", "X-Auth-Role": "RESTAURANT_OWNER"}


@pytest.fixture
def service() -> MagicMock:
    return MagicMock(spec=RestaurantService)


@pytest.fixture
def client(service):
    app.dependency_overrides[get_restaurant_service] = lambda: service
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def response(restaurant) -> RestaurantResponse:
    return RestaurantResponse(**restaurant.model_dump(), owner_name="Bob Rossi")


def test_search_all_is_public(client, service, response) -> None:
    service.get_all_active = AsyncMock(return_value=[response])

    result = client.get("/api/v1/restaurants/search/all")

    assert result.status_code == 200
    assert result.json()[0]["owner_name"] == "Bob Rossi"


def test_search_by_city(client, service, response) -> None:
    service.search_by_city = AsyncMock(return_value=[response])

    client.get("/api/v1/restaurants/search/city/Springfield")

    service.search_by_city.assert_awaited_once_with("Springfield")


def test_get_restaurant_missing(client, service) -> None:
    service.get_restaurant = AsyncMock(side_effect=NotFoundError("Restaurant 99 not found"))

    assert client.get("/api/v1/restaurants/99").status_code == 404


def test_menu_item_price_is_decimal_string(client, service, menu_items) -> None:
    service.get_menu_item = AsyncMock(return_value=menu_items[101])

    result = client.get("/api/v1/restaurants/menu/101")

    assert result.json()["price"] == "12.50"


def test_create_requires_identity(client, service) -> None:
    service.create_restaurant = AsyncMock()

    result = client.post(
        "/api/v1/restaurants",
        json={"name": "X", "cuisine_type": "Thai", "address": "1 St", "city": "Springfield"},
    )

    assert result.status_code == 401
    service.create_restaurant.assert_not_called()


def test_create(client, service, response) -> None:
    service.create_restaurant = AsyncMock(return_value=response)

    result = client.post(
        "/api/v1/restaurants",
        json={"name": "Pasta Place", "cuisine_type": "Italian", "address": "12 Main St", "city": "Springfield"},
        headers=AUTH,
    )

    assert result.status_code == 201
    assert result.json()["id"] == 3


def test_toggle_returns_204(client, service) -> None:
    service.toggle_restaurant_active = AsyncMock(return_value=None)

    result = client.patch("/api/v1/restaurants/3/toggle", headers=AUTH)

    assert result.status_code == 204
    assert result.content == b""


def test_toggle_by_non_owner_is_403(client, service) -> None:
    service.toggle_restaurant_active = AsyncMock(side_effect=UnauthorizedError("You don't own this restaurant"))

    result = client.patch("/api/v1/restaurants/3/toggle", headers=AUTH)

    assert result.status_code == 403
    assert result.json()["error_code"] == "unauthorized"


def test_add_menu_item_rejects_non_positive_price(client, service) -> None:
    service.add_menu_item = AsyncMock()

    result = client.post("/api/v1/restaurants/3/menu", json={"name": "Free", "price": "0"}, headers=AUTH)

    assert result.status_code == 422
    service.add_menu_item.assert_not_called()


def test_toggle_menu_item(client, service) -> None:
    service.toggle_menu_item_availability = AsyncMock(return_value=None)

    assert client.patch("/api/v1/restaurants/menu/101/toggle", headers=AUTH).status_code == 204
