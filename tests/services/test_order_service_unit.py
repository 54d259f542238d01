# tests/services/test_order_service_unit.py
"""
Tests for order placement and lifecycle.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.common.exceptions import InvalidStateError, NotFoundError, PeerServiceError, UnauthorizedError
from src.infra.api_clients import CustomerClient, DeliveryClient, RestaurantClient
from src.infra.event_bus import EventTypes
from src.services.order_service.models import OrderDraft, OrderItemDraft
from src.services.order_service.repository import OrderRepository
from src.services.order_service.service import OrderService
from src.shared.models.delivery_dto import DeliveryDTO
from src.shared.models.enrichment import EnrichmentStatus
from src.shared.models.enums import DeliveryStatus, OrderStatus
from src.shared.models.order_dto import OrderDTO, OrderItemDTO, PlaceOrderRequest

NOW = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


def persist(draft: OrderDraft) -> OrderDTO:
    return OrderDTO(
        id=42,
        created_at=NOW,
        total_amount=draft.total_amount,
        items=[
            OrderItemDTO(
                menu_item_id=item.menu_item_id,
                item_name=item.item_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                subtotal=item.subtotal,
                special_instructions=item.special_instructions,
            )
            for item in draft.items
        ],
        **draft.model_dump(exclude={"items"}),
    )


@pytest.fixture
def repo() -> MagicMock:
    repo = MagicMock(spec=OrderRepository)
    repo.create_order = AsyncMock(side_effect=persist)
    repo.get_by_id = AsyncMock(return_value=None)
    repo.update_status = AsyncMock()
    repo.get_by_customer = AsyncMock(return_value=[])
    repo.get_by_restaurant = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def customer_client(customer) -> MagicMock:
    client = MagicMock(spec=CustomerClient)
    client.get_by_username = AsyncMock(return_value=customer)
    return client


@pytest.fixture
def restaurant_client(restaurant, menu_items) -> MagicMock:
    client = MagicMock(spec=RestaurantClient)
    client.get_restaurant = AsyncMock(return_value=restaurant)
    client.get_menu_item = AsyncMock(side_effect=lambda item_id: menu_items[item_id])
    return client


@pytest.fixture
def delivery_client() -> MagicMock:
    client = MagicMock(spec=DeliveryClient)
    client.get_by_order_id = AsyncMock(side_effect=NotFoundError("no delivery yet"))
    return client


@pytest.fixture
def service(repo, mock_event_bus, customer_client, restaurant_client, delivery_client) -> OrderService:
    return OrderService(
        repository=repo,
        event_bus=mock_event_bus,
        customer_client=customer_client,
        restaurant_client=restaurant_client,
        delivery_client=delivery_client,
        delivery_fee=Decimal("2.99"),
        clock=lambda: NOW,
    )


def place_request(*items, **kwargs) -> PlaceOrderRequest:
    return PlaceOrderRequest(
        restaurant_id=3,
        items=[{"menu_item_id": item_id, "quantity": qty} for item_id, qty in items],
        **kwargs,
    )


class TestOrderDraft:
    def test_subtotal_and_total(self) -> None:
        items = [
            OrderItemDraft(menu_item_id=1, item_name="a", quantity=3, unit_price=Decimal("0.10")),
            OrderItemDraft(menu_item_id=2, item_name="b", quantity=1, unit_price=Decimal("4.99")),
        ]
        draft = OrderDraft(
            customer_id=1, customer_name="x", restaurant_id=1, restaurant_name="r",
            restaurant_address="a", delivery_fee=Decimal("2.99"), items=items,
        )

        assert items[0].subtotal == Decimal("0.30")
        assert draft.total_amount == Decimal("5.29")

    def test_total_ignores_item_order(self) -> None:
        items = [
            OrderItemDraft(menu_item_id=i, item_name=str(i), quantity=q, unit_price=Decimal(p))
            for i, q, p in [(1, 2, "1.15"), (2, 5, "0.33"), (3, 1, "9.99")]
        ]

        def total(ordered):
            return OrderDraft(
                customer_id=1, customer_name="x", restaurant_id=1, restaurant_name="r",
                restaurant_address="a", delivery_fee=Decimal("0"), items=ordered,
            ).total_amount

        assert total(items) == total(list(reversed(items))) == Decimal("13.94")


class TestPlaceOrder:
    @pytest.mark.asyncio
    async def test_prices_and_snapshots_the_order(self, service, identity, repo, mock_event_bus) -> None:
        result = await service.place_order(identity, place_request((101, 2), (102, 1)))

        draft = repo.create_order.call_args[0][0]
        assert draft.customer_id == 7
        assert draft.customer_name == "Alice Smith"
        assert draft.restaurant_name == "Pasta Place"
        assert draft.restaurant_address == "12 Main St"
        assert draft.delivery_address == "99 Oak Ave"
        assert draft.delivery_fee == Decimal("2.99")
        assert draft.estimated_delivery_time == NOW + timedelta(minutes=40)
        assert [(i.item_name, i.subtotal) for i in draft.items] == [
            ("Carbonara", Decimal("25.00")),
            ("Tiramisu", Decimal("6.25")),
        ]

        assert result.total_amount == Decimal("31.25")
        assert result.status == OrderStatus.PLACED

        event = mock_event_bus.publish.call_args[0][0]
        assert event.event_type == EventTypes.ORDER_PLACED
        assert event.payload["id"] == 42
        assert len(event.payload["items"]) == 2

    @pytest.mark.asyncio
    async def test_request_address_wins(self, service, identity, repo) -> None:
        await service.place_order(identity, place_request((101, 1), delivery_address="1 Elm Rd"))

        assert repo.create_order.call_args[0][0].delivery_address == "1 Elm Rd"

    @pytest.mark.asyncio
    async def test_inactive_restaurant(self, service, identity, repo, restaurant_client, restaurant, mock_event_bus) -> None:
        restaurant_client.get_restaurant.return_value = restaurant.model_copy(update={"active": False})

        with pytest.raises(InvalidStateError):
            await service.place_order(identity, place_request((101, 1)))

        repo.create_order.assert_not_called()
        mock_event_bus.publish.assert_not_called()

    @pytest.mark.asyncio
    async def test_unavailable_item(self, service, identity, repo, menu_items) -> None:
        menu_items[102] = menu_items[102].model_copy(update={"available": False})

        with pytest.raises(InvalidStateError, match="Tiramisu"):
            await service.place_order(identity, place_request((101, 1), (102, 1)))

        repo.create_order.assert_not_called()

    @pytest.mark.asyncio
    async def test_item_from_another_restaurant(self, service, identity, repo, menu_items) -> None:
        menu_items[101] = menu_items[101].model_copy(update={"restaurant_id": 99})

        with pytest.raises(InvalidStateError, match="does not belong"):
            await service.place_order(identity, place_request((101, 1)))

        repo.create_order.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_restaurant(self, service, identity, restaurant_client) -> None:
        restaurant_client.get_restaurant.side_effect = NotFoundError("no restaurant")

        with pytest.raises(NotFoundError):
            await service.place_order(identity, place_request((101, 1)))

    @pytest.mark.asyncio
    async def test_unknown_customer(self, service, identity, customer_client, repo) -> None:
        customer_client.get_by_username.side_effect = NotFoundError("no customer")

        with pytest.raises(NotFoundError):
            await service.place_order(identity, place_request((101, 1)))

        repo.create_order.assert_not_called()


class TestDeliveryEnrichment:
    @pytest.mark.asyncio
    async def test_present(self, service, repo, delivery_client, order) -> None:
        repo.get_by_id.return_value = order
        delivery_client.get_by_order_id.side_effect = None
        delivery_client.get_by_order_id.return_value = DeliveryDTO(
            id=5, order_id=42, status=DeliveryStatus.ASSIGNED,
            driver_name="Mike Chen", driver_phone="+1-555-0103", created_at=NOW,
        )

        result = await service.get_order(42)

        assert result.delivery_status == "ASSIGNED"
        assert result.driver_name == "Mike Chen"
        assert result.driver_phone == "+1-555-0103"
        assert result.delivery_enrichment is EnrichmentStatus.PRESENT

    @pytest.mark.asyncio
    async def test_missing(self, service, repo, order) -> None:
        repo.get_by_id.return_value = order

        result = await service.get_order(42)

        assert result.delivery_status is None
        assert result.delivery_enrichment is EnrichmentStatus.MISSING

    @pytest.mark.asyncio
    async def test_peer_failure_still_returns_order(self, service, repo, delivery_client, order) -> None:
        repo.get_by_id.return_value = order
        delivery_client.get_by_order_id.side_effect = PeerServiceError("delivery_service unreachable")

        result = await service.get_order(42)

        assert result.id == 42
        assert result.delivery_enrichment is EnrichmentStatus.FAILED

    @pytest.mark.asyncio
    async def test_get_missing_order(self, service) -> None:
        with pytest.raises(NotFoundError):
            await service.get_order(1)


class TestLists:
    @pytest.mark.asyncio
    async def test_customer_orders_keep_repository_order(self, service, identity, repo, order_factory) -> None:
        repo.get_by_customer.return_value = [order_factory(id=3), order_factory(id=2)]

        result = await service.get_customer_orders(identity)

        repo.get_by_customer.assert_awaited_once_with(7)
        assert [o.id for o in result] == [3, 2]

    @pytest.mark.asyncio
    async def test_restaurant_orders(self, service, repo, order) -> None:
        repo.get_by_restaurant.return_value = [order]

        result = await service.get_restaurant_orders(3)

        repo.get_by_restaurant.assert_awaited_once_with(3)
        assert len(result) == 1


class TestUpdateStatus:
    @pytest.mark.asyncio
    async def test_case_insensitive(self, service, repo, order) -> None:
        repo.get_by_id.return_value = order
        repo.update_status.return_value = order.model_copy(update={"status": OrderStatus.PREPARING})

        result = await service.update_order_status(42, "preparing")

        repo.update_status.assert_awaited_once_with(42, OrderStatus.PREPARING)
        assert result.status == OrderStatus.PREPARING

    @pytest.mark.asyncio
    async def test_response_carries_delivery_lookup(self, service, repo, delivery_client, order) -> None:
        repo.get_by_id.return_value = order
        repo.update_status.return_value = order.model_copy(update={"status": OrderStatus.PREPARING})

        result = await service.update_order_status(42, "PREPARING")

        delivery_client.get_by_order_id.assert_awaited_once_with(42)
        assert result.delivery_enrichment is EnrichmentStatus.MISSING

    @pytest.mark.asyncio
    async def test_unknown_status(self, service, repo, order) -> None:
        repo.get_by_id.return_value = order

        with pytest.raises(InvalidStateError):
            await service.update_order_status(42, "teleported")

        repo.update_status.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_order(self, service, repo) -> None:
        with pytest.raises(NotFoundError):
            await service.update_order_status(42, "CONFIRMED")


class TestCancelOrder:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [OrderStatus.PLACED, OrderStatus.CONFIRMED])
    async def test_cancel(self, service, identity, repo, mock_event_bus, order, status) -> None:
        repo.get_by_id.return_value = order.model_copy(update={"status": status})
        repo.update_status.return_value = order.model_copy(update={"status": OrderStatus.CANCELLED})

        result = await service.cancel_order(42, identity)

        assert result.status == OrderStatus.CANCELLED
        repo.update_status.assert_awaited_once_with(42, OrderStatus.CANCELLED)
        mock_event_bus.publish.assert_awaited_once()
        event = mock_event_bus.publish.call_args[0][0]
        assert event.event_type == EventTypes.ORDER_DELETED
        assert event.payload["status"] == "CANCELLED"

    @pytest.mark.asyncio
    async def test_cancelled_response_is_enriched(self, service, identity, repo, delivery_client, order) -> None:
        repo.get_by_id.return_value = order
        repo.update_status.return_value = order.model_copy(update={"status": OrderStatus.CANCELLED})
        delivery_client.get_by_order_id.side_effect = PeerServiceError("delivery_service unreachable")

        result = await service.cancel_order(42, identity)

        assert result.status == OrderStatus.CANCELLED
        assert result.delivery_enrichment is EnrichmentStatus.FAILED

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status",
        [
            OrderStatus.PREPARING,
            OrderStatus.READY_FOR_PICKUP,
            OrderStatus.OUT_FOR_DELIVERY,
            OrderStatus.DELIVERED,
            OrderStatus.CANCELLED,
        ],
    )
    async def test_cannot_cancel_later_statuses(self, service, identity, repo, mock_event_bus, order, status) -> None:
        repo.get_by_id.return_value = order.model_copy(update={"status": status})

        with pytest.raises(InvalidStateError, match=f"Cannot cancel order in status: {status.value}"):
            await service.cancel_order(42, identity)

        repo.update_status.assert_not_called()
        mock_event_bus.publish.assert_not_called()

    @pytest.mark.asyncio
    async def test_only_owner_can_cancel(self, service, identity, repo, mock_event_bus, order) -> None:
        repo.get_by_id.return_value = order.model_copy(update={"customer_id": 99})

        with pytest.raises(UnauthorizedError, match="You can only cancel your own orders"):
            await service.cancel_order(42, identity)

        mock_event_bus.publish.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_order(self, service, identity) -> None:
        with pytest.raises(NotFoundError):
            await service.cancel_order(42, identity)
