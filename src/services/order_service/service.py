import asyncio
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, List

from src.common.exceptions import InvalidStateError, NotFoundError, UnauthorizedError
from src.common.logger import log_info, TypeMsg
from src.infra.api_clients import CustomerClient, DeliveryClient, RestaurantClient
from src.infra.event_bus import EventBus
from src.infra.http_client import fetch_enrichment
from src.services.order_service.models import OrderDraft, OrderItemDraft
from src.services.order_service.repository import OrderRepository
from src.shared.events import order_deleted, order_placed
from src.shared.identity import Identity
from src.shared.models.enums import OrderStatus
from src.shared.models.order_dto import OrderDTO, OrderResponse, PlaceOrderRequest

# Only these can still be cancelled by the customer
CANCELLABLE_STATUSES = frozenset({OrderStatus.PLACED, OrderStatus.CONFIRMED})


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class OrderService:
    """
    Order placement and lifecycle.

    Customer, restaurant and menu data are read from their services at
    placement and copied onto the order as snapshots.
    """

    def __init__(
        self,
        repository: OrderRepository,
        event_bus: EventBus,
        customer_client: CustomerClient,
        restaurant_client: RestaurantClient,
        delivery_client: DeliveryClient,
        delivery_fee: Decimal,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.repository = repository
        self.event_bus = event_bus
        self.customer_client = customer_client
        self.restaurant_client = restaurant_client
        self.delivery_client = delivery_client
        self.delivery_fee = delivery_fee
        self.clock = clock

    async def place_order(self, identity: Identity, request: PlaceOrderRequest) -> OrderResponse:
        """
        Validates the request against the catalog, prices it, persists it and
        publishes order.placed.

        Raises:
            NotFoundError: unknown customer, restaurant or menu item
            InvalidStateError: inactive restaurant, unavailable item or item
                from another restaurant
        """
        customer = await self.customer_client.get_by_username(identity.username)

        restaurant = await self.restaurant_client.get_restaurant(request.restaurant_id)
        if not restaurant.active:
            raise InvalidStateError(f"Restaurant {restaurant.name} is currently not accepting orders")

        items: List[OrderItemDraft] = []
        for item_request in request.items:
            menu_item = await self.restaurant_client.get_menu_item(item_request.menu_item_id)
            if not menu_item.available:
                raise InvalidStateError(f"Menu item '{menu_item.name}' is not available")
            if menu_item.restaurant_id != restaurant.id:
                raise InvalidStateError(
                    f"Menu item '{menu_item.name}' does not belong to restaurant '{restaurant.name}'"
                )
            items.append(
                OrderItemDraft(
                    menu_item_id=menu_item.id,
                    item_name=menu_item.name,
                    quantity=item_request.quantity,
                    unit_price=menu_item.price,
                    special_instructions=item_request.special_instructions,
                )
            )

        draft = OrderDraft(
            customer_id=customer.id,
            customer_name=customer.full_name,
            restaurant_id=restaurant.id,
            restaurant_name=restaurant.name,
            restaurant_address=restaurant.address,
            delivery_fee=self.delivery_fee,
            delivery_address=request.delivery_address or customer.delivery_address,
            special_instructions=request.special_instructions,
            estimated_delivery_time=self.clock() + timedelta(minutes=restaurant.estimated_delivery_minutes),
            items=items,
        )

        order = await self.repository.create_order(draft)
        await log_info(
            f"Order {order.id} placed by {identity.username}: total {order.total_amount}",
            type_msg=TypeMsg.INFO,
        )

        await self.event_bus.publish(order_placed(order))
        return await self._with_delivery_info(order)

    async def get_order(self, order_id: int) -> OrderResponse:
        return await self._with_delivery_info(await self._require_order(order_id))

    async def get_customer_orders(self, identity: Identity) -> List[OrderResponse]:
        customer = await self.customer_client.get_by_username(identity.username)
        return await self._with_delivery_infos(await self.repository.get_by_customer(customer.id))

    async def get_restaurant_orders(self, restaurant_id: int) -> List[OrderResponse]:
        return await self._with_delivery_infos(await self.repository.get_by_restaurant(restaurant_id))

    async def update_order_status(self, order_id: int, status: str) -> OrderResponse:
        """No transition guard, any known status overwrites the current one."""
        await self._require_order(order_id)
        try:
            new_status = OrderStatus.parse(status)
        except ValueError as e:
            raise InvalidStateError(f"Unknown order status: {status}") from e

        updated = await self.repository.update_status(order_id, new_status)
        if not updated:
            raise NotFoundError(f"Order {order_id} not found")
        await log_info(f"Order {order_id} status set to {new_status}", type_msg=TypeMsg.INFO)
        return await self._with_delivery_info(updated)

    async def cancel_order(self, order_id: int, identity: Identity) -> OrderResponse:
        order = await self._require_order(order_id)

        customer = await self.customer_client.get_by_username(identity.username)
        if order.customer_id != customer.id:
            raise UnauthorizedError("You can only cancel your own orders")

        if order.status not in CANCELLABLE_STATUSES:
            raise InvalidStateError(f"Cannot cancel order in status: {order.status}")

        cancelled = await self.repository.update_status(order_id, OrderStatus.CANCELLED)
        if not cancelled:
            raise NotFoundError(f"Order {order_id} not found")

        await log_info(f"Order {order_id} cancelled by {identity.username}", type_msg=TypeMsg.INFO)
        await self.event_bus.publish(order_deleted(cancelled))
        return await self._with_delivery_info(cancelled)

    async def _require_order(self, order_id: int) -> OrderDTO:
        order = await self.repository.get_by_id(order_id)
        if not order:
            raise NotFoundError(f"Order {order_id} not found")
        return order

    async def _with_delivery_info(self, order: OrderDTO) -> OrderResponse:
        delivery = await fetch_enrichment(
            self.delivery_client.get_by_order_id(order.id),
            f"delivery of order {order.id}",
        )
        if not delivery.is_present:
            return OrderResponse(**order.model_dump(), delivery_enrichment=delivery.status)
        return OrderResponse(
            **order.model_dump(),
            delivery_status=str(delivery.value.status),
            driver_name=delivery.value.driver_name,
            driver_phone=delivery.value.driver_phone,
            delivery_enrichment=delivery.status,
        )

    async def _with_delivery_infos(self, orders: List[OrderDTO]) -> List[OrderResponse]:
        return list(await asyncio.gather(*(self._with_delivery_info(o) for o in orders)))
