# src/services/order_service/consumer.py
"""
delivery.* consumer.
Moves the order status along with the delivery lifecycle.
"""

from __future__ import annotations

from pydantic import ValidationError

from src.common.constants import ORDER_QUEUE, ORDER_QUEUE_BINDING
from src.common.logger import log_info, log_warning, TypeMsg
from src.infra.event_bus import DomainEvent, EventBus, EventTypes
from src.services.order_service.repository import OrderRepository
from src.shared.events import parse_delivery_update
from src.shared.models.enums import OrderStatus

DELIVERY_TO_ORDER_STATUS: dict[str, OrderStatus] = {
    "CONFIRMED": OrderStatus.CONFIRMED,
    "ASSIGNED": OrderStatus.CONFIRMED,
    "PICKED_UP": OrderStatus.OUT_FOR_DELIVERY,
    "IN_TRANSIT": OrderStatus.OUT_FOR_DELIVERY,
    "DELIVERED": OrderStatus.DELIVERED,
    "FAILED": OrderStatus.CANCELLED,
}


class DeliveryUpdateConsumer:
    """Overwrites the order status, no transition guard."""

    def __init__(self, repository: OrderRepository):
        self.repository = repository

    async def handle(self, event: DomainEvent) -> None:
        if event.event_type != EventTypes.DELIVERY_UPDATE:
            await log_info(f"Ignoring {event.event_type} on {ORDER_QUEUE}", type_msg=TypeMsg.DEBUG)
            return

        try:
            update = parse_delivery_update(event)
        except ValidationError as e:
            await log_warning(f"Malformed delivery update {event.event_id}: {e}")
            return

        await log_info(
            f"Received delivery update for order {update.order_id}: status={update.status}",
            type_msg=TypeMsg.INFO,
        )

        order = await self.repository.get_by_id(update.order_id)
        if not order:
            await log_warning(f"Order not found for delivery update: order_id={update.order_id}")
            return

        new_status = DELIVERY_TO_ORDER_STATUS.get(update.status.strip().upper())
        if new_status is None:
            await log_warning(f"Unknown delivery status: {update.status}")
            return

        await self.repository.update_status(order.id, new_status)
        await log_info(f"Order {order.id} status updated to {new_status}", type_msg=TypeMsg.INFO)


async def start_consumer(event_bus: EventBus, repository: OrderRepository) -> DeliveryUpdateConsumer:
    consumer = DeliveryUpdateConsumer(repository)
    await event_bus.subscribe(ORDER_QUEUE_BINDING, consumer.handle, queue_name=ORDER_QUEUE)
    return consumer
