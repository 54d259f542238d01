# src/services/delivery_service/consumer.py
"""
order.* consumer.
order.placed assigns a driver, order.deleted cancels the delivery.
"""

from __future__ import annotations

from pydantic import ValidationError

from src.common.constants import DELIVERY_QUEUE, DELIVERY_QUEUE_BINDING
from src.common.logger import log_info, log_warning, TypeMsg
from src.infra.event_bus import DomainEvent, EventBus, EventTypes
from src.services.delivery_service.service import DeliveryService
from src.shared.events import parse_order


class OrderEventConsumer:
    def __init__(self, service: DeliveryService):
        self.service = service

    async def handle(self, event: DomainEvent) -> None:
        if event.event_type not in (EventTypes.ORDER_PLACED, EventTypes.ORDER_DELETED):
            await log_info(f"Ignoring {event.event_type} on {DELIVERY_QUEUE}", type_msg=TypeMsg.DEBUG)
            return

        try:
            order = parse_order(event)
        except ValidationError as e:
            await log_warning(f"Malformed order payload in {event.event_id}: {e}")
            return

        if event.event_type == EventTypes.ORDER_PLACED:
            await log_info(f"Creating delivery for order {order.id}", type_msg=TypeMsg.INFO)
            await self.service.on_order_placed(order)
        else:
            await log_info(f"Cancelling delivery for order {order.id}", type_msg=TypeMsg.INFO)
            await self.service.on_order_cancelled(order)


async def start_consumer(event_bus: EventBus, service: DeliveryService) -> OrderEventConsumer:
    consumer = OrderEventConsumer(service)
    await event_bus.subscribe(DELIVERY_QUEUE_BINDING, consumer.handle, queue_name=DELIVERY_QUEUE)
    return consumer
