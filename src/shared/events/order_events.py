# src/shared/events/order_events.py
"""
Events published by the order service.
The payload is the full order snapshot.
"""

from __future__ import annotations

from src.infra.event_bus import DomainEvent, EventTypes
from src.shared.models.order_dto import OrderDTO


def _order_event(event_type: str, order: OrderDTO) -> DomainEvent:
    return DomainEvent(event_type=event_type, payload=order.model_dump(mode="json"))


def order_placed(order: OrderDTO) -> DomainEvent:
    return _order_event(EventTypes.ORDER_PLACED, order)


def order_deleted(order: OrderDTO) -> DomainEvent:
    """Published when a customer cancels an order."""
    return _order_event(EventTypes.ORDER_DELETED, order)


def parse_order(event: DomainEvent) -> OrderDTO:
    return OrderDTO.model_validate(event.payload)
