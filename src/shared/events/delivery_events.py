# src/shared/events/delivery_events.py
"""
Events published by the delivery service.
"""

from __future__ import annotations

from pydantic import BaseModel

from src.infra.event_bus import DomainEvent, EventTypes


class DeliveryUpdate(BaseModel):
    """Status is a delivery-side name, the order service maps it to its own."""
    order_id: int
    status: str


def delivery_update(order_id: int, status: str) -> DomainEvent:
    return DomainEvent(
        event_type=EventTypes.DELIVERY_UPDATE,
        payload=DeliveryUpdate(order_id=order_id, status=status).model_dump(),
    )


def parse_delivery_update(event: DomainEvent) -> DeliveryUpdate:
    return DeliveryUpdate.model_validate(event.payload)
