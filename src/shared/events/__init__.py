# src/shared/events/__init__.py
"""
Event payloads carried on app.exchange.

- order_events: order.placed, order.deleted (full order snapshot)
- delivery_events: delivery.update (order id and status)
"""

from src.shared.events.order_events import order_placed, order_deleted, parse_order
from src.shared.events.delivery_events import DeliveryUpdate, delivery_update, parse_delivery_update

__all__ = [
    "order_placed",
    "order_deleted",
    "parse_order",
    "DeliveryUpdate",
    "delivery_update",
    "parse_delivery_update",
]
