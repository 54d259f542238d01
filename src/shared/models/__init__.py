# src/shared/models/__init__.py
"""
DTOs and pydantic models exchanged between the services.
"""

from src.shared.models.enums import OrderStatus, DeliveryStatus, CustomerRole
from src.shared.models.common import ErrorResponse, HealthStatus
from src.shared.models.enrichment import Enrichment, EnrichmentStatus
from src.shared.models.customer_dto import (
    CustomerDTO,
    CustomerAccountDTO,
    CreateCustomerRequest,
    UpdateCustomerRequest,
)
from src.shared.models.restaurant_dto import (
    RestaurantDTO,
    RestaurantResponse,
    RestaurantRequest,
    MenuItemDTO,
    MenuItemRequest,
    UpdateMenuItemRequest,
)
from src.shared.models.order_dto import (
    OrderItemRequest,
    PlaceOrderRequest,
    OrderItemDTO,
    OrderDTO,
    OrderResponse,
)
from src.shared.models.delivery_dto import DeliveryDTO, DeliveryResponse

__all__ = [
    # Enums
    "OrderStatus",
    "DeliveryStatus",
    "CustomerRole",
    # Common
    "ErrorResponse",
    "HealthStatus",
    "Enrichment",
    "EnrichmentStatus",
    # Customer
    "CustomerDTO",
    "CustomerAccountDTO",
    "CreateCustomerRequest",
    "UpdateCustomerRequest",
    # Restaurant
    "RestaurantDTO",
    "RestaurantResponse",
    "RestaurantRequest",
    "MenuItemDTO",
    "MenuItemRequest",
    "UpdateMenuItemRequest",
    # Order
    "OrderItemRequest",
    "PlaceOrderRequest",
    "OrderItemDTO",
    "OrderDTO",
    "OrderResponse",
    # Delivery
    "DeliveryDTO",
    "DeliveryResponse",
]
