from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from src.shared.models.enrichment import EnrichmentStatus
from src.shared.models.enums import OrderStatus


class OrderItemRequest(BaseModel):
    menu_item_id: int
    quantity: int = Field(ge=1)
    special_instructions: Optional[str] = None


class PlaceOrderRequest(BaseModel):
    restaurant_id: int
    items: List[OrderItemRequest] = Field(min_length=1)
    delivery_address: Optional[str] = None
    special_instructions: Optional[str] = None


class OrderItemDTO(BaseModel):
    id: Optional[int] = None
    menu_item_id: int
    item_name: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal
    special_instructions: Optional[str] = None

    class Config:
        from_attributes = True


class OrderDTO(BaseModel):
    """Order with the customer and restaurant snapshots captured at placement."""
    id: int
    status: OrderStatus = OrderStatus.PLACED
    customer_id: int
    customer_name: str
    restaurant_id: int
    restaurant_name: str
    restaurant_address: str
    total_amount: Decimal
    delivery_fee: Decimal
    delivery_address: Optional[str] = None
    special_instructions: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    estimated_delivery_time: Optional[datetime] = None
    items: List[OrderItemDTO] = Field(default_factory=list)

    class Config:
        from_attributes = True


class OrderResponse(OrderDTO):
    delivery_status: Optional[str] = None
    driver_name: Optional[str] = None
    driver_phone: Optional[str] = None
    delivery_enrichment: EnrichmentStatus = EnrichmentStatus.MISSING
