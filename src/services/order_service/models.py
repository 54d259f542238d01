# src/services/order_service/models.py
"""
Order and item drafts built by the service before they are persisted.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from src.shared.models.enums import OrderStatus

CENT = Decimal("0.01")


class OrderItemDraft(BaseModel):
    """Item priced from the menu item fetched at placement."""

    menu_item_id: int
    item_name: str = Field(..., description="Menu item name at placement time")
    quantity: int = Field(..., ge=1)
    unit_price: Decimal
    special_instructions: Optional[str] = None

    class Config:
        frozen = True

    @property
    def subtotal(self) -> Decimal:
        return (self.unit_price * self.quantity).quantize(CENT)


class OrderDraft(BaseModel):
    """Order with the customer and restaurant snapshots, not yet persisted."""

    status: OrderStatus = OrderStatus.PLACED

    # Snapshots
    customer_id: int
    customer_name: str
    restaurant_id: int
    restaurant_name: str
    restaurant_address: str

    delivery_fee: Decimal
    delivery_address: Optional[str] = None
    special_instructions: Optional[str] = None
    estimated_delivery_time: Optional[datetime] = None
    items: List[OrderItemDraft] = Field(default_factory=list)

    class Config:
        frozen = True

    @property
    def total_amount(self) -> Decimal:
        """Sum of item subtotals, the delivery fee is kept separately."""
        return sum((item.subtotal for item in self.items), Decimal("0.00")).quantize(CENT)
