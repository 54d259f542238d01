from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from src.shared.models.enrichment import EnrichmentStatus
from src.shared.models.enums import DeliveryStatus


class DeliveryDTO(BaseModel):
    id: int
    order_id: int
    status: DeliveryStatus = DeliveryStatus.PENDING
    driver_name: Optional[str] = None
    driver_phone: Optional[str] = None
    pickup_address: Optional[str] = None
    delivery_address: Optional[str] = None
    assigned_at: Optional[datetime] = None
    picked_up_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class DeliveryResponse(DeliveryDTO):
    order_status: Optional[str] = None
    customer_id: Optional[int] = None
    customer_name: Optional[str] = None
    restaurant_name: Optional[str] = None
    order_enrichment: EnrichmentStatus = EnrichmentStatus.MISSING
