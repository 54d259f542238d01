from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from src.shared.models.enrichment import EnrichmentStatus


class RestaurantDTO(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    cuisine_type: str
    address: str
    city: str
    phone: Optional[str] = None
    active: bool = True
    rating: float = 0.0
    estimated_delivery_minutes: int = 30
    menu_item_count: int = 0
    owner_id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RestaurantResponse(RestaurantDTO):
    owner_name: str = ""
    owner_enrichment: EnrichmentStatus = EnrichmentStatus.MISSING


class RestaurantRequest(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    cuisine_type: str = Field(min_length=1)
    address: str = Field(min_length=1)
    city: str = Field(min_length=1)
    phone: Optional[str] = None
    estimated_delivery_minutes: int = Field(default=30, ge=0)


class MenuItemDTO(BaseModel):
    id: int
    restaurant_id: int
    name: str
    description: Optional[str] = None
    price: Decimal
    category: Optional[str] = None
    available: bool = True
    image_url: Optional[str] = None

    class Config:
        from_attributes = True


class MenuItemRequest(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    category: Optional[str] = None
    image_url: Optional[str] = None


class UpdateMenuItemRequest(BaseModel):
    """Partial menu item update, None fields are left untouched."""
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    category: Optional[str] = None
    image_url: Optional[str] = None
