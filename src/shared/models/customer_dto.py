from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from src.shared.models.enums import CustomerRole


class CustomerDTO(BaseModel):
    id: int
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    delivery_address: Optional[str] = None
    city: Optional[str] = None
    role: CustomerRole = CustomerRole.CUSTOMER
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @property
    def full_name(self) -> str:
        """"first last" as stored on orders and restaurants."""
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


class CustomerAccountDTO(CustomerDTO):
    """Internal view used by the gateway to verify a login."""
    password_hash: str


class CreateCustomerRequest(BaseModel):
    username: str = Field(min_length=3, max_length=50)
    email: EmailStr
    password_hash: str = Field(min_length=1)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    delivery_address: Optional[str] = None
    city: Optional[str] = None


class UpdateCustomerRequest(BaseModel):
    """Partial profile update, None fields are left untouched."""
    email: Optional[EmailStr] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    delivery_address: Optional[str] = None
    city: Optional[str] = None
