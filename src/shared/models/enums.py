from enum import Enum


class OrderStatus(str, Enum):
    """Order lifecycle."""
    PLACED = "PLACED"
    CONFIRMED = "CONFIRMED"
    PREPARING = "PREPARING"
    READY_FOR_PICKUP = "READY_FOR_PICKUP"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str) -> "OrderStatus":
        """Case-insensitive lookup, raises ValueError on unknown names."""
        return cls(value.strip().upper())


class DeliveryStatus(str, Enum):
    """Delivery lifecycle."""
    PENDING = "PENDING"
    ASSIGNED = "ASSIGNED"
    PICKED_UP = "PICKED_UP"
    IN_TRANSIT = "IN_TRANSIT"
    DELIVERED = "DELIVERED"
    FAILED = "FAILED"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str) -> "DeliveryStatus":
        """Case-insensitive lookup, raises ValueError on unknown names."""
        return cls(value.strip().upper())


class CustomerRole(str, Enum):
    """Customer roles."""
    CUSTOMER = "CUSTOMER"
    RESTAURANT_OWNER = "RESTAURANT_OWNER"
    ADMIN = "ADMIN"

    def __str__(self) -> str:
        return self.value
