# tests/conftest.py
"""
Shared fixtures.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Environment must be set before src.config is imported
os.environ.setdefault("DB_PASSWORD", "test_password")
os.environ.setdefault("JWT_SECRET", "test_jwt_secret")

from src.infra.event_bus import EventBus
from src.shared.identity import Identity
from src.shared.models.customer_dto import CustomerAccountDTO
from src.shared.models.enums import CustomerRole, OrderStatus
from src.shared.models.order_dto import OrderDTO, OrderItemDTO
from src.shared.models.restaurant_dto import MenuItemDTO, RestaurantDTO

NOW = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# PATHS
# =============================================================================

@pytest.fixture(scope="session")
def project_root() -> Path:
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def config_path(project_root: Path) -> Path:
    return project_root / "config" / "config.json"


# =============================================================================
# DOMAIN
# =============================================================================

@pytest.fixture
def identity() -> Identity:
    return Identity(username="alice", roles=("CUSTOMER",))


@pytest.fixture
def customer() -> CustomerAccountDTO:
    return CustomerAccountDTO(
        id=7,
        username="alice",
        email="alice@example.com",
        first_name="Alice",
        last_name="Smith",
        delivery_address="99 Oak Ave",
        city="Springfield",
        role=CustomerRole.CUSTOMER,
        created_at=NOW,
        password_hash="pbkdf2_sha256$1$c2FsdA$aGFzaA",
    )


@pytest.fixture
def restaurant() -> RestaurantDTO:
    return RestaurantDTO(
        id=3,
        name="Pasta Place",
        cuisine_type="Italian",
        address="12 Main St",
        city="Springfield",
        active=True,
        estimated_delivery_minutes=40,
        owner_id=11,
        created_at=NOW,
    )


@pytest.fixture
def menu_items() -> dict[int, MenuItemDTO]:
    return {
        101: MenuItemDTO(id=101, restaurant_id=3, name="Carbonara", price=Decimal("12.50")),
        102: MenuItemDTO(id=102, restaurant_id=3, name="Tiramisu", price=Decimal("6.25")),
    }


def make_order(**overrides) -> OrderDTO:
    data = dict(
        id=42,
        status=OrderStatus.PLACED,
        customer_id=7,
        customer_name="Alice Smith",
        restaurant_id=3,
        restaurant_name="Pasta Place",
        restaurant_address="12 Main St",
        total_amount=Decimal("31.25"),
        delivery_fee=Decimal("2.99"),
        delivery_address="99 Oak Ave",
        created_at=NOW,
        items=[
            OrderItemDTO(
                id=1,
                menu_item_id=101,
                item_name="Carbonara",
                quantity=2,
                unit_price=Decimal("12.50"),
                subtotal=Decimal("25.00"),
            ),
            OrderItemDTO(
                id=2,
                menu_item_id=102,
                item_name="Tiramisu",
                quantity=1,
                unit_price=Decimal("6.25"),
                subtotal=Decimal("6.25"),
            ),
        ],
    )
    data.update(overrides)
    return OrderDTO(**data)


@pytest.fixture
def order() -> OrderDTO:
    return make_order()


# =============================================================================
# INFRASTRUCTURE MOCKS
# =============================================================================

@pytest.fixture
def mock_event_bus() -> MagicMock:
    bus = MagicMock(spec=EventBus)
    bus.publish = AsyncMock()
    bus.subscribe = AsyncMock()
    return bus


@pytest.fixture
def order_factory():
    return make_order
