
from src.config import settings
from src.infra.api_clients import CustomerClient, DeliveryClient, RestaurantClient
from src.infra.database import DatabaseManager
from src.infra.event_bus import get_event_bus
from src.services.order_service.repository import OrderRepository
from src.services.order_service.service import OrderService

_customer_client: CustomerClient | None = None
_restaurant_client: RestaurantClient | None = None
_delivery_client: DeliveryClient | None = None


def init_dependencies() -> None:
    """Creates the peer clients at startup."""
    global _customer_client, _restaurant_client, _delivery_client
    _customer_client = CustomerClient()
    _restaurant_client = RestaurantClient()
    _delivery_client = DeliveryClient()


async def cleanup_dependencies() -> None:
    global _customer_client, _restaurant_client, _delivery_client
    for client in (_customer_client, _restaurant_client, _delivery_client):
        if client:
            await client.close()
    _customer_client = None
    _restaurant_client = None
    _delivery_client = None


def get_customer_client() -> CustomerClient:
    if _customer_client is None:
        raise RuntimeError("CustomerClient is not initialized, call init_dependencies()")
    return _customer_client


def get_restaurant_client() -> RestaurantClient:
    if _restaurant_client is None:
        raise RuntimeError("RestaurantClient is not initialized, call init_dependencies()")
    return _restaurant_client


def get_delivery_client() -> DeliveryClient:
    if _delivery_client is None:
        raise RuntimeError("DeliveryClient is not initialized, call init_dependencies()")
    return _delivery_client


def get_order_repository() -> OrderRepository:
    return OrderRepository(DatabaseManager())


def get_order_service() -> OrderService:
    return OrderService(
        repository=get_order_repository(),
        event_bus=get_event_bus(),
        customer_client=get_customer_client(),
        restaurant_client=get_restaurant_client(),
        delivery_client=get_delivery_client(),
        delivery_fee=settings.orders.DEFAULT_DELIVERY_FEE,
    )
