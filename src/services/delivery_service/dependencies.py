from src.infra.api_clients import OrderClient
from src.infra.database import DatabaseManager
from src.infra.event_bus import get_event_bus
from src.services.delivery_service.repository import DeliveryRepository
from src.services.delivery_service.service import DeliveryService

_order_client: OrderClient | None = None


def init_dependencies() -> None:
    """Creates the peer clients at startup."""
    global _order_client
    _order_client = OrderClient()


async def cleanup_dependencies() -> None:
    global _order_client
    if _order_client:
        await _order_client.close()
        _order_client = None


def get_order_client() -> OrderClient:
    if _order_client is None:
        raise RuntimeError("OrderClient is not initialized, call init_dependencies()")
    return _order_client


def get_delivery_repository() -> DeliveryRepository:
    return DeliveryRepository(DatabaseManager())


def get_delivery_service() -> DeliveryService:
    return DeliveryService(get_delivery_repository(), get_event_bus(), get_order_client())
