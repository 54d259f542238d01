from src.infra.api_clients import CustomerClient
from src.infra.database import DatabaseManager
from src.services.restaurant_service.repository import RestaurantRepository
from src.services.restaurant_service.service import RestaurantService

_customer_client: CustomerClient | None = None


def init_dependencies() -> None:
    """Creates the peer clients at startup."""
    global _customer_client
    _customer_client = CustomerClient()


async def cleanup_dependencies() -> None:
    global _customer_client
    if _customer_client:
        await _customer_client.close()
        _customer_client = None


def get_customer_client() -> CustomerClient:
    if _customer_client is None:
        raise RuntimeError("CustomerClient is not initialized, call init_dependencies()")
    return _customer_client


def get_restaurant_repository() -> RestaurantRepository:
    return RestaurantRepository(DatabaseManager())


def get_restaurant_service() -> RestaurantService:
    return RestaurantService(get_restaurant_repository(), get_customer_client())
