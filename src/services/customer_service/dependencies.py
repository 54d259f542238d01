from src.infra.database import DatabaseManager
from src.services.customer_service.repository import CustomerRepository
from src.services.customer_service.service import CustomerService


def get_database() -> DatabaseManager:
    return DatabaseManager()


def get_customer_repository() -> CustomerRepository:
    return CustomerRepository(get_database())


def get_customer_service() -> CustomerService:
    return CustomerService(get_customer_repository())
