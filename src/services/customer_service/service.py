from src.common.exceptions import DuplicateResourceError, NotFoundError
from src.common.logger import log_info, TypeMsg
from src.services.customer_service.repository import CustomerRepository
from src.shared.identity import Identity
from src.shared.models.customer_dto import (
    CustomerAccountDTO,
    CustomerDTO,
    CreateCustomerRequest,
    UpdateCustomerRequest,
)
from src.shared.models.enums import CustomerRole


class CustomerService:
    def __init__(self, repository: CustomerRepository):
        self.repository = repository

    async def register(self, request: CreateCustomerRequest) -> CustomerDTO:
        """
        Creates a customer with role CUSTOMER.
        The password arrives already hashed by the gateway.
        """
        if await self.repository.exists_by_username(request.username):
            raise DuplicateResourceError(f"Username {request.username} is already taken")
        if await self.repository.exists_by_email(str(request.email)):
            raise DuplicateResourceError(f"Email {request.email} is already registered")

        customer = await self.repository.create(request, CustomerRole.CUSTOMER)
        await log_info(f"Registered customer {customer.id} ({customer.username})", type_msg=TypeMsg.INFO)
        return customer

    async def get_profile(self, identity: Identity) -> CustomerDTO:
        account = await self.get_by_username(identity.username)
        return CustomerDTO(**account.model_dump(exclude={"password_hash"}))

    async def get_by_id(self, customer_id: int) -> CustomerDTO:
        customer = await self.repository.get_by_id(customer_id)
        if not customer:
            raise NotFoundError(f"Customer {customer_id} not found")
        return customer

    async def get_by_username(self, username: str) -> CustomerAccountDTO:
        account = await self.repository.get_by_username(username)
        if not account:
            raise NotFoundError(f"Customer {username} not found")
        return account

    async def update_profile(self, identity: Identity, request: UpdateCustomerRequest) -> CustomerDTO:
        """Applies only the fields present in the request."""
        account = await self.get_by_username(identity.username)
        changes = request.model_dump(exclude_none=True)
        if "email" in changes:
            changes["email"] = str(changes["email"])

        updated = await self.repository.update_profile(account.id, changes)
        if not updated:
            raise NotFoundError(f"Customer {identity.username} not found")
        return updated

    async def make_restaurant_owner(self, identity: Identity) -> CustomerDTO:
        account = await self.get_by_username(identity.username)
        if account.role == CustomerRole.RESTAURANT_OWNER:
            return CustomerDTO(**account.model_dump(exclude={"password_hash"}))

        updated = await self.repository.update_role(account.id, CustomerRole.RESTAURANT_OWNER)
        if not updated:
            raise NotFoundError(f"Customer {identity.username} not found")
        await log_info(f"Customer {account.id} promoted to {CustomerRole.RESTAURANT_OWNER}", type_msg=TypeMsg.INFO)
        return updated
