from src.common.exceptions import AuthenticationError, NotFoundError
from src.common.logger import log_info, log_warning, TypeMsg
from src.infra.api_clients import CustomerClient
from src.services.api_gateway.auth import create_token, hash_password, verify_password
from src.services.api_gateway.models import AuthResponse, LoginRequest, RegisterRequest
from src.shared.models.customer_dto import CreateCustomerRequest, CustomerDTO


class AuthService:
    """Registration and login; customers themselves live in the customer service."""

    def __init__(self, customer_client: CustomerClient, secret: str, ttl_seconds: int, hash_iterations: int):
        self.customer_client = customer_client
        self.secret = secret
        self.ttl_seconds = ttl_seconds
        self.hash_iterations = hash_iterations

    async def register(self, request: RegisterRequest) -> AuthResponse:
        customer = await self.customer_client.create(
            CreateCustomerRequest(
                username=request.username,
                email=request.email,
                password_hash=hash_password(request.password, self.hash_iterations),
                first_name=request.first_name,
                last_name=request.last_name,
                phone=request.phone,
                delivery_address=request.delivery_address,
                city=request.city,
            )
        )
        await log_info(f"Registered customer {customer.username}", type_msg=TypeMsg.INFO)
        return self._issue(customer)

    async def login(self, request: LoginRequest) -> AuthResponse:
        try:
            account = await self.customer_client.get_by_username(request.username)
        except NotFoundError:
            account = None

        if account is None or not verify_password(request.password, account.password_hash):
            await log_warning(f"Failed login for {request.username}")
            raise AuthenticationError("Invalid credentials")

        return self._issue(account)

    def _issue(self, customer: CustomerDTO) -> AuthResponse:
        role = str(customer.role)
        return AuthResponse(
            token=create_token(customer.username, role, self.secret, self.ttl_seconds),
            customer_id=customer.id,
            username=customer.username,
            role=role,
        )
