from fastapi import APIRouter, Depends, status

from src.services.customer_service.dependencies import get_customer_service
from src.services.customer_service.service import CustomerService
from src.shared.identity import Identity, get_identity
from src.shared.models.customer_dto import (
    CustomerAccountDTO,
    CustomerDTO,
    CreateCustomerRequest,
    UpdateCustomerRequest,
)

router = APIRouter(prefix="/customers", tags=["Customers"])


@router.post("/create", response_model=CustomerDTO, status_code=status.HTTP_201_CREATED)
async def register_customer(
    request: CreateCustomerRequest,
    service: CustomerService = Depends(get_customer_service),
):
    return await service.register(request)


@router.get("/me", response_model=CustomerDTO)
async def get_my_profile(
    identity: Identity = Depends(get_identity),
    service: CustomerService = Depends(get_customer_service),
):
    return await service.get_profile(identity)


@router.put("/me", response_model=CustomerDTO)
async def update_my_profile(
    request: UpdateCustomerRequest,
    identity: Identity = Depends(get_identity),
    service: CustomerService = Depends(get_customer_service),
):
    return await service.update_profile(identity, request)


@router.put("/make-restaurant-owner", response_model=CustomerDTO)
async def make_restaurant_owner(
    identity: Identity = Depends(get_identity),
    service: CustomerService = Depends(get_customer_service),
):
    return await service.make_restaurant_owner(identity)


@router.get("/id/{customer_id}", response_model=CustomerDTO)
async def get_customer_by_id(
    customer_id: int,
    service: CustomerService = Depends(get_customer_service),
):
    return await service.get_by_id(customer_id)


@router.get("/username/{username}", response_model=CustomerAccountDTO)
async def get_customer_by_username(
    username: str,
    service: CustomerService = Depends(get_customer_service),
):
    """Internal lookup used by the gateway login, includes the password hash."""
    return await service.get_by_username(username)
