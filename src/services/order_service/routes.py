from typing import List

from fastapi import APIRouter, Depends, Query, status

from src.services.order_service.dependencies import get_order_service
from src.services.order_service.service import OrderService
from src.shared.identity import Identity, get_identity
from src.shared.models.order_dto import OrderResponse, PlaceOrderRequest

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def place_order(
    request: PlaceOrderRequest,
    identity: Identity = Depends(get_identity),
    service: OrderService = Depends(get_order_service),
):
    return await service.place_order(identity, request)


@router.get("/my-orders", response_model=List[OrderResponse])
async def get_my_orders(
    identity: Identity = Depends(get_identity),
    service: OrderService = Depends(get_order_service),
):
    return await service.get_customer_orders(identity)


@router.get("/restaurant/{restaurant_id}", response_model=List[OrderResponse])
async def get_restaurant_orders(restaurant_id: int, service: OrderService = Depends(get_order_service)):
    return await service.get_restaurant_orders(restaurant_id)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: int, service: OrderService = Depends(get_order_service)):
    return await service.get_order(order_id)


@router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: int,
    new_status: str = Query(..., alias="status"),
    service: OrderService = Depends(get_order_service),
):
    return await service.update_order_status(order_id, new_status)


@router.post("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: int,
    identity: Identity = Depends(get_identity),
    service: OrderService = Depends(get_order_service),
):
    return await service.cancel_order(order_id, identity)
