from typing import List

from fastapi import APIRouter, Depends, Query

from src.services.delivery_service.dependencies import get_delivery_service
from src.services.delivery_service.service import DeliveryService
from src.shared.models.delivery_dto import DeliveryResponse

router = APIRouter(prefix="/deliveries", tags=["Deliveries"])


@router.get("/order/{order_id}", response_model=DeliveryResponse)
async def get_by_order_id(order_id: int, service: DeliveryService = Depends(get_delivery_service)):
    return await service.get_by_order_id(order_id)


@router.get("/status/{delivery_status}", response_model=List[DeliveryResponse])
async def get_by_status(delivery_status: str, service: DeliveryService = Depends(get_delivery_service)):
    return await service.get_by_status(delivery_status)


@router.get("/{delivery_id}", response_model=DeliveryResponse)
async def get_by_id(delivery_id: int, service: DeliveryService = Depends(get_delivery_service)):
    return await service.get_by_id(delivery_id)


@router.patch("/{delivery_id}/status", response_model=DeliveryResponse)
async def update_status(
    delivery_id: int,
    new_status: str = Query(..., alias="status"),
    service: DeliveryService = Depends(get_delivery_service),
):
    return await service.update_status(delivery_id, new_status)


@router.post("/{delivery_id}/cancel", response_model=DeliveryResponse)
async def cancel_delivery(delivery_id: int, service: DeliveryService = Depends(get_delivery_service)):
    return await service.cancel_delivery(delivery_id)
