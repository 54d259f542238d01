from typing import List

from fastapi import APIRouter, Depends, Response, status

from src.services.restaurant_service.dependencies import get_restaurant_service
from src.services.restaurant_service.service import RestaurantService
from src.shared.identity import Identity, get_identity
from src.shared.models.restaurant_dto import (
    MenuItemDTO,
    MenuItemRequest,
    RestaurantRequest,
    RestaurantResponse,
    UpdateMenuItemRequest,
)

router = APIRouter(prefix="/restaurants", tags=["Restaurants"])


# ---- public ----

@router.get("/search/city/{city}", response_model=List[RestaurantResponse])
async def search_by_city(city: str, service: RestaurantService = Depends(get_restaurant_service)):
    return await service.search_by_city(city)


@router.get("/search/cuisine/{cuisine_type}", response_model=List[RestaurantResponse])
async def search_by_cuisine(cuisine_type: str, service: RestaurantService = Depends(get_restaurant_service)):
    return await service.search_by_cuisine(cuisine_type)


@router.get("/search/all", response_model=List[RestaurantResponse])
async def get_all_active(service: RestaurantService = Depends(get_restaurant_service)):
    return await service.get_all_active()


@router.get("/menu/{item_id}", response_model=MenuItemDTO)
async def get_menu_item(item_id: int, service: RestaurantService = Depends(get_restaurant_service)):
    return await service.get_menu_item(item_id)


@router.get("/{restaurant_id}", response_model=RestaurantResponse)
async def get_restaurant(restaurant_id: int, service: RestaurantService = Depends(get_restaurant_service)):
    return await service.get_restaurant(restaurant_id)


@router.get("/{restaurant_id}/menu", response_model=List[MenuItemDTO])
async def get_menu(restaurant_id: int, service: RestaurantService = Depends(get_restaurant_service)):
    return await service.get_menu(restaurant_id)


# ---- owner ----

@router.post("", response_model=RestaurantResponse, status_code=status.HTTP_201_CREATED)
async def create_restaurant(
    request: RestaurantRequest,
    identity: Identity = Depends(get_identity),
    service: RestaurantService = Depends(get_restaurant_service),
):
    return await service.create_restaurant(identity, request)


@router.put("/{restaurant_id}", response_model=RestaurantResponse)
async def update_restaurant(
    restaurant_id: int,
    request: RestaurantRequest,
    identity: Identity = Depends(get_identity),
    service: RestaurantService = Depends(get_restaurant_service),
):
    return await service.update_restaurant(restaurant_id, identity, request)


@router.patch("/{restaurant_id}/toggle", status_code=status.HTTP_204_NO_CONTENT)
async def toggle_restaurant_active(
    restaurant_id: int,
    identity: Identity = Depends(get_identity),
    service: RestaurantService = Depends(get_restaurant_service),
):
    await service.toggle_restaurant_active(restaurant_id, identity)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{restaurant_id}/menu", response_model=MenuItemDTO, status_code=status.HTTP_201_CREATED)
async def add_menu_item(
    restaurant_id: int,
    request: MenuItemRequest,
    identity: Identity = Depends(get_identity),
    service: RestaurantService = Depends(get_restaurant_service),
):
    return await service.add_menu_item(restaurant_id, identity, request)


@router.put("/menu/{item_id}", response_model=MenuItemDTO)
async def update_menu_item(
    item_id: int,
    request: UpdateMenuItemRequest,
    identity: Identity = Depends(get_identity),
    service: RestaurantService = Depends(get_restaurant_service),
):
    return await service.update_menu_item(item_id, identity, request)


@router.patch("/menu/{item_id}/toggle", status_code=status.HTTP_204_NO_CONTENT)
async def toggle_menu_item_availability(
    item_id: int,
    identity: Identity = Depends(get_identity),
    service: RestaurantService = Depends(get_restaurant_service),
):
    await service.toggle_menu_item_availability(item_id, identity)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
