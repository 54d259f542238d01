from typing import Any, List, Optional

from src.infra.database import DatabaseManager
from src.shared.models.restaurant_dto import (
    MenuItemDTO,
    MenuItemRequest,
    RestaurantDTO,
    RestaurantRequest,
)

_RESTAURANT_SELECT = """
    SELECT
        r.id, r.name, r.description, r.cuisine_type, r.address, r.city, r.phone,
        r.active, r.rating, r.estimated_delivery_minutes, r.owner_id, r.created_at,
        (SELECT COUNT(*) FROM restaurants_schema.menu_items m WHERE m.restaurant_id = r.id) AS menu_item_count
    FROM restaurants_schema.restaurants r
"""

_MENU_ITEM_COLUMNS = "id, restaurant_id, name, description, price, category, available, image_url"

MENU_ITEM_UPDATABLE_FIELDS = ("name", "description", "price", "category", "image_url")


class RestaurantRepository:
    def __init__(self, db: DatabaseManager):
        self.db = db

    # ---- restaurants ----

    async def create_restaurant(self, request: RestaurantRequest, owner_id: int) -> RestaurantDTO:
        query = """
            INSERT INTO restaurants_schema.restaurants (
                name, description, cuisine_type, address, city, phone,
                estimated_delivery_minutes, owner_id
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
            RETURNING id
        """
        async with self.db.transaction() as conn:
            restaurant_id = await conn.fetchval(
                query,
                request.name,
                request.description,
                request.cuisine_type,
                request.address,
                request.city,
                request.phone,
                request.estimated_delivery_minutes,
                owner_id,
            )
            record = await conn.fetchrow(f"{_RESTAURANT_SELECT} WHERE r.id = $1", restaurant_id)
            return RestaurantDTO(**dict(record))

    async def get_restaurant(self, restaurant_id: int) -> Optional[RestaurantDTO]:
        async with self.db.acquire() as conn:
            record = await conn.fetchrow(f"{_RESTAURANT_SELECT} WHERE r.id = $1", restaurant_id)
            if record:
                return RestaurantDTO(**dict(record))
            return None

    async def find_active_by_city(self, city: str) -> List[RestaurantDTO]:
        query = f"{_RESTAURANT_SELECT} WHERE LOWER(r.city) = LOWER($1) AND r.active ORDER BY r.name"
        async with self.db.acquire() as conn:
            records = await conn.fetch(query, city)
            return [RestaurantDTO(**dict(record)) for record in records]

    async def find_active_by_cuisine(self, cuisine_type: str) -> List[RestaurantDTO]:
        query = f"{_RESTAURANT_SELECT} WHERE LOWER(r.cuisine_type) = LOWER($1) AND r.active ORDER BY r.name"
        async with self.db.acquire() as conn:
            records = await conn.fetch(query, cuisine_type)
            return [RestaurantDTO(**dict(record)) for record in records]

    async def find_all_active(self) -> List[RestaurantDTO]:
        query = f"{_RESTAURANT_SELECT} WHERE r.active ORDER BY r.name"
        async with self.db.acquire() as conn:
            records = await conn.fetch(query)
            return [RestaurantDTO(**dict(record)) for record in records]

    async def update_restaurant(self, restaurant_id: int, request: RestaurantRequest) -> Optional[RestaurantDTO]:
        """Full update of the editable columns."""
        query = """
            UPDATE restaurants_schema.restaurants
            SET name = $2, description = $3, cuisine_type = $4, address = $5,
                city = $6, phone = $7, estimated_delivery_minutes = $8
            WHERE id = $1
        """
        async with self.db.transaction() as conn:
            status = await conn.execute(
                query,
                restaurant_id,
                request.name,
                request.description,
                request.cuisine_type,
                request.address,
                request.city,
                request.phone,
                request.estimated_delivery_minutes,
            )
            if status == "UPDATE 0":
                return None
            record = await conn.fetchrow(f"{_RESTAURANT_SELECT} WHERE r.id = $1", restaurant_id)
            return RestaurantDTO(**dict(record))

    async def toggle_active(self, restaurant_id: int) -> Optional[bool]:
        """Flips the active flag, returns the new value."""
        query = """
            UPDATE restaurants_schema.restaurants
            SET active = NOT active
            WHERE id = $1
            RETURNING active
        """
        async with self.db.acquire() as conn:
            return await conn.fetchval(query, restaurant_id)

    # ---- menu items ----

    async def add_menu_item(self, restaurant_id: int, request: MenuItemRequest) -> MenuItemDTO:
        query = f"""
            INSERT INTO restaurants_schema.menu_items (
                restaurant_id, name, description, price, category, image_url
            )
            VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING {_MENU_ITEM_COLUMNS}
        """
        async with self.db.acquire() as conn:
            record = await conn.fetchrow(
                query,
                restaurant_id,
                request.name,
                request.description,
                request.price,
                request.category,
                request.image_url,
            )
            return MenuItemDTO(**dict(record))

    async def get_menu_item(self, item_id: int) -> Optional[MenuItemDTO]:
        query = f"SELECT {_MENU_ITEM_COLUMNS} FROM restaurants_schema.menu_items WHERE id = $1"
        async with self.db.acquire() as conn:
            record = await conn.fetchrow(query, item_id)
            if record:
                return MenuItemDTO(**dict(record))
            return None

    async def get_available_menu(self, restaurant_id: int) -> List[MenuItemDTO]:
        query = f"""
            SELECT {_MENU_ITEM_COLUMNS}
            FROM restaurants_schema.menu_items
            WHERE restaurant_id = $1 AND available
            ORDER BY category NULLS LAST, name
        """
        async with self.db.acquire() as conn:
            records = await conn.fetch(query, restaurant_id)
            return [MenuItemDTO(**dict(record)) for record in records]

    async def update_menu_item(self, item_id: int, changes: dict[str, Any]) -> Optional[MenuItemDTO]:
        """Updates only the given columns."""
        fields = [name for name in MENU_ITEM_UPDATABLE_FIELDS if name in changes]
        if not fields:
            return await self.get_menu_item(item_id)

        assignments = ", ".join(f"{name} = ${i}" for i, name in enumerate(fields, start=2))
        query = f"""
            UPDATE restaurants_schema.menu_items
            SET {assignments}
            WHERE id = $1
            RETURNING {_MENU_ITEM_COLUMNS}
        """
        async with self.db.acquire() as conn:
            record = await conn.fetchrow(query, item_id, *(changes[name] for name in fields))
            if record:
                return MenuItemDTO(**dict(record))
            return None

    async def toggle_menu_item_availability(self, item_id: int) -> Optional[bool]:
        query = """
            UPDATE restaurants_schema.menu_items
            SET available = NOT available
            WHERE id = $1
            RETURNING available
        """
        async with self.db.acquire() as conn:
            return await conn.fetchval(query, item_id)
