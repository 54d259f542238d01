from collections import defaultdict
from typing import Iterable, List, Optional

from asyncpg import Connection, Record

from src.infra.database import DatabaseManager
from src.services.order_service.models import OrderDraft
from src.shared.models.enums import OrderStatus
from src.shared.models.order_dto import OrderDTO, OrderItemDTO

_ORDER_COLUMNS = """
    id, status, customer_id, customer_name, restaurant_id, restaurant_name,
    restaurant_address, total_amount, delivery_fee, delivery_address,
    special_instructions, estimated_delivery_time, created_at, updated_at
"""

_ITEM_COLUMNS = """
    id, order_id, menu_item_id, item_name, quantity, unit_price, subtotal, special_instructions
"""


class OrderRepository:
    """Orders are never deleted, cancellation is a status."""

    def __init__(self, db: DatabaseManager):
        self.db = db

    async def create_order(self, draft: OrderDraft) -> OrderDTO:
        """Inserts the order and its items in one transaction."""
        order_query = f"""
            INSERT INTO orders_schema.orders (
                status, customer_id, customer_name, restaurant_id, restaurant_name,
                restaurant_address, total_amount, delivery_fee, delivery_address,
                special_instructions, estimated_delivery_time
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11)
            RETURNING {_ORDER_COLUMNS}
        """
        item_query = """
            INSERT INTO orders_schema.order_items (
                order_id, menu_item_id, item_name, quantity, unit_price, subtotal, special_instructions
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7)
        """
        async with self.db.transaction() as conn:
            order = await conn.fetchrow(
                order_query,
                draft.status.value,
                draft.customer_id,
                draft.customer_name,
                draft.restaurant_id,
                draft.restaurant_name,
                draft.restaurant_address,
                draft.total_amount,
                draft.delivery_fee,
                draft.delivery_address,
                draft.special_instructions,
                draft.estimated_delivery_time,
            )
            await conn.executemany(
                item_query,
                [
                    (
                        order["id"],
                        item.menu_item_id,
                        item.item_name,
                        item.quantity,
                        item.unit_price,
                        item.subtotal,
                        item.special_instructions,
                    )
                    for item in draft.items
                ],
            )
            return (await self._attach_items(conn, [order]))[0]

    async def get_by_id(self, order_id: int) -> Optional[OrderDTO]:
        query = f"SELECT {_ORDER_COLUMNS} FROM orders_schema.orders WHERE id = $1"
        async with self.db.acquire() as conn:
            record = await conn.fetchrow(query, order_id)
            if not record:
                return None
            return (await self._attach_items(conn, [record]))[0]

    async def get_by_customer(self, customer_id: int) -> List[OrderDTO]:
        """Newest first."""
        query = f"""
            SELECT {_ORDER_COLUMNS} FROM orders_schema.orders
            WHERE customer_id = $1
            ORDER BY created_at DESC, id DESC
        """
        async with self.db.acquire() as conn:
            records = await conn.fetch(query, customer_id)
            return await self._attach_items(conn, records)

    async def get_by_restaurant(self, restaurant_id: int) -> List[OrderDTO]:
        """Newest first."""
        query = f"""
            SELECT {_ORDER_COLUMNS} FROM orders_schema.orders
            WHERE restaurant_id = $1
            ORDER BY created_at DESC, id DESC
        """
        async with self.db.acquire() as conn:
            records = await conn.fetch(query, restaurant_id)
            return await self._attach_items(conn, records)

    async def update_status(self, order_id: int, status: OrderStatus) -> Optional[OrderDTO]:
        query = f"""
            UPDATE orders_schema.orders
            SET status = $2, updated_at = NOW()
            WHERE id = $1
            RETURNING {_ORDER_COLUMNS}
        """
        async with self.db.acquire() as conn:
            record = await conn.fetchrow(query, order_id, status.value)
            if not record:
                return None
            return (await self._attach_items(conn, [record]))[0]

    async def _attach_items(self, conn: Connection, orders: Iterable[Record]) -> List[OrderDTO]:
        orders = list(orders)
        if not orders:
            return []

        query = f"""
            SELECT {_ITEM_COLUMNS} FROM orders_schema.order_items
            WHERE order_id = ANY($1::bigint[])
            ORDER BY id
        """
        item_records = await conn.fetch(query, [order["id"] for order in orders])

        items_by_order: dict[int, List[OrderItemDTO]] = defaultdict(list)
        for record in item_records:
            items_by_order[record["order_id"]].append(OrderItemDTO(**dict(record)))

        return [OrderDTO(**dict(order), items=items_by_order[order["id"]]) for order in orders]
