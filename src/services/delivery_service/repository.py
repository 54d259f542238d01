from datetime import datetime
from typing import List, Optional

from src.infra.database import DatabaseManager
from src.services.delivery_service.drivers import Driver
from src.shared.models.delivery_dto import DeliveryDTO
from src.shared.models.enums import DeliveryStatus

_DELIVERY_COLUMNS = """
    id, order_id, status, driver_name, driver_phone, pickup_address, delivery_address,
    assigned_at, picked_up_at, delivered_at, created_at
"""


class DeliveryRepository:
    def __init__(self, db: DatabaseManager):
        self.db = db

    async def create_assigned(
        self,
        order_id: int,
        driver: Driver,
        pickup_address: Optional[str],
        delivery_address: Optional[str],
        assigned_at: datetime,
    ) -> DeliveryDTO:
        query = f"""
            INSERT INTO deliveries_schema.deliveries (
                order_id, status, driver_name, driver_phone, pickup_address, delivery_address, assigned_at
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7)
            RETURNING {_DELIVERY_COLUMNS}
        """
        async with self.db.acquire() as conn:
            record = await conn.fetchrow(
                query,
                order_id,
                DeliveryStatus.ASSIGNED.value,
                driver.name,
                driver.phone,
                pickup_address,
                delivery_address,
                assigned_at,
            )
            return DeliveryDTO(**dict(record))

    async def get_by_id(self, delivery_id: int) -> Optional[DeliveryDTO]:
        query = f"SELECT {_DELIVERY_COLUMNS} FROM deliveries_schema.deliveries WHERE id = $1"
        async with self.db.acquire() as conn:
            record = await conn.fetchrow(query, delivery_id)
            return DeliveryDTO(**dict(record)) if record else None

    async def get_by_order_id(self, order_id: int) -> Optional[DeliveryDTO]:
        """Latest delivery of the order."""
        query = f"""
            SELECT {_DELIVERY_COLUMNS} FROM deliveries_schema.deliveries
            WHERE order_id = $1
            ORDER BY created_at DESC, id DESC
            LIMIT 1
        """
        async with self.db.acquire() as conn:
            record = await conn.fetchrow(query, order_id)
            return DeliveryDTO(**dict(record)) if record else None

    async def get_by_status(self, status: DeliveryStatus) -> List[DeliveryDTO]:
        query = f"""
            SELECT {_DELIVERY_COLUMNS} FROM deliveries_schema.deliveries
            WHERE status = $1
            ORDER BY created_at DESC, id DESC
        """
        async with self.db.acquire() as conn:
            records = await conn.fetch(query, status.value)
            return [DeliveryDTO(**dict(r)) for r in records]

    async def update_status(
        self,
        delivery_id: int,
        status: DeliveryStatus,
        picked_up_at: Optional[datetime] = None,
        delivered_at: Optional[datetime] = None,
    ) -> Optional[DeliveryDTO]:
        """Timestamps are only written when given."""
        query = f"""
            UPDATE deliveries_schema.deliveries
            SET status = $2,
                picked_up_at = COALESCE($3, picked_up_at),
                delivered_at = COALESCE($4, delivered_at)
            WHERE id = $1
            RETURNING {_DELIVERY_COLUMNS}
        """
        async with self.db.acquire() as conn:
            record = await conn.fetchrow(query, delivery_id, status.value, picked_up_at, delivered_at)
            return DeliveryDTO(**dict(record)) if record else None
