from typing import Any, Optional

import asyncpg

from src.common.exceptions import DuplicateResourceError
from src.infra.database import DatabaseManager
from src.shared.models.customer_dto import CustomerAccountDTO, CustomerDTO, CreateCustomerRequest
from src.shared.models.enums import CustomerRole

_COLUMNS = """
    id, username, email, first_name, last_name, phone,
    delivery_address, city, role, created_at, updated_at
"""

# Columns a profile update may touch
UPDATABLE_FIELDS = ("email", "first_name", "last_name", "phone", "delivery_address", "city")


class CustomerRepository:
    def __init__(self, db: DatabaseManager):
        self.db = db

    async def get_by_id(self, customer_id: int) -> Optional[CustomerDTO]:
        query = f"SELECT {_COLUMNS} FROM customers_schema.customers WHERE id = $1"
        async with self.db.acquire() as conn:
            record = await conn.fetchrow(query, customer_id)
            if record:
                return CustomerDTO(**dict(record))
            return None

    async def get_by_username(self, username: str) -> Optional[CustomerAccountDTO]:
        """Includes the password hash."""
        query = f"SELECT {_COLUMNS}, password_hash FROM customers_schema.customers WHERE username = $1"
        async with self.db.acquire() as conn:
            record = await conn.fetchrow(query, username)
            if record:
                return CustomerAccountDTO(**dict(record))
            return None

    async def exists_by_username(self, username: str) -> bool:
        query = "SELECT EXISTS(SELECT 1 FROM customers_schema.customers WHERE username = $1)"
        async with self.db.acquire() as conn:
            return await conn.fetchval(query, username)

    async def exists_by_email(self, email: str) -> bool:
        query = "SELECT EXISTS(SELECT 1 FROM customers_schema.customers WHERE LOWER(email) = LOWER($1))"
        async with self.db.acquire() as conn:
            return await conn.fetchval(query, email)

    async def create(self, request: CreateCustomerRequest, role: CustomerRole = CustomerRole.CUSTOMER) -> CustomerDTO:
        query = f"""
            INSERT INTO customers_schema.customers (
                username, email, password_hash, first_name, last_name,
                phone, delivery_address, city, role
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
            RETURNING {_COLUMNS}
        """
        try:
            async with self.db.acquire() as conn:
                record = await conn.fetchrow(
                    query,
                    request.username,
                    str(request.email),
                    request.password_hash,
                    request.first_name,
                    request.last_name,
                    request.phone,
                    request.delivery_address,
                    request.city,
                    role.value,
                )
        except asyncpg.UniqueViolationError as e:
            # lost a race with a concurrent registration
            raise DuplicateResourceError("Username, email or phone already taken") from e
        return CustomerDTO(**dict(record))

    async def update_profile(self, customer_id: int, changes: dict[str, Any]) -> Optional[CustomerDTO]:
        """Updates only the given columns."""
        fields = [name for name in UPDATABLE_FIELDS if name in changes]
        if not fields:
            return await self.get_by_id(customer_id)

        assignments = ", ".join(f"{name} = ${i}" for i, name in enumerate(fields, start=2))
        query = f"""
            UPDATE customers_schema.customers
            SET {assignments}, updated_at = NOW()
            WHERE id = $1
            RETURNING {_COLUMNS}
        """
        try:
            async with self.db.acquire() as conn:
                record = await conn.fetchrow(query, customer_id, *(changes[name] for name in fields))
        except asyncpg.UniqueViolationError as e:
            raise DuplicateResourceError("Email or phone already taken") from e
        if record:
            return CustomerDTO(**dict(record))
        return None

    async def update_role(self, customer_id: int, role: CustomerRole) -> Optional[CustomerDTO]:
        query = f"""
            UPDATE customers_schema.customers
            SET role = $2, updated_at = NOW()
            WHERE id = $1
            RETURNING {_COLUMNS}
        """
        async with self.db.acquire() as conn:
            record = await conn.fetchrow(query, customer_id, role.value)
            if record:
                return CustomerDTO(**dict(record))
            return None
