import asyncio
import random
from datetime import datetime, timezone
from typing import Callable, List, Optional

from src.common.exceptions import InvalidStateError, NotFoundError
from src.common.logger import log_info, log_warning, TypeMsg
from src.infra.api_clients import OrderClient
from src.infra.event_bus import EventBus
from src.infra.http_client import fetch_enrichment
from src.services.delivery_service.drivers import pick_driver
from src.services.delivery_service.repository import DeliveryRepository
from src.shared.events import delivery_update
from src.shared.models.delivery_dto import DeliveryDTO, DeliveryResponse
from src.shared.models.enums import DeliveryStatus
from src.shared.models.order_dto import OrderDTO

# Sent to the order service once a driver is assigned
ASSIGNED_UPDATE_STATUS = "CONFIRMED"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DeliveryService:
    """
    Driver assignment and delivery lifecycle.

    Deliveries are created from order.placed; order data shown on reads is
    fetched from the order service on each request.
    """

    def __init__(
        self,
        repository: DeliveryRepository,
        event_bus: EventBus,
        order_client: OrderClient,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.repository = repository
        self.event_bus = event_bus
        self.order_client = order_client
        self.rng = rng
        self.clock = clock

    # ---- events ----

    async def on_order_placed(self, order: OrderDTO) -> DeliveryDTO:
        driver = pick_driver(self.rng)
        delivery = await self.repository.create_assigned(
            order_id=order.id,
            driver=driver,
            pickup_address=order.restaurant_address,
            delivery_address=order.delivery_address,
            assigned_at=self.clock(),
        )
        await log_info(
            f"Delivery assigned to {driver.name} for order #{order.id}: "
            f"customer {order.customer_name}, restaurant {order.restaurant_name}",
            type_msg=TypeMsg.INFO,
        )

        await self.event_bus.publish(delivery_update(order.id, ASSIGNED_UPDATE_STATUS))
        return delivery

    async def on_order_cancelled(self, order: OrderDTO) -> Optional[DeliveryDTO]:
        delivery = await self.repository.get_by_order_id(order.id)
        if not delivery:
            await log_warning(f"No delivery to cancel for order #{order.id}")
            return None
        return await self._set_failed(delivery.id)

    # ---- api ----

    async def get_by_id(self, delivery_id: int) -> DeliveryResponse:
        return await self._with_order_info(await self._require_delivery(delivery_id))

    async def get_by_order_id(self, order_id: int) -> DeliveryResponse:
        delivery = await self.repository.get_by_order_id(order_id)
        if not delivery:
            raise NotFoundError(f"Delivery for order {order_id} not found")
        return await self._with_order_info(delivery)

    async def get_by_status(self, status: str) -> List[DeliveryResponse]:
        deliveries = await self.repository.get_by_status(self._parse_status(status))
        return list(await asyncio.gather(*(self._with_order_info(d) for d in deliveries)))

    async def update_status(self, delivery_id: int, status: str) -> DeliveryResponse:
        """No transition guard, any known status overwrites the current one."""
        await self._require_delivery(delivery_id)
        new_status = self._parse_status(status)

        now = self.clock()
        updated = await self.repository.update_status(
            delivery_id,
            new_status,
            picked_up_at=now if new_status == DeliveryStatus.PICKED_UP else None,
            delivered_at=now if new_status == DeliveryStatus.DELIVERED else None,
        )
        if not updated:
            raise NotFoundError(f"Delivery {delivery_id} not found")

        if new_status == DeliveryStatus.DELIVERED:
            await self.event_bus.publish(delivery_update(updated.order_id, new_status.value))

        await log_info(
            f"Delivery #{delivery_id} status changed to {new_status}, order #{updated.order_id}",
            type_msg=TypeMsg.INFO,
        )
        return await self._with_order_info(updated)

    async def cancel_delivery(self, delivery_id: int) -> DeliveryResponse:
        await self._require_delivery(delivery_id)
        return await self._with_order_info(await self._set_failed(delivery_id))

    # ---- helpers ----

    async def _set_failed(self, delivery_id: int) -> DeliveryDTO:
        delivery = await self.repository.update_status(delivery_id, DeliveryStatus.FAILED)
        if not delivery:
            raise NotFoundError(f"Delivery {delivery_id} not found")
        await log_info(f"Delivery #{delivery_id} cancelled", type_msg=TypeMsg.INFO)
        return delivery

    async def _require_delivery(self, delivery_id: int) -> DeliveryDTO:
        delivery = await self.repository.get_by_id(delivery_id)
        if not delivery:
            raise NotFoundError(f"Delivery {delivery_id} not found")
        return delivery

    @staticmethod
    def _parse_status(status: str) -> DeliveryStatus:
        try:
            return DeliveryStatus.parse(status)
        except ValueError as e:
            raise InvalidStateError(f"Unknown delivery status: {status}") from e

    async def _with_order_info(self, delivery: DeliveryDTO) -> DeliveryResponse:
        order = await fetch_enrichment(
            self.order_client.get_order(delivery.order_id),
            f"order of delivery {delivery.id}",
        )
        if not order.is_present:
            return DeliveryResponse(**delivery.model_dump(), order_enrichment=order.status)
        return DeliveryResponse(
            **delivery.model_dump(),
            order_status=str(order.value.status),
            customer_id=order.value.customer_id,
            customer_name=order.value.customer_name,
            restaurant_name=order.value.restaurant_name,
            order_enrichment=order.status,
        )
