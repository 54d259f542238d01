# src/infra/event_bus.py
"""
RabbitMQ event bus.
Publishes domain events to a topic exchange and consumes them from durable queues.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable
from uuid import uuid4

import aio_pika
from aio_pika import ExchangeType, Message
from aio_pika.abc import (
    AbstractChannel,
    AbstractConnection,
    AbstractExchange,
    AbstractIncomingMessage,
    AbstractQueue,
)

from src.common.constants import APP_EXCHANGE, TypeMsg
from src.common.logger import log_error, log_info


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


# =============================================================================
# ENVELOPE
# =============================================================================

@dataclass
class DomainEvent:
    """Envelope carried on the wire: {event_id, event_type, timestamp, payload}."""
    event_id: str = field(default_factory=lambda: str(uuid4()))
    event_type: str = ""
    timestamp: str = field(default_factory=_utc_now_iso)
    payload: dict[str, Any] = field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps({
            "event_id": self.event_id,
            "event_type": self.event_type,
            "timestamp": self.timestamp,
            "payload": self.payload,
        }, ensure_ascii=False, default=str)

    @classmethod
    def from_json(cls, data: str | bytes) -> DomainEvent:
        parsed = json.loads(data)
        return cls(
            event_id=parsed.get("event_id", str(uuid4())),
            event_type=parsed.get("event_type", ""),
            timestamp=parsed.get("timestamp", ""),
            payload=parsed.get("payload", {}),
        )


class EventTypes:
    """Routing keys."""
    ORDER_PLACED = "order.placed"
    ORDER_DELETED = "order.deleted"
    DELIVERY_UPDATE = "delivery.update"


EventHandler = Callable[[DomainEvent], Awaitable[None]]


class EventBus:
    """
    RabbitMQ event bus.

    - publish(): fire-and-forget, failures are logged and never raised
    - subscribe(): one durable queue per consumer group bound by routing pattern
    - robust connection with automatic reconnect
    """

    _instance: EventBus | None = None
    _connection: AbstractConnection | None = None
    _channel: AbstractChannel | None = None
    _exchange: AbstractExchange | None = None
    _handlers: dict[str, list[EventHandler]]

    def __new__(cls) -> EventBus:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if hasattr(self, "_initialized"):
            return
        self._initialized = True
        self._connection = None
        self._channel = None
        self._exchange = None
        self._handlers = {}
        self._exchange_name = APP_EXCHANGE
        self._queues: dict[str, AbstractQueue] = {}

    @property
    def is_connected(self) -> bool:
        return self._connection is not None and not self._connection.is_closed

    async def connect(
        self,
        url: str,
        exchange_name: str | None = None,
        prefetch_count: int = 10,
    ) -> None:
        """
        Connects to RabbitMQ and declares the topic exchange.

        Args:
            url: AMQP URL
            exchange_name: Exchange name
            prefetch_count: Unacked messages per consumer
        """
        if self.is_connected:
            return

        if exchange_name:
            self._exchange_name = exchange_name

        await log_info("Connecting to RabbitMQ...", type_msg=TypeMsg.INFO)

        self._connection = await aio_pika.connect_robust(url)
        self._channel = await self._connection.channel()
        await self._channel.set_qos(prefetch_count=prefetch_count)

        self._exchange = await self._channel.declare_exchange(
            self._exchange_name,
            ExchangeType.TOPIC,
            durable=True,
        )

        await log_info(f"RabbitMQ connected, exchange {self._exchange_name}", type_msg=TypeMsg.INFO)

    async def disconnect(self) -> None:
        if self._connection is not None:
            await self._connection.close()
            self._connection = None
            self._channel = None
            self._exchange = None
            self._queues = {}
            await log_info("RabbitMQ connection closed", type_msg=TypeMsg.INFO)

    async def publish(self, event: DomainEvent) -> None:
        """
        Publishes an event with its event_type as routing key.

        Args:
            event: Domain event
        """
        if not self.is_connected or self._exchange is None:
            await log_error(f"Cannot publish {event.event_type}: RabbitMQ is not connected")
            return

        try:
            message = Message(
                body=event.to_json().encode(),
                content_type="application/json",
                message_id=event.event_id,
                timestamp=datetime.now(timezone.utc),
            )

            await self._exchange.publish(
                message,
                routing_key=event.event_type,
            )

            await log_info(
                f"Event published: {event.event_type}",
                type_msg=TypeMsg.DEBUG,
            )
        except Exception as e:
            await log_error(f"Failed to publish {event.event_type}: {e}")

    async def subscribe(
        self,
        binding_key: str,
        handler: EventHandler,
        queue_name: str,
    ) -> None:
        """
        Binds a durable queue to the exchange and consumes it.

        Args:
            binding_key: Routing pattern, e.g. "order.*"
            handler: Async handler receiving the decoded event
            queue_name: Durable queue name
        """
        if not self.is_connected or self._channel is None or self._exchange is None:
            await log_error(f"Cannot subscribe {queue_name}: RabbitMQ is not connected")
            return

        self._handlers.setdefault(queue_name, []).append(handler)

        if queue_name not in self._queues:
            queue = await self._channel.declare_queue(queue_name, durable=True)
            await queue.bind(self._exchange, routing_key=binding_key)
            self._queues[queue_name] = queue
            await queue.consume(self._make_consumer(queue_name))

        await log_info(
            f"Subscribed {queue_name} to {binding_key}",
            type_msg=TypeMsg.DEBUG,
        )

    def _make_consumer(self, queue_name: str) -> Callable[[AbstractIncomingMessage], Awaitable[None]]:
        """Builds the queue consumer. Messages are acked even when a handler fails."""
        async def consumer(message: AbstractIncomingMessage) -> None:
            async with message.process():
                try:
                    event = DomainEvent.from_json(message.body.decode())
                except (ValueError, UnicodeDecodeError) as e:
                    await log_error(f"Dropping malformed message on {queue_name}: {e}")
                    return

                for handler in self._handlers.get(queue_name, []):
                    try:
                        await handler(event)
                    except Exception as e:
                        await log_error(
                            f"Handler {getattr(handler, '__name__', handler)} failed on {event.event_type}: {e}",
                            exc_info=True,
                        )

        return consumer

    async def health_check(self) -> bool:
        return self.is_connected


_event_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    """Returns the process-wide EventBus."""
    global _event_bus
    if _event_bus is None:
        _event_bus = EventBus()
    return _event_bus


async def init_event_bus() -> EventBus:
    """
    Connects the event bus using config settings.
    """
    from src.config import settings

    event_bus = get_event_bus()
    await event_bus.connect(
        url=settings.rabbitmq.url,
        exchange_name=settings.rabbitmq.RABBITMQ_EXCHANGE,
        prefetch_count=settings.rabbitmq.RABBITMQ_PREFETCH_COUNT,
    )
    return event_bus


async def close_event_bus() -> None:
    event_bus = get_event_bus()
    await event_bus.disconnect()
