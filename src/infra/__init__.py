# src/infra/__init__.py
"""
Infrastructure layer.
PostgreSQL, RabbitMQ and peer HTTP clients.
"""

from src.infra.database import DatabaseManager, get_db
from src.infra.event_bus import EventBus, get_event_bus
from src.infra.http_client import BaseClient, fetch_enrichment

__all__ = [
    "DatabaseManager",
    "get_db",
    "EventBus",
    "get_event_bus",
    "BaseClient",
    "fetch_enrichment",
]
