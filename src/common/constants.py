# src/common/constants.py
"""
Common constants and enumerations.
"""

from enum import Enum


class TypeMsg(str, Enum):
    """Log message types."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


# Identity headers injected by the API gateway
AUTH_USER_HEADER = "X-Auth-User"
AUTH_ROLE_HEADER = "X-Auth-Role"

# Shared topic exchange
APP_EXCHANGE = "app.exchange"

# Queues and their routing-key bindings
DELIVERY_QUEUE = "delivery.queue"
DELIVERY_QUEUE_BINDING = "order.*"
ORDER_QUEUE = "order.queue"
ORDER_QUEUE_BINDING = "delivery.*"
