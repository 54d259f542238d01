# src/services/__init__.py
"""
Platform microservices.

Architecture:
- Each service is an independent FastAPI application
- Shared PostgreSQL, one schema per service
- RabbitMQ topic exchange for events, HTTP for synchronous reads

Services:
- api_gateway: registration, login, bearer tokens, reverse proxy
- customer_service: customer accounts and profiles
- restaurant_service: restaurants and menus
- order_service: order placement, status, cancellation
- delivery_service: driver assignment and delivery tracking
"""

__all__: list[str] = []
