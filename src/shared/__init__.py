# src/shared/__init__.py
"""
Code shared between the services.

- models: DTOs exchanged over HTTP
- events: payloads carried on the event bus
- identity: caller identity derived from gateway headers
"""

__all__: list[str] = []
