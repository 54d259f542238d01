#!/usr/bin/env python3
# main.py
"""
Food delivery platform entry point.
Starts one service, or all of them in one process, with uvicorn.
"""

from __future__ import annotations

import asyncio
import sys

import uvicorn

from src.config import settings
from src.common.logger import setup_logging, log_info
from src.common.constants import TypeMsg

# component -> (ASGI app path, port setting on settings.deployment)
COMPONENTS: dict[str, tuple[str, str]] = {
    "api_gateway": ("src.services.api_gateway.app:app", "API_GATEWAY_PORT"),
    "customer_service": ("src.services.customer_service.app:app", "CUSTOMER_SERVICE_PORT"),
    "restaurant_service": ("src.services.restaurant_service.app:app", "RESTAURANT_SERVICE_PORT"),
    "order_service": ("src.services.order_service.app:app", "ORDER_SERVICE_PORT"),
    "delivery_service": ("src.services.delivery_service.app:app", "DELIVERY_SERVICE_PORT"),
}

ALL_MODE = "all"


def build_server(component: str) -> uvicorn.Server:
    app_path, port_setting = COMPONENTS[component]
    config = uvicorn.Config(
        app_path,
        host="0.0.0.0",
        port=getattr(settings.deployment, port_setting),
        log_level="debug" if settings.system.DEBUG else "info",
    )
    return uvicorn.Server(config)


async def run_component(component: str) -> None:
    server = build_server(component)
    await log_info(
        f"Starting {component} on port {server.config.port}",
        type_msg=TypeMsg.INFO,
    )
    await server.serve()


async def run_all() -> None:
    await log_info("Starting all services...", type_msg=TypeMsg.INFO)
    tasks = [asyncio.create_task(run_component(name)) for name in COMPONENTS]
    try:
        await asyncio.gather(*tasks)
    except asyncio.CancelledError:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


def resolve_mode(arg: str | None) -> str | None:
    """CLI argument first, then COMPONENT_MODE from config."""
    mode = (arg or settings.system.COMPONENT_MODE or "").lower()
    if mode == ALL_MODE or mode in COMPONENTS:
        return mode
    return None


async def main(mode: str) -> None:
    setup_logging(None if mode == ALL_MODE else mode)
    await log_info(
        f"{settings.system.PROJECT_NAME} v{settings.system.VERSION}, mode '{mode}'",
        type_msg=TypeMsg.INFO,
    )
    if mode == ALL_MODE:
        await run_all()
    else:
        await run_component(mode)


def print_usage() -> None:
    components = "\n".join(f"    {name}" for name in [*COMPONENTS, ALL_MODE])
    print(f"Usage:\n    python main.py [component]\n\nComponents:\n{components}\n")
    print("Without an argument the COMPONENT_MODE setting is used.")


if __name__ == "__main__":
    arg = sys.argv[1] if len(sys.argv) > 1 else None
    if arg in ("--help", "-h"):
        print_usage()
        sys.exit(0)

    mode = resolve_mode(arg)
    if mode is None:
        print(f"Unknown component: {arg or settings.system.COMPONENT_MODE!r}")
        print_usage()
        sys.exit(1)

    try:
        asyncio.run(main(mode))
    except KeyboardInterrupt:
        pass
