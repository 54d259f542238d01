#!/usr/bin/env python3
# entrypoint_order_service.py
"""
Entry point for the Order Service.
"""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from main import run_component
from src.common.logger import setup_logging


if __name__ == "__main__":
    setup_logging("order_service")
    asyncio.run(run_component("order_service"))
