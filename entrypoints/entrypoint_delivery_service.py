#!/usr/bin/env python3
# entrypoint_delivery_service.py
"""
Entry point for the Delivery Service.
"""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from main import run_component
from src.common.logger import setup_logging


if __name__ == "__main__":
    setup_logging("delivery_service")
    asyncio.run(run_component("delivery_service"))
