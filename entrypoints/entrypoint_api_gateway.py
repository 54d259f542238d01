#!/usr/bin/env python3
# entrypoint_api_gateway.py
"""
Entry point for the API Gateway.
"""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from main import run_component
from src.common.logger import setup_logging


if __name__ == "__main__":
    setup_logging("api_gateway")
    asyncio.run(run_component("api_gateway"))
