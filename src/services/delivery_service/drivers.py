# src/services/delivery_service/drivers.py
"""
Fixed driver pool.
Drivers are not persisted anywhere else; a delivery stores name and phone.
"""

from __future__ import annotations

import random
from dataclasses import dataclass


@dataclass(frozen=True)
class Driver:
    name: str
    phone: str


DRIVER_POOL: tuple[Driver, ...] = (
    Driver("Carlos Martinez", "+1-555-0101"),
    Driver("Sarah Johnson", "+1-555-0102"),
    Driver("Mike Chen", "+1-555-0103"),
    Driver("Priya Patel", "+1-555-0104"),
    Driver("James Wilson", "+1-555-0105"),
)


def pick_driver(rng: random.Random | None = None) -> Driver:
    """Uniform pick from DRIVER_POOL."""
    return (rng or random).choice(DRIVER_POOL)
