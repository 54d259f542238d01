# src/shared/models/enrichment.py
"""
Result of a best-effort read from a peer service.

A response built from local data can be decorated with peer data; when the
peer has nothing or is down, the local data is still returned and the
enrichment state says why the peer fields are empty.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class EnrichmentStatus(str, Enum):
    PRESENT = "present"
    MISSING = "missing"
    FAILED = "failed"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Enrichment(Generic[T]):
    status: EnrichmentStatus
    value: T | None = None
    error: str | None = None

    @classmethod
    def present(cls, value: T) -> "Enrichment[T]":
        return cls(EnrichmentStatus.PRESENT, value=value)

    @classmethod
    def missing(cls) -> "Enrichment[T]":
        return cls(EnrichmentStatus.MISSING)

    @classmethod
    def failed(cls, error: str) -> "Enrichment[T]":
        return cls(EnrichmentStatus.FAILED, error=error)

    @property
    def is_present(self) -> bool:
        return self.status is EnrichmentStatus.PRESENT
