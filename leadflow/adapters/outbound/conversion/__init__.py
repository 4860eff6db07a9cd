"""Conversion repository adapters."""

from leadflow.adapters.outbound.conversion.conversion_repository import InMemoryConversionRepository
from leadflow.adapters.outbound.conversion.postgres_conversion_repository import (
    PostgresConversionRepository,
)

__all__ = [
    "InMemoryConversionRepository",
    "PostgresConversionRepository",
]
