"""
Capa de acceso a proveedores de estaciones.
"""
from .types import Coordinate, RawReading, StationCandidate, Reading
from .registry import get_provider, get_providers, require_provider

__all__ = [
    "Coordinate",
    "RawReading",
    "StationCandidate",
    "Reading",
    "get_provider",
    "get_providers",
    "require_provider",
]
