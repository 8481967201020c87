"""
Contrato base para proveedores de calidad del aire.
"""
from typing import Any, Callable, List, Protocol

from .types import Coordinate, StationCandidate

# fetch(url, params=None, headers=None) -> JSON, ya con reintentos y cancelación
Fetch = Callable[..., Any]


class AirQualityProvider(Protocol):
    """Interfaz común para búsqueda de estaciones y lectura de PM2.5."""
    provider_id: str
    provider_name: str
    default_mode: str  # "aqi" o "pm25"
    needs_correction: bool

    def search_nearby_stations(self, origin: Coordinate, fetch: Fetch) -> List[StationCandidate]:
        """Devuelve estaciones cercanas normalizadas para este proveedor."""
        ...

    def load_reading(self, candidate: StationCandidate, fetch: Fetch) -> StationCandidate:
        """Devuelve la candidata con su RawReading completo."""
        ...
