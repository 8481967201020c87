"""
Ubicación del dispositivo con coordenada de respaldo.
"""
import logging
from typing import Callable, Optional

from providers.types import Coordinate

logger = logging.getLogger(__name__)


class StaticLocation:
    def __init__(self, coordinate: Coordinate):
        self.coordinate = coordinate

    def current(self) -> Coordinate:
        return self.coordinate


class FallbackLocation:
    """
    Pide la ubicación a un colaborador y, si falla o no devuelve nada,
    usa la coordenada de respaldo configurada.
    """

    def __init__(self, locate: Callable[[], Optional[Coordinate]], fallback: Coordinate):
        self.locate = locate
        self.fallback = fallback

    def current(self) -> Coordinate:
        try:
            coordinate = self.locate()
        except Exception as exc:
            logger.info(f"Ubicación no disponible ({exc}), usando respaldo {self.fallback}")
            return self.fallback
        if coordinate is None:
            logger.info(f"Ubicación vacía, usando respaldo {self.fallback}")
            return self.fallback
        return coordinate
