"""
Utilidades geográficas: distancia Haversine y estación más cercana
"""
import math
from typing import Iterable, List, Optional, Tuple

from config import EARTH_RADIUS_KM
from errors import EmptyCandidateSet
from providers.types import Coordinate, StationCandidate


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calcula distancia en km entre dos coordenadas usando fórmula de Haversine

    Args:
        lat1, lon1: Coordenadas del primer punto
        lat2, lon2: Coordenadas del segundo punto

    Returns:
        Distancia en kilómetros
    """
    # Convertir a radianes
    lat1, lon1, lat2, lon2 = map(math.radians, [lat1, lon1, lat2, lon2])

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    c = 2 * math.asin(min(1.0, math.sqrt(a)))

    return EARTH_RADIUS_KM * c


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """Distancia Haversine entre dos Coordinate."""
    return haversine_distance(a.latitude, a.longitude, b.latitude, b.longitude)


def candidate_distance_km(origin: Coordinate, candidate: StationCandidate) -> Optional[float]:
    """
    Distancia de una candidata al origen

    Con coordenadas se usa Haversine; sin ellas, la distancia que informa la
    propia fuente. None si no hay ninguna de las dos.
    """
    if candidate.coordinate is not None:
        return distance_km(origin, candidate.coordinate)
    if candidate.raw is not None:
        return candidate.raw.reported_distance_km
    return None


def rank_stations(origin: Coordinate, candidates: Iterable[StationCandidate],
                  max_results: int = 5) -> List[Tuple[StationCandidate, float]]:
    """
    Ordena candidatas por distancia al origen

    Args:
        origin: Punto de búsqueda
        candidates: Estaciones candidatas
        max_results: Número máximo de resultados

    Returns:
        Lista de tuplas (estación, distancia_km); a igual distancia se
        conserva el orden de entrada. Se omiten las candidatas sin distancia.
    """
    results = []
    for c in candidates:
        dist = candidate_distance_km(origin, c)
        if dist is not None:
            results.append((c, dist))
    results.sort(key=lambda x: x[1])
    return results[:max_results]


def find_nearest_station(origin: Coordinate, candidates: Iterable[StationCandidate]) -> StationCandidate:
    """
    Devuelve la candidata más cercana al origen.

    Con empate exacto gana la primera en el orden de entrada.

    Raises:
        EmptyCandidateSet: si no hay candidatas con distancia conocida
    """
    ranked = rank_stations(origin, candidates, max_results=1)
    if not ranked:
        raise EmptyCandidateSet()
    return ranked[0][0]
