"""
Fixtures compartidas para los tests del pipeline de calidad del aire.
"""
from typing import Any, Callable, Dict
from unittest.mock import Mock

import pytest
import requests

from models.air_quality import MODERATE
from providers.types import Coordinate, Reading

ORIGIN = Coordinate(14.9907, 100.4780)
# 1 grado de latitud = 6371 * pi / 180 km
KM_PER_DEG_LAT = 111.19492664455873


def make_response(payload: Any = None, status: int = 200, json_error: Exception = None) -> Mock:
    response = Mock()
    response.status_code = status
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"HTTP {status}")
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    return response


def routed_session(routes: Dict[str, Callable[..., Any]]) -> Mock:
    """Session falsa: la primera ruta cuyo prefijo coincide con la URL responde."""
    session = Mock()

    def _get(url, params=None, headers=None, timeout=None):
        for prefix in sorted(routes, key=len, reverse=True):
            if url.startswith(prefix):
                result = routes[prefix]
                return result(url, params) if callable(result) else make_response(result)
        raise requests.ConnectionError(f"sin ruta para {url}")

    session.get.side_effect = _get
    return session


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def origin():
    return ORIGIN


@pytest.fixture
def sample_reading():
    return Reading(
        pm25_raw=40.0,
        pm25_corrected=26.778,
        aqi=82,
        tier=MODERATE,
        station_id="131",
        distance_km=2.3,
        computed_at=1_700_000_000.0,
        provider_id="PURPLEAIR",
        station_name="Sing Buri",
        last_seen="17-10-2026 10:00:00",
    )
