"""
Adaptador de CMUCCDC DustBoy al contrato común de proveedores.

El endpoint /near devuelve las estaciones cercanas con PM2.5 ya calibrado,
así que no se aplica la corrección EPA.
"""
import logging
from typing import Any, Dict, List, Optional

from config import CMUCCDC_BASE_URL, CMUCCDC_REFERER
from errors import MissingField, ProviderError
from utils.helpers import safe_float, safe_int
from .base import Fetch
from .types import Coordinate, RawReading, StationCandidate

logger = logging.getLogger(__name__)

HEADERS = {
    "Accept": "application/json, text/javascript, */*; q=0.01",
    "Referer": CMUCCDC_REFERER,
}


def _parse_raw(row: Dict[str, Any]) -> Optional[RawReading]:
    pm25 = safe_float(row.get("pm25"))
    if pm25 is None:
        return None
    title = row.get("us_title_en")
    return RawReading(
        pm25=pm25,
        source_aqi=safe_int(row.get("us_aqi")),
        source_title=str(title) if title else None,
        station_name=str(row.get("dustboy_name_en") or row.get("dustboy_name") or "") or None,
        last_seen=str(row.get("log_datetime") or "") or None,
        reported_distance_km=safe_float(row.get("distance")),
    )


class CmuccdcProvider:
    provider_id = "CMUCCDC"
    provider_name = "CMUCCDC DustBoy"
    default_mode = "pm25"
    needs_correction = False

    def __init__(self, base_url: str = CMUCCDC_BASE_URL):
        self.base_url = base_url.rstrip("/")

    def search_nearby_stations(self, origin: Coordinate, fetch: Fetch) -> List[StationCandidate]:
        url = f"{self.base_url}/near/{origin.latitude}/{origin.longitude}"
        payload = fetch(url, headers=HEADERS)
        if not isinstance(payload, list):
            raise ProviderError(f"Respuesta inesperada de {self.provider_name}: {type(payload).__name__}")

        results: List[StationCandidate] = []
        for row in payload:
            if not isinstance(row, dict):
                continue
            s_lat = safe_float(row.get("dustboy_lat"))
            s_lon = safe_float(row.get("dustboy_lon"))
            coordinate = Coordinate(s_lat, s_lon) if s_lat is not None and s_lon is not None else None
            # Sin coordenadas solo se puede ordenar por la distancia que informa /near
            if coordinate is None and safe_float(row.get("distance")) is None:
                continue

            station_id = str(row.get("dustboy_id") or row.get("id") or "").strip()
            results.append(
                StationCandidate(
                    provider_id=self.provider_id,
                    station_id=station_id,
                    name=str(row.get("dustboy_name_en") or station_id),
                    coordinate=coordinate,
                    raw=_parse_raw(row),
                    metadata=row,
                )
            )

        logger.info(f"{self.provider_name}: {len(results)} estaciones cerca de {origin}")
        return results

    def load_reading(self, candidate: StationCandidate, fetch: Fetch) -> StationCandidate:
        # /near ya trae la lectura; no hace falta otra petición
        if candidate.raw is None:
            raise MissingField("pm25")
        return candidate

    def fetch_forecast(self, station_id: str, fetch: Fetch) -> Any:
        """Pronóstico de PM2.5 de una estación, sin procesar."""
        if not str(station_id).strip():
            raise ProviderError("Falta station_id para el pronóstico")
        return fetch(f"{self.base_url}/forecast/{station_id}", headers=HEADERS)
