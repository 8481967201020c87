"""
Adaptador de PurpleAir al contrato común de proveedores.

Dos pasos: sensores en una caja alrededor del origen y, después, la lectura
del más cercano. El PM2.5 cf_1 es bruto y necesita la corrección EPA.
"""
import logging
from typing import Any, Dict, List, Optional

from config import (
    PURPLEAIR_API_KEY, PURPLEAIR_BASE_URL,
    PURPLEAIR_BOUND_OFFSET_DEG, PURPLEAIR_MAX_AGE_S,
)
from errors import MissingField, ProviderError
from utils.helpers import es_datetime_from_epoch, safe_float, safe_int
from .base import Fetch
from .types import Coordinate, RawReading, StationCandidate

logger = logging.getLogger(__name__)

DEFAULT_FIELDS = ["sensor_index", "name", "latitude", "longitude"]


class PurpleAirProvider:
    provider_id = "PURPLEAIR"
    provider_name = "PurpleAir"
    default_mode = "aqi"
    needs_correction = True

    def __init__(self, api_key: Optional[str] = None, base_url: str = PURPLEAIR_BASE_URL,
                 bound_offset_deg: float = PURPLEAIR_BOUND_OFFSET_DEG):
        self.api_key = str(api_key if api_key is not None else PURPLEAIR_API_KEY).strip()
        self.base_url = base_url.rstrip("/")
        self.bound_offset_deg = bound_offset_deg

    def _headers(self) -> Dict[str, str]:
        if not self.api_key:
            raise ProviderError("Falta la API key de PurpleAir (PURPLEAIR_API_KEY)")
        return {"X-API-Key": self.api_key}

    def search_nearby_stations(self, origin: Coordinate, fetch: Fetch) -> List[StationCandidate]:
        headers = self._headers()
        off = self.bound_offset_deg
        params = {
            "fields": "name,latitude,longitude",
            "max_age": PURPLEAIR_MAX_AGE_S,
            "location_type": 0,  # Solo exteriores
            "nwlat": origin.latitude + off,
            "selat": origin.latitude - off,
            "nwlng": origin.longitude - off,
            "selng": origin.longitude + off,
        }
        payload = fetch(self.base_url, params=params, headers=headers)
        if not isinstance(payload, dict):
            raise ProviderError(f"Respuesta inesperada de {self.provider_name}")

        fields = payload.get("fields") or DEFAULT_FIELDS
        try:
            i_id = fields.index("sensor_index")
            i_name = fields.index("name")
            i_lat = fields.index("latitude")
            i_lon = fields.index("longitude")
        except ValueError as exc:
            raise ProviderError(f"Campos de PurpleAir incompletos: {fields}") from exc

        results: List[StationCandidate] = []
        for row in payload.get("data") or []:
            if not isinstance(row, list) or len(row) < len(fields):
                continue
            s_lat = safe_float(row[i_lat])
            s_lon = safe_float(row[i_lon])
            if s_lat is None or s_lon is None:
                continue
            station_id = str(row[i_id])
            results.append(
                StationCandidate(
                    provider_id=self.provider_id,
                    station_id=station_id,
                    name=str(row[i_name] or station_id),
                    coordinate=Coordinate(s_lat, s_lon),
                )
            )

        logger.info(f"{self.provider_name}: {len(results)} sensores cerca de {origin}")
        return results

    def load_reading(self, candidate: StationCandidate, fetch: Fetch) -> StationCandidate:
        payload = fetch(f"{self.base_url}/{candidate.station_id}", headers=self._headers())
        sensor: Dict[str, Any] = payload.get("sensor") if isinstance(payload, dict) else None
        if not isinstance(sensor, dict):
            raise ProviderError(f"Sensor {candidate.station_id} sin datos")

        pm25 = safe_float(sensor.get("pm2.5_cf_1"))
        if pm25 is None:
            raise MissingField("pm2.5_cf_1")

        last_seen = safe_int(sensor.get("last_seen"))
        raw = RawReading(
            pm25=pm25,
            humidity=safe_float(sensor.get("humidity")),
            station_name=str(sensor.get("name") or candidate.name),
            last_seen=es_datetime_from_epoch(last_seen) if last_seen else None,
        )
        return StationCandidate(
            provider_id=candidate.provider_id,
            station_id=candidate.station_id,
            name=candidate.name,
            coordinate=candidate.coordinate,
            raw=raw,
            metadata=sensor,
        )
