"""
Orquestación: caché -> proveedor -> estación más cercana -> AQI -> caché
"""
import logging
import threading
import time
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Optional

import requests

from api.http_client import RetryPolicy, check_cancelled, fetch_json
from config import (
    CACHE_KEY_PRECISION, CACHE_SCHEMA_VERSION, CACHE_TTL_MINUTES,
    FALLBACK_LATITUDE, FALLBACK_LONGITUDE,
    MAX_RETRIES, RETRY_DELAY_MS, TIMEOUT_SECONDS,
)
from errors import MissingField
from geo_utils import candidate_distance_km, find_nearest_station
from models.air_quality import (
    classify_aqi, classify_pm25, epa_correct_pm25, pm25_to_aqi,
)
from providers.types import Coordinate, Reading, StationCandidate
from utils.storage import MemoryStore, ReadingCache

logger = logging.getLogger(__name__)

CLASSIFICATION_MODES = ("aqi", "pm25")


@dataclass(frozen=True)
class PipelineConfig:
    timeout_seconds: float = TIMEOUT_SECONDS
    max_retries: int = MAX_RETRIES
    retry_delay_ms: int = RETRY_DELAY_MS
    cache_ttl_minutes: float = CACHE_TTL_MINUTES
    cache_schema_version: int = CACHE_SCHEMA_VERSION
    cache_key_precision: int = CACHE_KEY_PRECISION
    fallback_coordinate: Coordinate = field(
        default_factory=lambda: Coordinate(FALLBACK_LATITUDE, FALLBACK_LONGITUDE)
    )
    classification_mode: Optional[str] = None  # None: el del proveedor

    def __post_init__(self):
        if self.cache_ttl_minutes <= 0:
            raise ValueError("cache_ttl_minutes debe ser > 0")
        if self.cache_key_precision < 0:
            raise ValueError("cache_key_precision no puede ser negativo")
        if self.classification_mode not in (None,) + CLASSIFICATION_MODES:
            raise ValueError(f"Modo de clasificación desconocido: {self.classification_mode}")
        # Valida timeout y reintentos
        self.retry_policy()

    @property
    def cache_ttl_s(self) -> float:
        return self.cache_ttl_minutes * 60.0

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_retries=self.max_retries,
            retry_delay_s=self.retry_delay_ms / 1000.0,
            timeout_s=self.timeout_seconds,
        )


def build_reading(station: StationCandidate, origin: Coordinate, mode: str,
                  needs_correction: bool, computed_at: float) -> Reading:
    """
    Convierte la lectura bruta de una estación en Reading.

    Raises:
        MissingField: sin PM2.5, o sin humedad cuando hay que corregir
        InvalidConcentration: PM2.5 negativo
    """
    raw = station.raw
    if raw is None:
        raise MissingField("pm25")

    if needs_correction:
        if raw.humidity is None:
            raise MissingField("humidity")
        corrected = epa_correct_pm25(raw.pm25, raw.humidity)
    else:
        corrected = raw.pm25

    aqi = pm25_to_aqi(corrected)
    if mode == "aqi" and aqi is not None:
        tier = classify_aqi(aqi)
    else:
        # Fuera de la tabla AQI solo queda la clasificación por concentración
        tier = classify_pm25(corrected)

    return Reading(
        pm25_raw=raw.pm25,
        pm25_corrected=corrected,
        aqi=aqi,
        tier=tier,
        station_id=station.station_id,
        distance_km=candidate_distance_km(origin, station),
        computed_at=computed_at,
        provider_id=station.provider_id,
        station_name=raw.station_name or station.name,
        last_seen=raw.last_seen,
        source_aqi=raw.source_aqi,
        source_title=raw.source_title,
        reported_distance_km=raw.reported_distance_km,
    )


class AirQualityService:
    """
    Resuelve la calidad del aire en la estación más cercana a una coordenada.

    La caché se consulta antes de tocar la red y se actualiza después; sus
    fallos solo degradan a miss. Cualquier otro fallo se propaga tipado.
    """

    def __init__(self, provider, config: Optional[PipelineConfig] = None,
                 cache: Optional[ReadingCache] = None,
                 session: Optional[requests.Session] = None,
                 clock: Callable[[], float] = time.time):
        self.provider = provider
        self.config = config or PipelineConfig()
        self.cache = cache if cache is not None else ReadingCache(MemoryStore(), self.config.cache_ttl_s, clock=clock)
        self.session = session
        self.clock = clock

    @property
    def mode(self) -> str:
        return self.config.classification_mode or self.provider.default_mode

    def cache_key(self, coordinate: Coordinate) -> str:
        p = self.config.cache_key_precision
        # +0.0 evita "-0.000" para coordenadas que redondean a cero
        lat = round(coordinate.latitude, p) + 0.0
        lon = round(coordinate.longitude, p) + 0.0
        return f"{self.provider.provider_id}:{self.mode}:{lat:.{p}f}:{lon:.{p}f}"

    def resolve(self, coordinate: Coordinate,
                cancel_event: Optional[threading.Event] = None,
                deadline: Optional[float] = None) -> Reading:
        """
        Args:
            coordinate: Ubicación ya resuelta por el colaborador de ubicación
            cancel_event: Si se activa, aborta las esperas entre reintentos
            deadline: Instante límite según time.monotonic()
        Raises:
            AirQualityError: cualquier subclase salvo CacheUnavailable
        """
        key = self.cache_key(coordinate)
        version = self.config.cache_schema_version

        cached = self.cache.get(key, version)
        if cached is not None:
            logger.info(f"Caché válida para {key}")
            return cached

        logger.info(f"Sin caché para {key}, consultando {self.provider.provider_name}")
        fetch = partial(
            fetch_json,
            policy=self.config.retry_policy(),
            session=self.session,
            cancel_event=cancel_event,
            deadline=deadline,
        )

        candidates = self.provider.search_nearby_stations(coordinate, fetch)
        nearest = find_nearest_station(coordinate, candidates)
        station = self.provider.load_reading(nearest, fetch)
        reading = build_reading(
            station, coordinate, self.mode, self.provider.needs_correction, self.clock()
        )

        # Una resolución cancelada o fuera de plazo no se devuelve ni se cachea
        check_cancelled(cancel_event, deadline)

        logger.info(
            f"Estación {reading.station_id} a {reading.distance_km:.1f} km: "
            f"PM2.5 {reading.pm25_corrected:.1f}, AQI {reading.aqi}, {reading.tier.label}"
        )
        self.cache.put(key, reading, version)
        return reading
