#!/usr/bin/env python3
"""
Consulta puntual de la calidad del aire en la estación más cercana
"""
import argparse
import logging
import sys

from config import CACHE_PATH, DEFAULT_PROVIDER, TIMEOUT_SECONDS
from errors import AirQualityError
from providers import Coordinate, require_provider
from services import AirQualityService, FallbackLocation, PipelineConfig
from utils.storage import JsonFileStore, MemoryStore, ReadingCache


def main() -> int:
    parser = argparse.ArgumentParser(description="Calidad del aire en la estación más cercana")
    parser.add_argument("--lat", type=float, help="Sin --lat/--lon se usa la ubicación de respaldo")
    parser.add_argument("--lon", type=float)
    parser.add_argument("--provider", default=DEFAULT_PROVIDER)
    parser.add_argument("--timeout", type=float, default=TIMEOUT_SECONDS)
    parser.add_argument("--cache-path", default=CACHE_PATH)
    parser.add_argument("--no-cache", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)

    config = PipelineConfig(timeout_seconds=args.timeout)
    store = MemoryStore() if args.no_cache else JsonFileStore(args.cache_path)

    def _locate():
        if args.lat is None or args.lon is None:
            return None
        return Coordinate(args.lat, args.lon)

    location = FallbackLocation(_locate, config.fallback_coordinate)

    try:
        service = AirQualityService(
            require_provider(args.provider),
            config=config,
            cache=ReadingCache(store, config.cache_ttl_s),
        )
        reading = service.resolve(location.current())
    except AirQualityError as exc:
        print(f"❌ {exc}")
        return 1

    print(f"📍 {reading.station_name or reading.station_id} ({reading.distance_km:.1f} km)")
    print(f"   PM2.5 bruto:     {reading.pm25_raw:.1f} µg/m³")
    print(f"   PM2.5 corregido: {reading.pm25_corrected:.1f} µg/m³")
    print(f"   AQI:             {reading.aqi if reading.aqi is not None else '-'}")
    print(f"   Nivel:           {reading.tier.label} (#{reading.tier.color})")
    if reading.last_seen:
        print(f"   Actualizado:     {reading.last_seen}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
