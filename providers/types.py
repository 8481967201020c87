"""
Tipos de dominio para proveedores de estaciones de calidad del aire.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from models.air_quality import Tier, tier_by_key


@dataclass(frozen=True)
class Coordinate:
    """Punto WGS84 en grados."""
    latitude: float
    longitude: float


@dataclass(frozen=True)
class RawReading:
    """
    Lectura tal como la entrega la fuente.

    Solo pm25 es obligatorio; el resto se propaga a Reading sin tocarlo.
    """
    pm25: float
    humidity: Optional[float] = None
    source_aqi: Optional[int] = None
    source_title: Optional[str] = None
    station_name: Optional[str] = None
    last_seen: Optional[str] = None
    reported_distance_km: Optional[float] = None


@dataclass(frozen=True)
class StationCandidate:
    """Representa una estación normalizada, independiente del proveedor."""
    provider_id: str
    station_id: str
    name: str
    coordinate: Optional[Coordinate]  # None: solo se conoce la distancia informada
    raw: Optional[RawReading] = None
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class Reading:
    """Resultado del pipeline. La capa de presentación solo lo formatea."""
    pm25_raw: float
    pm25_corrected: float
    aqi: Optional[int]
    tier: Tier
    station_id: str
    distance_km: float
    computed_at: float
    provider_id: str = ""
    station_name: Optional[str] = None
    last_seen: Optional[str] = None
    source_aqi: Optional[int] = None
    source_title: Optional[str] = None
    reported_distance_km: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pm25_raw": self.pm25_raw,
            "pm25_corrected": self.pm25_corrected,
            "aqi": self.aqi,
            "tier": self.tier.key,
            "station_id": self.station_id,
            "distance_km": self.distance_km,
            "computed_at": self.computed_at,
            "provider_id": self.provider_id,
            "station_name": self.station_name,
            "last_seen": self.last_seen,
            "source_aqi": self.source_aqi,
            "source_title": self.source_title,
            "reported_distance_km": self.reported_distance_km,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Reading":
        aqi = data.get("aqi")
        return cls(
            pm25_raw=float(data["pm25_raw"]),
            pm25_corrected=float(data["pm25_corrected"]),
            aqi=int(aqi) if aqi is not None else None,
            tier=tier_by_key(data["tier"]),
            station_id=str(data["station_id"]),
            distance_km=float(data["distance_km"]),
            computed_at=float(data["computed_at"]),
            provider_id=str(data.get("provider_id", "")),
            station_name=data.get("station_name"),
            last_seen=data.get("last_seen"),
            source_aqi=data.get("source_aqi"),
            source_title=data.get("source_title"),
            reported_distance_km=data.get("reported_distance_km"),
        )
