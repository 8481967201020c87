"""
Cálculos de calidad del aire

Corrección EPA de PM2.5 para sensores de bajo coste, conversión de
concentración a AQI (breakpoints EPA) y clasificación en niveles.
"""
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from errors import InvalidConcentration

# ====================
# NIVELES
# ====================


@dataclass(frozen=True)
class Tier:
    """Nivel de calidad del aire con sus umbrales inferiores y colores."""
    key: str
    label: str
    color: str
    text_color: str
    aqi_min: int
    pm25_min: float

    @property
    def severity(self) -> int:
        return TIERS.index(self)


# Orden creciente de gravedad. Los umbrales son inclusivos: un valor
# exactamente en el umbral pertenece al nivel más grave.
TIERS: Tuple[Tier, ...] = (
    Tier("good", "Good", "3EC562", "FFFFFF", 0, 0.0),
    Tier("moderate", "Moderate", "FDD74B", "000000", 50, 15.1),
    Tier("unhealthy_sensitive", "Unhealthy for Sensitive Groups", "FB9B57", "000000", 100, 25.1),
    Tier("unhealthy", "Unhealthy", "F65E5E", "FFFFFF", 150, 37.6),
    Tier("very_unhealthy", "Very Unhealthy", "A070B6", "FFFFFF", 200, 75.1),
    Tier("hazardous", "Hazardous", "7D1A1A", "FFFFFF", 300, 250.5),
)

GOOD, MODERATE, UNHEALTHY_SENSITIVE, UNHEALTHY, VERY_UNHEALTHY, HAZARDOUS = TIERS


def tier_by_key(key: str) -> Tier:
    for tier in TIERS:
        if tier.key == key:
            return tier
    raise KeyError(key)


# ====================
# CORRECCIÓN EPA
# ====================

def _epa_low(pm: float, hum: float) -> float:
    return 0.524 * pm - 0.0862 * hum + 5.75


def _epa_mid(pm: float, hum: float) -> float:
    return 0.786 * pm - 0.0862 * hum + 5.75


def _epa_high(pm: float) -> float:
    return 2.966 + 0.69 * pm + 8.84e-4 * pm ** 2


def epa_correct_pm25(pm25_raw: float, humidity: float) -> float:
    """
    Corrección EPA (US-wide) para PM2.5 cf_1 de PurpleAir

    Tramos:
        pm < 30        0.524*pm - 0.0862*HR + 5.75
        30 <= pm < 50  mezcla lineal, f = pm/20 - 1.5
        50 <= pm < 210 0.786*pm - 0.0862*HR + 5.75
        210 <= pm < 260 mezcla con el tramo alto, f = pm/50 - 4.2
        pm >= 260      2.966 + 0.69*pm + 8.84e-4*pm²

    Args:
        pm25_raw: PM2.5 bruto en µg/m³
        humidity: Humedad relativa en %
    Returns:
        PM2.5 corregido en µg/m³ (nunca negativo)
    """
    pm = float(pm25_raw)
    if math.isnan(pm) or pm < 0:
        raise InvalidConcentration(pm25_raw)
    hum = float(humidity)

    if pm < 30:
        corrected = _epa_low(pm, hum)
    elif pm < 50:
        f = pm / 20 - 1.5
        corrected = (0.786 * f + 0.524 * (1 - f)) * pm - 0.0862 * hum + 5.75
    elif pm < 210:
        corrected = _epa_mid(pm, hum)
    elif pm < 260:
        f = pm / 50 - 4.2
        corrected = f * _epa_high(pm) + (1 - f) * _epa_mid(pm, hum)
    else:
        corrected = _epa_high(pm)

    # Aire limpio con HR alta puede dar valores negativos
    return max(0.0, corrected)


# ====================
# AQI
# ====================

# (concentración >, AQI alto, AQI bajo, conc. alta, conc. baja), de mayor a menor
AQI_BREAKPOINTS = (
    (350.5, 500, 401, 500.0, 350.5),
    (250.5, 400, 301, 350.4, 250.5),
    (150.5, 300, 201, 250.4, 150.5),
    (55.5, 200, 151, 150.4, 55.5),
    (35.5, 150, 101, 55.4, 35.5),
    (12.1, 100, 51, 35.4, 12.1),
)
AQI_MAX_CONCENTRATION = 500.0


def _interpolate(c: float, i_high: int, i_low: int, c_high: float, c_low: float) -> int:
    value = (i_high - i_low) / (c_high - c_low) * (c - c_low) + i_low
    return int(math.floor(value + 0.5))


def pm25_to_aqi(concentration: float) -> Optional[int]:
    """
    AQI EPA a partir de PM2.5

    Args:
        concentration: PM2.5 en µg/m³
    Returns:
        AQI entero en [0, 500], o None si la concentración supera la tabla
    Raises:
        InvalidConcentration: concentración negativa o NaN
    """
    c = float(concentration)
    if math.isnan(c) or c < 0:
        raise InvalidConcentration(concentration)
    if c > AQI_MAX_CONCENTRATION:
        return None

    for threshold, i_high, i_low, c_high, c_low in AQI_BREAKPOINTS:
        if c > threshold:
            return _interpolate(c, i_high, i_low, c_high, c_low)
    return _interpolate(c, 50, 0, 12.0, 0.0)


# ====================
# CLASIFICACIÓN
# ====================

def classify_aqi(aqi: int) -> Tier:
    """Nivel según AQI (umbrales 300, 200, 150, 100, 50, 0)."""
    if aqi < 0:
        raise ValueError(f"AQI negativo: {aqi}")
    for tier in reversed(TIERS):
        if aqi >= tier.aqi_min:
            return tier
    return GOOD


def classify_pm25(pm25: float) -> Tier:
    """Nivel directamente desde PM2.5, para fuentes sin conversión a AQI."""
    c = float(pm25)
    if math.isnan(c) or c < 0:
        raise InvalidConcentration(pm25)
    for tier in reversed(TIERS):
        if c >= tier.pm25_min:
            return tier
    return GOOD
