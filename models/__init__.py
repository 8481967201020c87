"""
Módulo de modelos y cálculos
"""
from .air_quality import (
    Tier, TIERS,
    GOOD, MODERATE, UNHEALTHY_SENSITIVE, UNHEALTHY, VERY_UNHEALTHY, HAZARDOUS,
    tier_by_key, epa_correct_pm25, pm25_to_aqi,
    classify_aqi, classify_pm25,
)

__all__ = [
    'Tier', 'TIERS',
    'GOOD', 'MODERATE', 'UNHEALTHY_SENSITIVE', 'UNHEALTHY', 'VERY_UNHEALTHY', 'HAZARDOUS',
    'tier_by_key', 'epa_correct_pm25', 'pm25_to_aqi',
    'classify_aqi', 'classify_pm25',
]
