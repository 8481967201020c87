"""
Módulo de servicios
"""
from .air_quality import (
    AirQualityService,
    PipelineConfig,
    build_reading,
)
from .location import (
    FallbackLocation,
    StaticLocation,
)

__all__ = [
    'AirQualityService',
    'PipelineConfig',
    'build_reading',
    'FallbackLocation',
    'StaticLocation',
]
