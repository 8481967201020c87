"""
Módulo de utilidades
"""
from .helpers import (
    is_nan,
    safe_float,
    safe_int,
    es_datetime_from_epoch,
)
from .storage import (
    MemoryStore,
    JsonFileStore,
    ReadingCache,
)

__all__ = [
    'is_nan',
    'safe_float',
    'safe_int',
    'es_datetime_from_epoch',
    'MemoryStore',
    'JsonFileStore',
    'ReadingCache',
]
