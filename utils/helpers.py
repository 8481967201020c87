"""
Funciones auxiliares generales
"""
from datetime import datetime
from typing import Any, Optional


def is_nan(x):
    """Verifica si un valor es NaN"""
    if x is None:
        return True
    return x != x


def safe_float(val: Any) -> Optional[float]:
    """Convierte a float; None si falta o no es numérico"""
    if val is None or val == "":
        return None
    try:
        value = float(val)
    except (ValueError, TypeError):
        return None
    return None if is_nan(value) else value


def safe_int(val: Any) -> Optional[int]:
    value = safe_float(val)
    return int(round(value)) if value is not None else None


def es_datetime_from_epoch(epoch: int) -> str:
    """Convierte epoch a datetime"""
    dt = datetime.fromtimestamp(epoch)
    return dt.strftime("%d-%m-%Y %H:%M:%S")
