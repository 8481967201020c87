"""
Errores tipados del pipeline de calidad del aire.

Todos heredan de AirQualityError para que el proceso anfitrión pueda mostrar
un estado de error distinto en lugar de un valor inventado.
"""
from typing import Optional


class AirQualityError(Exception):
    """Base común de los errores del pipeline."""


class EmptyCandidateSet(AirQualityError):
    def __init__(self, message: str = "No hay estaciones candidatas"):
        super().__init__(message)


class InvalidConcentration(AirQualityError):
    def __init__(self, value):
        self.value = value
        super().__init__(f"Concentración PM2.5 inválida: {value!r}")


class MissingField(AirQualityError):
    """El proveedor no devolvió un campo obligatorio (p. ej. pm25)."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Falta el campo obligatorio '{field}'")


class ProviderError(AirQualityError):
    """Configuración o respuesta de proveedor inutilizable."""


class FetchExhausted(AirQualityError):
    def __init__(self, last_error: Optional[BaseException], attempts: int):
        self.last_error = last_error
        self.attempts = attempts
        super().__init__(f"Sin datos tras {attempts} intentos: {last_error}")


class Cancelled(AirQualityError):
    def __init__(self, message: str = "Resolución cancelada"):
        super().__init__(message)


class CacheUnavailable(AirQualityError):
    """Fallo del almacén de caché. Nunca sale de utils.storage.ReadingCache."""
