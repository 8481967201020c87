"""
Configuración global del monitor de calidad del aire
"""
import os

# ============================================================
# PROVEEDORES DE DATOS
# ============================================================
CMUCCDC_BASE_URL = "https://www-old.cmuccdc.org/api2/dustboy"
CMUCCDC_REFERER = "https://pm2_5.nrct.go.th/"

PURPLEAIR_BASE_URL = "https://api.purpleair.com/v1/sensors"
PURPLEAIR_API_KEY = os.getenv("PURPLEAIR_API_KEY", "")
PURPLEAIR_BOUND_OFFSET_DEG = 0.2  # Semilado de la caja de búsqueda
PURPLEAIR_MAX_AGE_S = 3600  # Ignorar sensores sin datos en la última hora

DEFAULT_PROVIDER = os.getenv("AQ_PROVIDER", "CMUCCDC")

# ============================================================
# RED Y REINTENTOS
# ============================================================
TIMEOUT_SECONDS = 10  # Por intento, no total
MAX_RETRIES = 3
RETRY_DELAY_MS = 5000

# ============================================================
# CACHE
# ============================================================
CACHE_TTL_MINUTES = 30  # Coincide con el intervalo de refresco del widget
CACHE_SCHEMA_VERSION = 1  # Subir si cambia la forma de Reading
CACHE_KEY_PRECISION = 3  # Decimales de lat/lon en la key (~100 m)
CACHE_PATH = os.getenv("AQ_CACHE_PATH", os.path.expanduser("~/.cache/air_quality_widget.json"))

# ============================================================
# UBICACIÓN
# ============================================================
FALLBACK_LATITUDE = 7.1897
FALLBACK_LONGITUDE = 100.5954

# ============================================================
# CONSTANTES GEOGRÁFICAS
# ============================================================
EARTH_RADIUS_KM = 6371.0
