"""
Caché de lecturas con TTL y versión de esquema

El medio de almacenamiento es intercambiable (memoria o fichero JSON);
lo que importa es el contrato: una entrada caduca tras el TTL o cuando su
versión no coincide con la esperada.
"""
import json
import logging
import os
import tempfile
import threading
import time
from typing import Callable, Dict, Optional

from errors import CacheUnavailable
from providers.types import Reading

logger = logging.getLogger(__name__)


class MemoryStore:
    """Almacén clave -> texto en memoria, para procesos de vida corta."""

    def __init__(self):
        self._items: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value


class JsonFileStore:
    """
    Almacén clave -> texto persistido en un único fichero JSON.

    Cada escritura reescribe el fichero en un temporal y lo sustituye con
    os.replace, así un lector nunca ve un fichero a medio escribir.
    """

    def __init__(self, path: str):
        self.path = path
        self._lock = threading.Lock()

    def _read_all(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise CacheUnavailable(f"No se pudo leer {self.path}: {exc}") from exc
        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        with self._lock:
            try:
                data = self._read_all()
            except CacheUnavailable as exc:
                # Un fichero ilegible se descarta y se reescribe desde cero
                logger.warning(f"{exc}; se reescribe {self.path}")
                data = {}
            data[key] = value
            directory = os.path.dirname(os.path.abspath(self.path))
            tmp_path = None
            try:
                os.makedirs(directory, exist_ok=True)
                fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False)
                os.replace(tmp_path, self.path)
            except OSError as exc:
                if tmp_path and os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise CacheUnavailable(f"No se pudo escribir {self.path}: {exc}") from exc


class ReadingCache:
    """
    Caché de Reading con TTL y versión.

    Los fallos del almacén nunca se propagan: get degrada a ausente y put a
    no-op, ambos con warning.
    """

    def __init__(self, store, ttl_s: float, clock: Callable[[], float] = time.time):
        self.store = store
        self.ttl_s = float(ttl_s)
        self.clock = clock
        self._lock = threading.Lock()

    def get(self, key: str, version: int) -> Optional[Reading]:
        with self._lock:
            try:
                raw = self.store.get(key)
            except (CacheUnavailable, OSError) as exc:
                logger.warning(f"Caché no disponible al leer '{key}': {exc}")
                return None

        if raw is None:
            return None

        try:
            entry = json.loads(raw)
            stored_at = float(entry["stored_at"])
            if entry.get("schema_version") != version:
                logger.info(f"Caché '{key}' con versión {entry.get('schema_version')}, se esperaba {version}")
                return None
            if self.clock() - stored_at > self.ttl_s:
                logger.info(f"Caché '{key}' caducada")
                return None
            return Reading.from_dict(entry["payload"])
        except (ValueError, KeyError, TypeError) as exc:
            logger.warning(f"Entrada de caché '{key}' ilegible: {exc}")
            return None

    def put(self, key: str, reading: Reading, version: int) -> None:
        entry = {
            "payload": reading.to_dict(),
            "stored_at": self.clock(),
            "schema_version": version,
        }
        with self._lock:
            try:
                self.store.set(key, json.dumps(entry))
            except (CacheUnavailable, OSError) as exc:
                logger.warning(f"Caché no disponible al escribir '{key}': {exc}")
