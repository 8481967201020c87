"""
Tests de la caché de lecturas con TTL y versión.

Cubren:
- Ida y vuelta put/get
- Caducidad por TTL y por versión de esquema
- Degradación: fallos del almacén se tratan como miss / no-op
- JsonFileStore: persistencia, escritura atómica y recuperación de ficheros corruptos
"""
import json
import logging
from unittest.mock import Mock

import pytest

from errors import CacheUnavailable
from utils.storage import JsonFileStore, MemoryStore, ReadingCache

TTL_S = 30 * 60


class TestReadingCache:

    @pytest.fixture
    def cache(self, clock):
        return ReadingCache(MemoryStore(), TTL_S, clock=clock)

    def test_round_trip(self, cache, sample_reading):
        cache.put("k", sample_reading, 1)
        assert cache.get("k", 1) == sample_reading

    def test_missing_key(self, cache):
        assert cache.get("nope", 1) is None

    def test_valid_until_ttl(self, cache, clock, sample_reading):
        cache.put("k", sample_reading, 1)
        clock.advance(TTL_S)
        assert cache.get("k", 1) == sample_reading

    def test_expired_after_ttl(self, cache, clock, sample_reading):
        cache.put("k", sample_reading, 1)
        clock.advance(TTL_S + 1)
        assert cache.get("k", 1) is None

    def test_version_mismatch(self, cache, sample_reading):
        cache.put("k", sample_reading, 1)
        assert cache.get("k", 2) is None
        # La entrada no se borra: sigue válida para su versión
        assert cache.get("k", 1) == sample_reading

    def test_put_replaces_entry(self, cache, clock, sample_reading):
        from dataclasses import replace
        cache.put("k", sample_reading, 1)
        clock.advance(60)
        newer = replace(sample_reading, pm25_raw=55.0, computed_at=clock())
        cache.put("k", newer, 1)
        assert cache.get("k", 1) == newer

    def test_refresh_restarts_ttl(self, cache, clock, sample_reading):
        cache.put("k", sample_reading, 1)
        clock.advance(TTL_S - 10)
        cache.put("k", sample_reading, 1)
        clock.advance(TTL_S - 10)
        assert cache.get("k", 1) == sample_reading

    def test_keys_are_independent(self, cache, sample_reading):
        cache.put("a", sample_reading, 1)
        assert cache.get("b", 1) is None

    def test_undefined_aqi_survives(self, cache, sample_reading):
        from dataclasses import replace
        reading = replace(sample_reading, aqi=None)
        cache.put("k", reading, 1)
        assert cache.get("k", 1).aqi is None

    def test_corrupt_entry_is_miss(self, clock):
        store = MemoryStore()
        store.set("k", "{not json")
        cache = ReadingCache(store, TTL_S, clock=clock)
        assert cache.get("k", 1) is None

    def test_entry_without_payload_is_miss(self, clock):
        store = MemoryStore()
        store.set("k", json.dumps({"stored_at": clock(), "schema_version": 1}))
        assert ReadingCache(store, TTL_S, clock=clock).get("k", 1) is None


class TestCacheDegradation:

    def test_failing_read_is_miss(self, clock, caplog):
        store = Mock()
        store.get.side_effect = CacheUnavailable("disco lleno")
        cache = ReadingCache(store, TTL_S, clock=clock)

        with caplog.at_level(logging.WARNING, logger="utils.storage"):
            assert cache.get("k", 1) is None
        assert "Caché no disponible" in caplog.text

    def test_failing_write_is_noop(self, clock, sample_reading, caplog):
        store = Mock()
        store.set.side_effect = OSError("solo lectura")
        cache = ReadingCache(store, TTL_S, clock=clock)

        with caplog.at_level(logging.WARNING, logger="utils.storage"):
            cache.put("k", sample_reading, 1)
        assert "Caché no disponible" in caplog.text


class TestJsonFileStore:

    def test_persists_across_instances(self, tmp_path, clock, sample_reading):
        path = str(tmp_path / "cache.json")
        ReadingCache(JsonFileStore(path), TTL_S, clock=clock).put("k", sample_reading, 1)

        reopened = ReadingCache(JsonFileStore(path), TTL_S, clock=clock)
        assert reopened.get("k", 1) == sample_reading

    def test_missing_file_is_empty(self, tmp_path):
        assert JsonFileStore(str(tmp_path / "none.json")).get("k") is None

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "cache.json"
        JsonFileStore(str(path)).set("k", "v")
        assert json.loads(path.read_text(encoding="utf-8")) == {"k": "v"}

    def test_no_temp_files_left(self, tmp_path):
        store = JsonFileStore(str(tmp_path / "cache.json"))
        store.set("a", "1")
        store.set("b", "2")
        assert sorted(p.name for p in tmp_path.iterdir()) == ["cache.json"]
        assert store.get("a") == "1" and store.get("b") == "2"

    def test_corrupt_file_raises_unavailable(self, tmp_path):
        path = tmp_path / "cache.json"
        path.write_text("{roto", encoding="utf-8")
        with pytest.raises(CacheUnavailable):
            JsonFileStore(str(path)).get("k")

    def test_unwritable_location_raises_unavailable(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(CacheUnavailable):
            JsonFileStore(str(blocker / "cache.json")).set("k", "v")

    def test_reading_cache_tolerates_corrupt_file(self, tmp_path, clock, sample_reading):
        path = tmp_path / "cache.json"
        path.write_text("{roto", encoding="utf-8")
        cache = ReadingCache(JsonFileStore(str(path)), TTL_S, clock=clock)

        assert cache.get("k", 1) is None
        cache.put("k", sample_reading, 1)
        assert cache.get("k", 1) == sample_reading

    def test_write_replaces_corrupt_file(self, tmp_path, caplog):
        path = tmp_path / "cache.json"
        path.write_text("{truncated", encoding="utf-8")
        store = JsonFileStore(str(path))

        with caplog.at_level(logging.WARNING):
            store.set("k", "v")

        assert store.get("k") == "v"
        assert json.loads(path.read_text(encoding="utf-8")) == {"k": "v"}
        assert "se reescribe" in caplog.text

    def test_reported_distance_survives(self, tmp_path, clock, sample_reading):
        from dataclasses import replace
        reading = replace(sample_reading, reported_distance_km=9.9)
        cache = ReadingCache(JsonFileStore(str(tmp_path / "cache.json")), TTL_S, clock=clock)
        cache.put("k", reading, 1)
        assert cache.get("k", 1).reported_distance_km == 9.9
