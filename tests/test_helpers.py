"""
Tests de las conversiones tolerantes de utils.helpers.
"""
import pytest

from utils.helpers import es_datetime_from_epoch, is_nan, safe_float, safe_int


class TestSafeConversions:

    @pytest.mark.parametrize("value,expected", [
        ("28.4", 28.4),
        (12, 12.0),
        (0, 0.0),
    ])
    def test_safe_float(self, value, expected):
        assert safe_float(value) == expected

    @pytest.mark.parametrize("value", [None, "", "n/a", float("nan"), [1]])
    def test_safe_float_missing(self, value):
        assert safe_float(value) is None

    def test_safe_int_rounds(self):
        assert safe_int("84.6") == 85
        assert safe_int(None) is None

    def test_is_nan(self):
        assert is_nan(float("nan"))
        assert is_nan(None)
        assert not is_nan(0.0)

    def test_epoch_format(self):
        assert len(es_datetime_from_epoch(1_792_224_000)) == len("17-10-2026 10:00:00")
