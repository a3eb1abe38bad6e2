# Overview: Pytest coverage for request field coercion helpers.

import pytest

from ebucks.validation import MAX_DB_INT, ValidationError, to_int, to_text


class TestToInt:

    def test_accepts_ints_and_digit_strings(self):
        assert to_int(7, "id") == 7
        assert to_int(" 42 ", "id") == 42
        assert to_int(MAX_DB_INT, "id") == MAX_DB_INT

    def test_rejects_values_past_the_column_range(self):
        with pytest.raises(ValidationError):
            to_int(MAX_DB_INT + 1, "id")
        with pytest.raises(ValidationError):
            to_int(10**20, "id")
        with pytest.raises(ValidationError):
            to_int(str(10**20), "id")
        with pytest.raises(ValidationError):
            to_int("9" * 5000, "id")

    def test_explicit_bounds(self):
        assert to_int(5, "quantity", minimum=1, maximum=5) == 5
        with pytest.raises(ValidationError):
            to_int(6, "quantity", minimum=1, maximum=5)
        with pytest.raises(ValidationError):
            to_int(0, "quantity", minimum=1, maximum=5)

    def test_rejects_non_integers(self):
        for value in (1.5, "1e3", True, None, [1]):
            with pytest.raises(ValidationError):
                to_int(value, "id")


class TestToText:

    def test_strips_and_requires(self):
        assert to_text("  Ada ", "name") == "Ada"
        with pytest.raises(ValidationError):
            to_text("   ", "name")
        assert to_text(None, "barcode", required=False) is None

    def test_rejects_non_strings(self):
        for value in (123, {"x": 1}, ["Ada"], False):
            with pytest.raises(ValidationError):
                to_text(value, "name")

    def test_max_length(self):
        with pytest.raises(ValidationError):
            to_text("x" * 11, "name", max_length=10)
