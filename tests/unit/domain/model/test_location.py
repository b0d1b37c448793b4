"""Tests for domain/model/location.py."""

import pytest

from layerguard.domain.model.location import Location


class TestLocationCreation:
    """Tests for valid Location creation."""

    def test_minimal_valid(self) -> None:
        loc = Location(file="lib/my_app.ex", line=1)
        assert loc.file == "lib/my_app.ex"
        assert loc.line == 1

    def test_is_frozen(self) -> None:
        loc = Location(file="lib/my_app.ex", line=1)
        with pytest.raises(AttributeError):
            loc.line = 2  # type: ignore[misc]

    def test_str_format(self) -> None:
        assert str(Location(file="lib/my_app/accounts.ex", line=42)) == "lib/my_app/accounts.ex:42"


class TestLocationFailFirst:
    """Tests for FAIL-FIRST validation in Location."""

    def test_line_zero_raises(self) -> None:
        with pytest.raises(ValueError, match="line must be > 0"):
            Location(file="lib/a.ex", line=0)

    def test_none_file_raises(self) -> None:
        with pytest.raises(TypeError, match="file must not be None"):
            Location(file=None, line=1)  # type: ignore[arg-type]
