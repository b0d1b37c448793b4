"""Tests for domain/exceptions/parsing.py."""

import pytest

from layerguard.domain.exceptions.parsing import SourceParseError


class TestSourceParseError:
    """Tests for SourceParseError exception."""

    def test_attributes(self) -> None:
        """Path, reason and line are stored."""
        err = SourceParseError("lib/my_app/user.ex", "unexpected 'end'", 12)

        assert err.path == "lib/my_app/user.ex"
        assert err.reason == "unexpected 'end'"
        assert err.line == 12

    def test_message_format(self) -> None:
        """Message names file, line and reason."""
        err = SourceParseError("lib/a.ex", "unterminated string", 3)

        assert str(err) == "Failed to parse lib/a.ex:3: unterminated string"

    def test_line_defaults_to_one(self) -> None:
        """Line defaults to the first line."""
        assert SourceParseError("lib/a.ex", "bad").line == 1


class TestSourceParseErrorFailFirst:
    """Tests for FAIL-FIRST validation in SourceParseError."""

    def test_none_path_raises(self) -> None:
        """None path is rejected."""
        with pytest.raises(TypeError, match="path must not be None"):
            SourceParseError(None, "bad")  # type: ignore[arg-type]

    def test_empty_reason_raises(self) -> None:
        """Empty reason is rejected."""
        with pytest.raises(ValueError, match="reason must be non-empty"):
            SourceParseError("lib/a.ex", "")

    def test_line_zero_raises(self) -> None:
        """Lines are 1-based."""
        with pytest.raises(ValueError, match="line must be >= 1"):
            SourceParseError("lib/a.ex", "bad", 0)
