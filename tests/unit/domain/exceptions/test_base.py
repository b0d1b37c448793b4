"""Tests for domain/exceptions/base.py."""

from layerguard.domain.exceptions import (
    BoundaryViolationError,
    ConfigurationError,
    LayerGuardError,
    SourceParseError,
)


class TestLayerGuardError:
    """Tests for LayerGuardError base exception."""

    def test_is_exception(self) -> None:
        """Root exception derives from Exception."""
        assert issubclass(LayerGuardError, Exception)

    def test_all_domain_errors_inherit(self) -> None:
        """Every domain exception is catchable as LayerGuardError."""
        for error in (SourceParseError, ConfigurationError, BoundaryViolationError):
            assert issubclass(error, LayerGuardError)

    def test_message(self) -> None:
        """Message is kept."""
        assert str(LayerGuardError("boom")) == "boom"
