"""Base exceptions for layerguard domain."""


class LayerGuardError(Exception):
    """Root exception for all layerguard errors.

    All domain exceptions inherit from this.
    Allows catching all layerguard-specific errors.
    """
