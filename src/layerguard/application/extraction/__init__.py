"""Boundary declaration extraction."""

from layerguard.application.extraction.dependency_extractor import DependencyExtractor

__all__ = ["DependencyExtractor"]
