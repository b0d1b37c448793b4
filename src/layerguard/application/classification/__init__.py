"""Layer classification."""

from layerguard.application.classification.layer_classifier import LayerClassifier

__all__ = ["LayerClassifier"]
