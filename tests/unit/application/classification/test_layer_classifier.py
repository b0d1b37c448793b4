"""Tests for classification/layer_classifier.py."""

import pytest

from layerguard.application.classification.layer_classifier import LayerClassifier
from layerguard.domain.exceptions.validation import ConfigurationError
from layerguard.domain.model.configuration import LinterConfig
from layerguard.domain.model.enums import Layer


class TestLayerClassifierDefaults:
    """Tests for classification with default patterns."""

    @pytest.mark.parametrize(
        ("path", "module_name", "expected"),
        [
            ("lib/my_app/domain/entities/user.ex", "MyApp.Domain.Entities.User", Layer.DOMAIN),
            ("lib/my_app/domain.ex", "MyApp.Domain", Layer.DOMAIN),
            ("lib/my_app/accounts/application/use_cases/register.ex", "MyApp.Accounts.UseCases.Register",
             Layer.APPLICATION),
            ("lib/my_app/application_layer.ex", "MyApp.ApplicationLayer", Layer.APPLICATION),
            ("lib/my_app/infrastructure/repo.ex", "MyApp.Infrastructure.Repo", Layer.INFRASTRUCTURE),
            ("lib/my_app/infrastructure.ex", "MyApp.Infrastructure", Layer.INFRASTRUCTURE),
            ("lib/my_app_web/live/page_live.ex", "MyAppWeb.PageLive", Layer.INTERFACE),
            ("lib/mix/tasks/my_app.seed.ex", "Mix.Tasks.MyApp.Seed", Layer.INTERFACE),
        ],
    )
    def test_classify(self, path: str, module_name: str, expected: Layer) -> None:
        assert LayerClassifier().classify(path, module_name) is expected

    def test_interface_wins_over_domain(self) -> None:
        """Web files with a /domain/ directory stay in the Interface layer."""
        layer = LayerClassifier().classify("lib/my_app_web/domain/helpers.ex", "MyAppWeb.Domain.Helpers")
        assert layer is Layer.INTERFACE

    def test_runtime_application_module_is_not_application_layer(self) -> None:
        """The OTP `MyApp.Application` lifecycle module is not a use-case layer module."""
        layer = LayerClassifier().classify("lib/my_app/application.ex", "MyApp.Application")
        assert layer is Layer.UNKNOWN

    def test_unmatched_is_unknown(self) -> None:
        assert LayerClassifier().classify("lib/my_app/accounts.ex", "MyApp.Accounts") is Layer.UNKNOWN

    def test_missing_module_name(self) -> None:
        """Classification is total: no name still yields a layer."""
        assert LayerClassifier().classify("config/config.exs", None) is Layer.UNKNOWN
        assert LayerClassifier().classify("lib/my_app/domain/x.ex") is Layer.DOMAIN

    def test_deterministic(self) -> None:
        classifier = LayerClassifier()
        first = classifier.classify("lib/my_app/domain/user.ex", "MyApp.Domain.User")
        second = classifier.classify("lib/my_app/domain/user.ex", "MyApp.Domain.User")
        assert first is second


class TestLayerClassifierConfigured:
    """Tests for custom pattern groups."""

    def test_first_group_wins(self) -> None:
        classifier = LayerClassifier(
            (
                (Layer.APPLICATION, (r"/core/",)),
                (Layer.DOMAIN, (r"/core/",)),
            )
        )
        assert classifier.classify("lib/app/core/x.ex") is Layer.APPLICATION

    def test_from_config(self) -> None:
        config = LinterConfig(layer_patterns=((Layer.DOMAIN, (r"/entities/",)),))
        classifier = LayerClassifier.from_config(config)

        assert classifier.classify("lib/app/entities/user.ex") is Layer.DOMAIN
        assert classifier.classify("lib/app/domain/user.ex") is Layer.UNKNOWN

    def test_bad_pattern_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="layer_patterns.domain"):
            LayerClassifier(((Layer.DOMAIN, ("[",)),))
