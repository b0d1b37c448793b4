"""Tests for infrastructure/config/loader.py."""

from pathlib import Path

import pytest

from layerguard.domain.exceptions.validation import ConfigurationError
from layerguard.domain.model.configuration import DEFAULT_LAYER_PATTERNS, LinterConfig, RuleConfig
from layerguard.domain.model.enums import Layer, Severity
from layerguard.infrastructure.config.loader import (
    config_from_mapping,
    discover_config,
    find_config_file,
    load_config,
)

PYPROJECT = """\
[project]
name = "my_app"

[tool.layerguard]
min_severity = "normal"
workers = 4
excluded_apps = ["my_tools"]

[tool.layerguard.rules]
no_logger_in_domain = false

[tool.layerguard.rules.use_case_adoption]
severity = "low"
with_clause_threshold = 6
"""


class TestConfigFromMapping:
    """Tests for config_from_mapping."""

    def test_empty_section_gives_defaults(self) -> None:
        assert config_from_mapping({}) == LinterConfig()

    def test_top_level_values(self) -> None:
        config = config_from_mapping(
            {
                "include": ["apps/**/*.ex"],
                "exclude": ["apps/legacy/**"],
                "min_severity": "high",
                "workers": 2,
                "excluded_apps": ["my_tools"],
            }
        )

        assert config.include == ("apps/**/*.ex",)
        assert config.exclude == ("apps/legacy/**",)
        assert config.min_severity is Severity.HIGH
        assert config.workers == 2
        assert config.excluded_apps == frozenset({"my_tools"})

    def test_rule_table(self) -> None:
        config = config_from_mapping(
            {"rules": {"use_case_adoption": {"severity": "low", "exit_status": 3, "with_clause_threshold": 6}}}
        )

        rule = config.rule("use_case_adoption")
        assert rule.enabled
        assert rule.severity is Severity.LOW
        assert rule.exit_status == 3
        assert dict(rule.params) == {"with_clause_threshold": 6}

    def test_rule_boolean_shorthand(self) -> None:
        config = config_from_mapping({"rules": {"no_logger_in_domain": False}})

        assert config.rule("no_logger_in_domain") == RuleConfig(enabled=False)

    def test_layer_override_keeps_order(self) -> None:
        config = config_from_mapping({"layers": {"domain": ["/core/"]}})

        assert [layer for layer, _ in config.layer_patterns] == [layer for layer, _ in DEFAULT_LAYER_PATTERNS]
        assert dict(config.layer_patterns)[Layer.DOMAIN] == ("/core/",)
        assert dict(config.layer_patterns)[Layer.INTERFACE] == dict(DEFAULT_LAYER_PATTERNS)[Layer.INTERFACE]

    @pytest.mark.parametrize(
        ("section", "subject"),
        [
            ({"colour": "red"}, "tool.layerguard"),
            ({"include": "lib/**"}, "include"),
            ({"workers": "4"}, "workers"),
            ({"workers": True}, "workers"),
            ({"workers": 0}, "workers"),
            ({"min_severity": "critical"}, "min_severity"),
            ({"layers": {"persistence": ["/repo/"]}}, "layers"),
            ({"layers": {"unknown": ["/misc/"]}}, "layers"),
            ({"layers": {"domain": ["(unclosed"]}}, "layer_patterns.domain"),
            ({"rules": []}, "rules"),
            ({"rules": {"no_repo_in_domain": "off"}}, "no_repo_in_domain"),
            ({"rules": {"no_repo_in_domain": {"enabled": "no"}}}, "no_repo_in_domain"),
            ({"rules": {"no_repo_in_domain": {"exit_status": "2"}}}, "no_repo_in_domain"),
            ({"rules": {"no_repo_in_domain": {"exit_status": 300}}}, "exit_status"),
            ({"rules": {"no_repo_in_domain": {"severity": "urgent"}}}, "no_repo_in_domain.severity"),
        ],
    )
    def test_invalid_values(self, section: dict, subject: str) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            config_from_mapping(section)

        assert exc_info.value.subject == subject


class TestLoadConfig:
    """Tests for reading TOML files."""

    def test_pyproject_section(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text(PYPROJECT, encoding="utf-8")

        config = load_config(path)

        assert config.min_severity is Severity.NORMAL
        assert config.workers == 4
        assert config.rule("use_case_adoption").param("with_clause_threshold", 5) == 6
        assert not config.rule("no_logger_in_domain").enabled

    def test_layerguard_toml_top_level(self, tmp_path: Path) -> None:
        path = tmp_path / "layerguard.toml"
        path.write_text('min_severity = "higher"\n', encoding="utf-8")

        assert load_config(path).min_severity is Severity.HIGHER

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "layerguard.toml"
        path.write_text("workers = = 4\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="invalid TOML"):
            load_config(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="cannot read"):
            load_config(tmp_path / "layerguard.toml")


class TestFindConfigFile:
    """Tests for config discovery."""

    def test_walks_up_from_start(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(PYPROJECT, encoding="utf-8")
        nested = tmp_path / "apps" / "core" / "lib"
        nested.mkdir(parents=True)

        assert find_config_file(nested) == tmp_path / "pyproject.toml"

    def test_layerguard_toml_wins(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(PYPROJECT, encoding="utf-8")
        (tmp_path / "layerguard.toml").write_text("", encoding="utf-8")

        assert find_config_file(tmp_path) == tmp_path / "layerguard.toml"

    def test_pyproject_without_section_skipped(self, tmp_path: Path) -> None:
        (tmp_path / "layerguard.toml").write_text("workers = 2\n", encoding="utf-8")
        project = tmp_path / "project"
        project.mkdir()
        (project / "pyproject.toml").write_text('[project]\nname = "x"\n', encoding="utf-8")

        assert find_config_file(project) == tmp_path / "layerguard.toml"

    def test_start_may_be_a_file(self, tmp_path: Path) -> None:
        (tmp_path / "layerguard.toml").write_text("", encoding="utf-8")
        source = tmp_path / "mix.exs"
        source.write_text("", encoding="utf-8")

        assert find_config_file(source) == tmp_path / "layerguard.toml"

    def test_discover_defaults_without_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("layerguard.infrastructure.config.loader.find_config_file", lambda start: None)

        assert discover_config(tmp_path) == LinterConfig()

    def test_discover_loads_found_file(self, tmp_path: Path) -> None:
        (tmp_path / "layerguard.toml").write_text("workers = 3\n", encoding="utf-8")

        assert discover_config(tmp_path).workers == 3
