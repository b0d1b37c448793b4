"""Tests for presentation/cli.py."""

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from layerguard import __version__
from layerguard.presentation.cli import USAGE_ERROR, build_parser, configure_logging, main

CLEAN_SOURCE = "defmodule MyApp.Domain.Entities.User do\nend\n"
ENTITY_SOURCE = """\
defmodule MyApp.Domain.Entities.User do
  def save(user), do: Repo.insert(user)
end
"""


@pytest.fixture(autouse=True)
def restore_package_logger() -> Iterator[None]:
    """main() reconfigures the package logger; undo after each test."""
    logger = logging.getLogger("layerguard")
    saved = (logger.handlers[:], logger.level, logger.propagate)
    yield
    logger.handlers[:], logger.level, logger.propagate = saved


def make_project(root: Path, files: dict[str, str], config: str = "") -> Path:
    """Write files and a layerguard.toml below root."""
    (root / "layerguard.toml").write_text(config, encoding="utf-8")
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


class TestBuildParser:
    """Tests for argument parsing."""

    def test_defaults(self) -> None:
        args = build_parser().parse_args([])

        assert args.path == "."
        assert args.format == "text"
        assert args.config is None
        assert args.min_severity is None
        assert args.workers is None
        assert args.verbose is False

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["--version"])

        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestMain:
    """Tests for main()."""

    def test_clean_project(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        root = make_project(tmp_path, {"lib/my_app/domain/entities/user.ex": CLEAN_SOURCE})

        status = main([str(root)])

        assert status == 0
        assert "Result: PASSED" in capsys.readouterr().out

    def test_issues_set_exit_status(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        root = make_project(tmp_path, {"lib/my_app/domain/entities/user.ex": ENTITY_SOURCE})

        status = main([str(root), "--format", "json"])

        data = json.loads(capsys.readouterr().out)
        assert status == data["exit_status"]
        assert status != 0
        assert "no_repo_in_domain" in data["summary"]["by_rule"]

    def test_min_severity_override(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        root = make_project(tmp_path, {"lib/my_app/domain/entities/user.ex": ENTITY_SOURCE})

        status = main([str(root), "--min-severity", "higher", "--workers", "2"])

        assert status == 0
        assert "no_repo_in_domain" in capsys.readouterr().out

    def test_rich_format(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        root = make_project(tmp_path, {"lib/my_app/domain/entities/user.ex": ENTITY_SOURCE})

        main([str(root), "--format", "rich"])

        assert "ARCHITECTURE LINT" in capsys.readouterr().out

    def test_explicit_config_file(self, tmp_path: Path) -> None:
        root = make_project(tmp_path, {"lib/my_app/domain/entities/user.ex": ENTITY_SOURCE})
        config = tmp_path / "strict.toml"
        config.write_text('min_severity = "higher"\n', encoding="utf-8")

        assert main([str(root), "--config", str(config), "--format", "json"]) == 0

    def test_bad_config_is_usage_error(self, tmp_path: Path) -> None:
        """Configuration errors are logged and exit 1 before any file is read."""
        root = make_project(tmp_path, {}, config="workers = 0\n")

        assert main([str(root)]) == USAGE_ERROR

    def test_missing_directory_exits(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([str(tmp_path / "missing")])

        assert exc_info.value.code == 2


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_levels(self) -> None:
        logger = logging.getLogger("layerguard")

        configure_logging(verbose=True)
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

        configure_logging(verbose=False)
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1
