"""Tests for discovery/files.py."""

from pathlib import Path

import pytest

from layerguard.application.discovery.files import discover_sources, matches, read_sources


def write(root: Path, relative: str, content: str = "defmodule X do\nend\n") -> None:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


class TestMatches:
    """Tests for glob matching on relative paths."""

    @pytest.mark.parametrize(
        ("path", "pattern", "expected"),
        [
            ("lib/my_app/accounts.ex", "**/*.ex", True),
            ("mix.exs", "**/*.exs", True),
            ("deps/ecto/lib/ecto.ex", "deps/**", True),
            ("apps/core/deps/x.ex", "**/deps/**", True),
            ("lib/my_app/accounts.ex", "**/*.exs", False),
        ],
    )
    def test_matches(self, path: str, pattern: str, expected: bool) -> None:
        assert matches(path, pattern) is expected


class TestDiscoverSources:
    """Tests for discover_sources."""

    def test_finds_elixir_files_sorted(self, tmp_path: Path) -> None:
        write(tmp_path, "mix.exs")
        write(tmp_path, "lib/my_app/domain/entities/user.ex")
        write(tmp_path, "lib/my_app/accounts.ex")
        write(tmp_path, "README.md", "# readme")

        paths = discover_sources(tmp_path)

        assert paths == ("lib/my_app/accounts.ex", "lib/my_app/domain/entities/user.ex", "mix.exs")

    def test_default_excludes(self, tmp_path: Path) -> None:
        write(tmp_path, "lib/my_app.ex")
        write(tmp_path, "deps/ecto/lib/ecto.ex")
        write(tmp_path, "_build/dev/lib/my_app.ex")
        write(tmp_path, "apps/core/deps/jason/lib/jason.ex")

        assert discover_sources(tmp_path) == ("lib/my_app.ex",)

    def test_custom_include_and_exclude(self, tmp_path: Path) -> None:
        write(tmp_path, "lib/my_app.ex")
        write(tmp_path, "test/my_app_test.exs")

        paths = discover_sources(tmp_path, include=("**/*.ex", "**/*.exs"), exclude=("test/**",))

        assert paths == ("lib/my_app.ex",)

    def test_root_must_be_directory(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="root must be a directory"):
            discover_sources(tmp_path / "missing")


class TestReadSources:
    """Tests for read_sources."""

    def test_reads_in_order(self, tmp_path: Path) -> None:
        write(tmp_path, "b.ex", "b")
        write(tmp_path, "a.ex", "a")

        sources = read_sources(tmp_path, ["b.ex", "a.ex"])

        assert list(sources.items()) == [("b.ex", "b"), ("a.ex", "a")]

    def test_undecodable_bytes_replaced(self, tmp_path: Path) -> None:
        (tmp_path / "bad.ex").write_bytes(b"defmodule X do\n  @x \xff\nend\n")

        sources = read_sources(tmp_path, ["bad.ex"])

        assert "�" in sources["bad.ex"]
