"""Tests for the filesystem adapters."""

from pathlib import Path

import pytest

from layerguard.infrastructure.adapters.local_file_system import LocalFileSystem
from layerguard.infrastructure.adapters.memory_file_system import MemoryFileSystem


class TestMemoryFileSystem:
    """Tests for MemoryFileSystem."""

    def test_known_file_exists(self) -> None:
        fs = MemoryFileSystem(["lib/my_app/accounts/queries/user_queries.ex"])

        assert fs.exists("lib/my_app/accounts/queries/user_queries.ex")

    def test_parent_directories_exist(self) -> None:
        fs = MemoryFileSystem(["lib/my_app/accounts/queries/user_queries.ex"])

        assert fs.exists("lib/my_app/accounts/queries")
        assert fs.exists("lib/my_app/accounts/queries/")
        assert fs.exists("lib")

    def test_unknown_paths(self) -> None:
        fs = MemoryFileSystem(["lib/my_app/accounts.ex"])

        assert not fs.exists("lib/my_app/accounts")
        assert not fs.exists("lib/my_app/acc")

    def test_empty(self) -> None:
        assert not MemoryFileSystem().exists("lib")


class TestLocalFileSystem:
    """Tests for LocalFileSystem."""

    def test_probes_relative_to_root(self, tmp_path: Path) -> None:
        (tmp_path / "lib" / "my_app").mkdir(parents=True)
        (tmp_path / "lib" / "my_app" / "domain.ex").write_text("", encoding="utf-8")
        fs = LocalFileSystem(tmp_path)

        assert fs.root == tmp_path
        assert fs.exists("lib/my_app/domain.ex")
        assert fs.exists("lib/my_app")
        assert not fs.exists("lib/my_app/infrastructure.ex")

    def test_none_root_raises(self) -> None:
        with pytest.raises(TypeError, match="root must not be None"):
            LocalFileSystem(None)  # type: ignore[arg-type]
