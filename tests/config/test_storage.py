from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest  # noqa: TC002

from catalogsync.config import storage


def test_data_dir_prefers_explicit_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("CATALOGSYNC_DATA_DIR", str(tmp_path / "custom-data"))

    assert storage.catalog_data_dir() == (tmp_path / "custom-data").resolve()


def test_data_dir_falls_back_to_xdg_data_home(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("CATALOGSYNC_DATA_DIR", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))

    assert storage.catalog_data_dir() == (tmp_path / "xdg" / "catalogsync").resolve()


def test_database_config_uses_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "postgresql+psycopg://catalog@db/catalog")

    assert storage.get_database_config().uri == "postgresql+psycopg://catalog@db/catalog"


def test_database_config_creates_sqlite_file_location(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("DATABASE_URI", "  ")
    monkeypatch.setenv("CATALOGSYNC_DATA_DIR", str(tmp_path / "data-dir"))

    uri = storage.get_database_config().uri

    expected_path = (tmp_path / "data-dir" / storage.DEFAULT_DB_FILENAME).resolve()
    assert uri == f"sqlite+pysqlite:///{expected_path}"
    assert expected_path.parent.is_dir()
