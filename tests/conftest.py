"""Shared fixtures for stylectl tests."""

from pathlib import Path

import pytest

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run every test in an empty directory with an empty home.

    Keeps configuration discovery from picking up a developer's own
    ``.stylectl.yaml``.
    """
    home = tmp_path / "home"
    home.mkdir()
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    return work


@pytest.fixture
def data_dir() -> Path:
    """Directory holding fixture sources and configs."""
    return DATA_DIR


@pytest.fixture
def cli_data(data_dir) -> Path:
    return data_dir / "cli"


@pytest.fixture
def write_source(isolated_cwd):
    """Write a source file below the working directory and return its path."""
    def _write(name: str, text: str) -> Path:
        path = isolated_cwd / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
        return path
    return _write
