"""
Shared test configuration.
Fixtures build small template trees under a temporary directory.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from include_expander.config import ENCODING_ENV, TEMPLATE_ENV


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep settings and .env lookup independent of the developer's shell."""
    for name in (TEMPLATE_ENV, ENCODING_ENV):
        # setenv first so the variable is removed again after the test even
        # when a .env file loaded it
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def write_tree(tmp_path: Path):
    """Return a helper writing ``{relative path: content}`` below a root dir."""

    def _write(files: dict[str, str], root: str = "root") -> Path:
        base = tmp_path / root
        base.mkdir(parents=True, exist_ok=True)
        for name, content in files.items():
            path = base / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content.encode("utf-8"))
        return base

    return _write
