from __future__ import annotations

import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


@pytest.fixture()
def make_crate(tmp_path: Path, monkeypatch):
    """Creates a crate layout under `tmp_path` and makes it the working directory."""

    def _make_crate(
        manifest: str = '[package]\nname = "mycrate"\nversion = "0.1.0"\n',
        files: dict[str, str] | None = None,
    ) -> Path:
        (tmp_path / "Cargo.toml").write_text(textwrap.dedent(manifest).lstrip(), encoding="utf-8")
        for name, content in (files or {}).items():
            path = tmp_path / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content.encode("utf-8"))
        monkeypatch.chdir(tmp_path)
        return tmp_path

    return _make_crate
