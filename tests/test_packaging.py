"""Tests for the project metadata in pyproject.toml."""

from __future__ import annotations

import tomllib
from pathlib import Path

PYPROJECT = Path(__file__).resolve().parents[1] / "pyproject.toml"


class TestProjectMetadata:
    """Tests for the [project] table."""

    def test_design_notes_not_used_as_readme(self):
        project = tomllib.loads(PYPROJECT.read_text())["project"]

        assert project.get("readme") != "DESIGN.md"
        assert project["name"] == "linkoftrust"

    def test_dependencies_declared(self):
        data = tomllib.loads(PYPROJECT.read_text())

        names = [dep.split(">")[0] for dep in data["project"]["dependencies"]]
        assert names == ["aiohttp", "base58"]
        assert "pytest-asyncio>=0.23" in data["project"]["optional-dependencies"]["test"]
