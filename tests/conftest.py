"""Shared test fixtures for rulecast."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Provide an empty project root."""
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def initialized_project(project: Path) -> Path:
    """Provide a project with conf.yml and two rule documents."""
    dot = project / ".rulecast"
    rules = dot / "rules"
    rules.mkdir(parents=True)

    config = {
        "version": "1",
        "exporters": ["agents", "cursor", "copilot"],
        "sources": [{"type": "local", "path": ".rulecast/rules"}],
    }
    (dot / "conf.yml").write_text(yaml.dump(config, default_flow_style=False))

    (rules / "b-testing.md").write_text("## Testing\n\nWrite tests first.\n")
    (rules / "a-style.md").write_text("# Style\n\nUse four spaces.\n")
    return project


@pytest.fixture
def store(tmp_path: Path) -> Path:
    """Provide a blueprint store directory with one blueprint per visibility."""
    store_dir = tmp_path / "store"
    store_dir.mkdir()

    blueprints = {
        "bp_team": {
            "name": "Team Rules", "visibility": "TEAM", "type": "AGENTS_MD",
            "description": "Shared team conventions.",
            "content": "# Team Rules\n\nReview every change.\n",
        },
        "bp_market": {
            "name": "Python Starter", "visibility": "PUBLIC", "type": "CLAUDE_MD",
            "content": "# Python\n\nUse type hints.\n", "version": 3,
        },
        "bp_empty": {
            "name": "Empty", "visibility": "PRIVATE", "content": "",
        },
    }
    for bp_id, data in blueprints.items():
        (store_dir / f"{bp_id}.yaml").write_text(
            yaml.dump({"id": bp_id, **data}, default_flow_style=False, sort_keys=False)
        )
    return store_dir
