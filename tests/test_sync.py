"""Tests for the sync engine."""

from __future__ import annotations

from pathlib import Path

import pytest

from rulecast.config import save_project_config
from rulecast.errors import ConfigMissing
from rulecast.models import ProjectConfig
from rulecast.sync import SyncEngine


class TestPlan:
    def test_resolves_targets_and_rules(self, initialized_project: Path):
        plan = SyncEngine(initialized_project).plan()
        assert [a.id for a in plan.targets] == ["agents", "cursor", "copilot"]
        assert plan.rule_files == ["a-style.md", "b-testing.md"]
        assert plan.has_rules

    def test_unknown_exporters_set_aside(self, initialized_project: Path):
        config = ProjectConfig(exporters=["claude", "not-a-tool"])
        plan = SyncEngine(initialized_project, config=config).plan()
        assert [a.id for a in plan.targets] == ["claude"]
        assert plan.unknown == ["not-a-tool"]

    def test_requires_config(self, project: Path):
        with pytest.raises(ConfigMissing):
            SyncEngine(project)


class TestRun:
    def test_writes_every_target(self, initialized_project: Path):
        report = SyncEngine(initialized_project).run()

        assert report.ok
        assert report.written == [
            "AGENTS.md",
            ".cursor/rules/rulecast-rules.mdc",
            ".github/copilot-instructions.md",
        ]
        agents_md = (initialized_project / "AGENTS.md").read_text()
        assert agents_md.startswith("# AI Coding Rules")
        assert "Use four spaces." in agents_md
        assert "Write tests first." in agents_md

    def test_is_idempotent(self, initialized_project: Path):
        engine = SyncEngine(initialized_project)
        engine.run()
        first = (initialized_project / "AGENTS.md").read_text()
        engine.run()
        assert (initialized_project / "AGENTS.md").read_text() == first

    def test_dry_run_writes_nothing(self, initialized_project: Path):
        report = SyncEngine(initialized_project).run(dry_run=True)
        assert report.dry_run
        assert "AGENTS.md" in report.written
        assert not (initialized_project / "AGENTS.md").exists()

    def test_unknown_is_skipped(self, initialized_project: Path):
        save_project_config(initialized_project, ProjectConfig(exporters=["bogus", "claude"]))
        report = SyncEngine(initialized_project).run()
        assert report.skipped == ["bogus"]
        assert report.written == ["CLAUDE.md"]
        assert report.ok

    def test_failure_does_not_stop_other_targets(self, initialized_project: Path):
        (initialized_project / ".cursor").write_text("a file, not a directory")

        report = SyncEngine(initialized_project).run()

        assert not report.ok
        assert len(report.errors) == 1
        assert report.errors[0].startswith("cursor: ")
        assert report.written == ["AGENTS.md", ".github/copilot-instructions.md"]
        assert (initialized_project / ".github" / "copilot-instructions.md").exists()

    def test_no_rules_skips_all(self, project: Path):
        config = ProjectConfig(exporters=["claude", "cursor"])
        report = SyncEngine(project, config=config).run()
        assert report.written == []
        assert report.skipped == ["claude", "cursor"]
        assert not (project / "CLAUDE.md").exists()
