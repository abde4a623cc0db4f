"""CLI tests for the rulecast commands.

Uses Click's CliRunner against temporary projects and a temporary
blueprint store.
"""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from click.testing import CliRunner

from rulecast.cli import main
from rulecast.config import load_project_config
from rulecast.tracker import BlueprintTracker


def _run(*args, input=None):
    return CliRunner().invoke(main, list(args), input=input)


class TestTopLevel:
    def test_help(self):
        result = _run("--help")
        assert result.exit_code == 0
        assert "sync" in result.output
        assert "merge" in result.output

    def test_version(self):
        result = _run("--version")
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestInitAndSync:
    def test_init_with_agents(self, project: Path):
        result = _run("init", "--root", str(project), "-a", "claude", "-a", "cursor")
        assert result.exit_code == 0, result.output
        assert load_project_config(project).exporters == ["claude", "cursor"]

    def test_init_twice_fails(self, project: Path):
        _run("init", "--root", str(project), "-a", "claude")
        result = _run("init", "--root", str(project), "-a", "claude")
        assert result.exit_code == 1
        assert "Already initialized" in result.output

    def test_init_unknown_agent(self, project: Path):
        result = _run("init", "--root", str(project), "-a", "bogus")
        assert result.exit_code == 1

    def test_init_recommends_popular(self, project: Path):
        result = _run("init", "--root", str(project))
        assert result.exit_code == 0, result.output
        assert len(load_project_config(project).exporters) == 2

    def test_sync_writes_targets(self, initialized_project: Path):
        result = _run("sync", "--root", str(initialized_project), "--force")
        assert result.exit_code == 0, result.output
        assert (initialized_project / "AGENTS.md").exists()
        assert (initialized_project / ".cursor" / "rules" / "rulecast-rules.mdc").exists()

    def test_sync_dry_run(self, initialized_project: Path):
        result = _run("sync", "--root", str(initialized_project), "--dry-run")
        assert result.exit_code == 0
        assert "Would write" in result.output
        assert not (initialized_project / "AGENTS.md").exists()

    def test_sync_declined(self, initialized_project: Path):
        result = _run("sync", "--root", str(initialized_project), input="n\n")
        assert result.exit_code == 0
        assert not (initialized_project / "AGENTS.md").exists()

    def test_sync_not_initialized(self, project: Path):
        result = _run("sync", "--root", str(project), "--yes")
        assert result.exit_code == 0
        assert "not initialized" in result.output

    def test_sync_reports_failures(self, initialized_project: Path):
        (initialized_project / ".cursor").write_text("blocker")
        result = _run("sync", "--root", str(initialized_project), "--yes")
        assert result.exit_code == 1
        assert (initialized_project / "AGENTS.md").exists()

    def test_sync_unreadable_rule_file(self, initialized_project: Path):
        rules_dir = initialized_project / ".rulecast" / "rules"
        (rules_dir / "c-bad.md").write_bytes(b"# X\n\xff\xfe bad\n")
        result = _run("sync", "--root", str(initialized_project), "--yes")
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert not (initialized_project / "AGENTS.md").exists()


class TestAgentsCommands:
    def test_list(self, initialized_project: Path):
        result = _run("agents", "list", "--root", str(initialized_project))
        assert result.exit_code == 0
        assert "cursor" in result.output

    def test_enable(self, initialized_project: Path):
        result = _run("agents", "enable", "claude", "--root", str(initialized_project))
        assert result.exit_code == 0
        assert "claude" in load_project_config(initialized_project).exporters

    def test_enable_unknown_suggests(self, initialized_project: Path):
        result = _run("agents", "enable", "curs", "--root", str(initialized_project))
        assert result.exit_code == 1
        assert "Did you mean" in result.output

    def test_enable_interactive_assume_yes(self, initialized_project: Path):
        result = _run("agents", "enable", "--yes", "--root", str(initialized_project))
        assert result.exit_code == 0
        assert load_project_config(initialized_project).exporters == ["cursor", "agents", "copilot"]

    def test_disable_last_agent(self, project: Path):
        _run("init", "--root", str(project), "-a", "claude")
        result = _run("agents", "disable", "claude", "--root", str(project))
        assert result.exit_code == 1
        assert load_project_config(project).exporters == ["claude"]

    def test_disable_not_enabled(self, initialized_project: Path):
        result = _run("agents", "disable", "claude", "--root", str(initialized_project))
        assert result.exit_code == 1

    def test_detect_and_enable(self, initialized_project: Path):
        (initialized_project / "CLAUDE.md").write_text("# Rules\n")
        result = _run("agents", "detect", "--enable", "--yes", "--root", str(initialized_project))
        assert result.exit_code == 0
        assert "claude" in load_project_config(initialized_project).exporters


class TestLinkCommands:
    def test_link_and_status(self, project: Path, store: Path):
        (project / "AGENTS.md").write_text("# Mine\n")
        result = _run(
            "link", "AGENTS.md", "bp_team",
            "--root", str(project), "--store", str(store), "--yes",
        )
        assert result.exit_code == 0, result.output

        row = BlueprintTracker(project).find_by_file("AGENTS.md")
        assert row.id == "bp_team"
        assert row.name == "Team Rules"
        assert row.source.value == "team"
        assert (project / "AGENTS.md").read_text() == "# Mine\n"

        status = _run("status", "--root", str(project), "--json-out")
        assert status.exit_code == 0
        data = json.loads(status.output)
        assert data[0]["file"] == "AGENTS.md"
        assert data[0]["state"] == "synced"
        assert data[0]["localModified"] is False

    def test_link_unknown_id_defaults_to_local(self, project: Path, store: Path):
        (project / "CLAUDE.md").write_text("x")
        result = _run(
            "link", "CLAUDE.md", "elsewhere",
            "--root", str(project), "--store", str(store), "--yes",
        )
        assert result.exit_code == 0, result.output
        row = BlueprintTracker(project).find_by_file("CLAUDE.md")
        assert row.name == "elsewhere"
        assert row.source.value == "local"

    def test_link_missing_file(self, project: Path, store: Path):
        result = _run(
            "link", "nope.md", "bp_team",
            "--root", str(project), "--store", str(store), "--yes",
        )
        assert result.exit_code == 1

    def test_relink_declined(self, project: Path, store: Path):
        (project / "AGENTS.md").write_text("x")
        _run("link", "AGENTS.md", "bp_team", "--root", str(project), "--store", str(store), "--yes")

        result = _run(
            "link", "AGENTS.md", "bp_market",
            "--root", str(project), "--store", str(store), input="n\n",
        )
        assert result.exit_code == 1
        assert "already linked" in result.output
        assert BlueprintTracker(project).find_by_file("AGENTS.md").id == "bp_team"

    def test_unlink(self, project: Path, store: Path):
        (project / "AGENTS.md").write_text("x")
        _run("link", "AGENTS.md", "bp_team", "--root", str(project), "--store", str(store), "--yes")

        result = _run("unlink", "AGENTS.md", "--root", str(project), "--yes")
        assert result.exit_code == 0
        assert BlueprintTracker(project).all() == []
        assert (project / "AGENTS.md").exists()

    def test_unlink_untracked(self, project: Path):
        result = _run("unlink", "AGENTS.md", "--root", str(project), "--yes")
        assert result.exit_code == 1

    def test_status_empty(self, project: Path):
        result = _run("status", "--root", str(project))
        assert result.exit_code == 0
        assert "No blueprints" in result.output


class TestBlueprintCommands:
    def test_pull_push_cycle(self, project: Path, store: Path):
        args = ["--root", str(project), "--store", str(store), "--yes"]
        result = _run("pull", "bp_team", *args)
        assert result.exit_code == 0, result.output
        assert (project / "AGENTS.md").read_text() == "# Team Rules\n\nReview every change.\n"

        (project / "AGENTS.md").write_text("# Team Rules\n\nReview every change twice.\n")
        status = json.loads(_run("status", "--root", str(project), "--json-out").output)
        assert status[0]["state"] == "modified"

        result = _run("push", "AGENTS.md", *args)
        assert result.exit_code == 0, result.output
        stored = yaml.safe_load((store / "bp_team.yaml").read_text())
        assert stored["content"].endswith("twice.\n")

        status = json.loads(_run("status", "--root", str(project), "--json-out").output)
        assert status[0]["state"] == "synced"

    def test_push_in_sync(self, project: Path, store: Path):
        args = ["--root", str(project), "--store", str(store), "--yes"]
        _run("pull", "bp_team", *args)
        result = _run("push", "AGENTS.md", *args)
        assert result.exit_code == 0
        assert "already in sync" in result.output

    def test_marketplace_push_refused(self, project: Path, store: Path):
        args = ["--root", str(project), "--store", str(store), "--yes"]
        _run("pull", "bp_market", *args)
        row = BlueprintTracker(project).find_by_file("CLAUDE.md")
        assert row.editable is False
        assert row.version == "3"

        (project / "CLAUDE.md").write_text("changed")
        result = _run("push", "CLAUDE.md", *args)
        assert result.exit_code == 1
        stored = yaml.safe_load((store / "bp_market.yaml").read_text())
        assert stored["content"] == "# Python\n\nUse type hints.\n"

    def test_pull_unknown(self, project: Path, store: Path):
        result = _run("pull", "nope", "--root", str(project), "--store", str(store), "--yes")
        assert result.exit_code == 1

    def test_pull_empty_content(self, project: Path, store: Path):
        result = _run("pull", "bp_empty", "--root", str(project), "--store", str(store), "--yes")
        assert result.exit_code == 1

    def test_pull_keeps_existing_when_declined(self, project: Path, store: Path):
        (project / "AGENTS.md").write_text("local")
        result = _run(
            "pull", "bp_team", "--root", str(project), "--store", str(store), input="n\n",
        )
        assert result.exit_code == 0
        assert (project / "AGENTS.md").read_text() == "local"
        assert BlueprintTracker(project).all() == []

    def test_diff(self, project: Path, store: Path):
        args = ["--root", str(project), "--store", str(store)]
        _run("pull", "bp_team", *args, "--yes")
        (project / "AGENTS.md").write_text("# Team Rules\n\nSomething else.\n")
        result = _run("diff", "AGENTS.md", *args)
        assert result.exit_code == 0
        assert "+Something else." in result.output

    def test_hierarchy(self, project: Path, store: Path):
        _run("pull", "bp_team", "--root", str(project), "--store", str(store), "--yes")
        result = _run(
            "hierarchy", "assign", "AGENTS.md", "mono", "--name", "Monorepo",
            "--root", str(project),
        )
        assert result.exit_code == 0
        assert BlueprintTracker(project).find_by_hierarchy("mono")

        listing = _run("hierarchy", "list", "--root", str(project))
        assert "Monorepo" in listing.output

        assert _run("hierarchy", "clear", "AGENTS.md", "--root", str(project)).exit_code == 0
        assert _run("hierarchy", "clear", "AGENTS.md", "--root", str(project)).exit_code == 1

    def test_pull_malformed_blueprint(self, project: Path, store: Path):
        (store / "bp_bad.yaml").write_text("name: [unclosed\n")
        result = _run("pull", "bp_bad", "--root", str(project), "--store", str(store), "--yes")
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert BlueprintTracker(project).all() == []

    def test_link_malformed_blueprint(self, project: Path, store: Path):
        (store / "bp_bad.yaml").write_text("name: [unclosed\n")
        (project / "AGENTS.md").write_text("x")
        result = _run(
            "link", "AGENTS.md", "bp_bad",
            "--root", str(project), "--store", str(store), "--yes",
        )
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)

    def test_pull_write_blocked(self, project: Path, store: Path):
        (project / "blocker").write_text("a file, not a directory")
        result = _run(
            "pull", "bp_team", "--file", "blocker/AGENTS.md",
            "--root", str(project), "--store", str(store), "--yes",
        )
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert BlueprintTracker(project).all() == []

    def test_push_undecodable_file(self, project: Path, store: Path):
        args = ["--root", str(project), "--store", str(store), "--yes"]
        _run("pull", "bp_team", *args)
        (project / "AGENTS.md").write_bytes(b"\xff\xfe not utf-8\n")

        result = _run("push", "AGENTS.md", *args)
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        stored = yaml.safe_load((store / "bp_team.yaml").read_text())
        assert stored["content"] == "# Team Rules\n\nReview every change.\n"


class TestMergeCommand:
    def _files(self, root: Path) -> None:
        (root / "a.md").write_text("# One\nfoo\n# Two\nbar\n")
        (root / "b.md").write_text("# Three\nbaz\n")

    def test_needs_two_files(self, project: Path):
        (project / "a.md").write_text("# One\n")
        result = _run("merge", "a.md", "--root", str(project))
        assert result.exit_code == 2

    def test_merge(self, project: Path):
        self._files(project)
        result = _run("merge", "a.md", "b.md", "-s", "concat", "--root", str(project))
        assert result.exit_code == 0, result.output
        text = (project / "merged.md").read_text()
        assert "<!-- From: a.md -->" in text
        assert "Strategy: concat" in text

    def test_output_exists(self, project: Path):
        self._files(project)
        (project / "out.md").write_text("keep")
        result = _run("merge", "a.md", "b.md", "-o", "out.md", "--root", str(project))
        assert result.exit_code == 1
        assert (project / "out.md").read_text() == "keep"

    def test_missing_input(self, project: Path):
        (project / "a.md").write_text("# One\n")
        result = _run("merge", "a.md", "missing.md", "--root", str(project))
        assert result.exit_code == 1
        assert not (project / "merged.md").exists()

    def test_bad_strategy(self, project: Path):
        self._files(project)
        result = _run("merge", "a.md", "b.md", "-s", "random", "--root", str(project))
        assert result.exit_code == 2

    def test_interactive_selection(self, project: Path):
        self._files(project)
        result = _run("merge", "a.md", "b.md", "-i", "--root", str(project), input="1,3\n")
        assert result.exit_code == 0, result.output
        text = (project / "merged.md").read_text()
        assert "## One" in text
        assert "## Three" in text
        assert "## Two" not in text
