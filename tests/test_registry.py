"""Tests for the agent registry, output formatting, and detection."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from rulecast.agents.detector import count_sections, detect_agents, recommended_agents
from rulecast.agents.formatter import (
    MARKDOWN_HEADER,
    format_for_agent,
    resolve_output_path,
    rules_filename,
    write_agent_output,
)
from rulecast.agents.registry import (
    AGENTS,
    AgentCategory,
    AgentDefinition,
    WireFormat,
    agents_by_category,
    display_name,
    get_agent,
    popular_agents,
    require_agent,
)
from rulecast.errors import UnknownTarget, WriteFailure

RULES = "# Style\n\nUse four spaces.\n"


class TestRegistry:
    """Static catalog lookups."""

    def test_known_agents(self):
        """The common tools are present with their output paths."""
        assert get_agent("cursor").output == ".cursor/rules/"
        assert get_agent("claude").output == "CLAUDE.md"
        assert get_agent("copilot").output == ".github/copilot-instructions.md"
        assert get_agent("agents").output == "AGENTS.md"

    def test_unknown_agent_is_none(self):
        assert get_agent("no-such-tool") is None

    def test_require_agent_suggests(self):
        """A near miss carries matching ids as suggestions."""
        with pytest.raises(UnknownTarget) as exc_info:
            require_agent("curs")
        assert exc_info.value.agent_id == "curs"
        assert "cursor" in exc_info.value.suggestions

    def test_catalog_is_read_only(self):
        with pytest.raises(TypeError):
            AGENTS["mine"] = get_agent("cursor")

    def test_ids_are_keys(self):
        for agent_id, agent in AGENTS.items():
            assert agent.id == agent_id

    def test_directory_mode(self):
        assert get_agent("cursor").is_directory
        assert not get_agent("claude").is_directory

    def test_popular_and_categories(self):
        popular = popular_agents()
        assert popular
        assert all(a.popular for a in popular)
        mcp = agents_by_category(AgentCategory.MCP)
        assert all(a.format == WireFormat.JSON for a in mcp)

    def test_display_name_falls_back_to_id(self):
        assert display_name("cursor") == "Cursor"
        assert display_name("mystery") == "mystery"


class TestFormatter:
    """Pure transforms and output path resolution."""

    def test_markdown_header(self):
        out = format_for_agent(get_agent("claude"), RULES)
        assert out == MARKDOWN_HEADER + RULES
        assert out.startswith("# AI Coding Rules\n\n> Generated by rulecast\n\n")

    def test_mdc_frontmatter(self):
        out = format_for_agent(get_agent("cursor"), RULES)
        assert out.startswith("---\n")
        _, frontmatter, body = out.split("---\n", 2)
        meta = yaml.safe_load(frontmatter)
        assert meta == {
            "description": "rulecast rules - AI coding guidelines",
            "globs": ["**/*"],
            "alwaysApply": True,
        }
        assert body == "\n" + RULES

    def test_json_envelope(self):
        data = json.loads(format_for_agent(get_agent("opencode"), RULES))
        assert data["rules"] == RULES
        assert data["version"] == "1.0"
        assert data["$schema"].endswith("/schemas/rules.json")
        assert data["meta"]["generator"] == "rulecast"

    def test_text_is_unchanged(self):
        assert format_for_agent(get_agent("windsurf"), RULES) == RULES

    def test_rules_filename(self):
        assert rules_filename(get_agent("cursor")) == "rulecast-rules.mdc"
        assert rules_filename(get_agent("kiro")) == "rulecast-rules.mdc"
        plain = AgentDefinition(id="docs", name="Docs", output="docs/ai/")
        assert rules_filename(plain) == "rulecast-rules.md"

    def test_resolve_output_path(self, project: Path):
        assert resolve_output_path(project, get_agent("claude")) == project / "CLAUDE.md"
        assert (
            resolve_output_path(project, get_agent("cursor"))
            == project / ".cursor" / "rules" / "rulecast-rules.mdc"
        )

    def test_write_creates_parents(self, project: Path):
        path = write_agent_output(project, get_agent("copilot"), RULES)
        assert path == project / ".github" / "copilot-instructions.md"
        assert path.read_text().endswith(RULES)

    def test_directory_target_gets_one_file(self, project: Path):
        write_agent_output(project, get_agent("cursor"), RULES)
        files = list((project / ".cursor" / "rules").iterdir())
        assert [f.name for f in files] == ["rulecast-rules.mdc"]

    def test_write_failure(self, project: Path):
        """A regular file where the directory should be is a WriteFailure."""
        (project / ".cursor").write_text("not a directory")
        with pytest.raises(WriteFailure) as exc_info:
            write_agent_output(project, get_agent("cursor"), RULES)
        assert exc_info.value.target == "cursor"
        assert str(exc_info.value).startswith("cursor: ")


class TestDetector:
    """Finding existing agent configuration."""

    def test_count_sections(self):
        assert count_sections("# A\ntext\n## B\nmore") == 2
        assert count_sections("just text") == 1
        assert count_sections("   ") == 0

    def test_detects_files_and_directories(self, project: Path):
        (project / "CLAUDE.md").write_text("# Rules\n\n## One\n")
        rules = project / ".cursor" / "rules"
        rules.mkdir(parents=True)
        (rules / "a.mdc").write_text("# A\n")

        result = detect_agents(project)
        assert "claude" in result.agent_ids
        assert "cursor" in result.agent_ids
        claude = next(d for d in result.detected if d.agent.id == "claude")
        assert claude.has_content
        assert claude.rule_count == 2

    def test_empty_file_detected_without_content(self, project: Path):
        (project / "CLAUDE.md").write_text("")
        result = detect_agents(project)
        claude = next(d for d in result.detected if d.agent.id == "claude")
        assert not claude.has_content
        assert claude not in result.importable

    def test_nothing_found(self, project: Path):
        result = detect_agents(project)
        assert result.detected == []
        assert result.summary() == "No AI agent configuration files detected"

    def test_recommended_defaults_to_popular(self, project: Path):
        recommended = recommended_agents(project)
        assert recommended == popular_agents()[:2]

    def test_recommended_prefers_detected(self, project: Path):
        (project / "AGENTS.md").write_text("# Agents\n")
        assert [a.id for a in recommended_agents(project)] == ["agents"]
