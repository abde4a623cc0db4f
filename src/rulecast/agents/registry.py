"""
Agent Registry -- the static catalog of supported AI coding tools.

Each AgentDefinition says where a tool expects its rules (a file, or a
directory when the output path ends in "/"), which wire format it
reads, and which paths reveal that the tool is already in use.

The catalog is built once at import time and exposed as a read-only
mapping keyed by id. Nothing mutates it at runtime.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..errors import UnknownTarget


class WireFormat(str, Enum):
    """Output format a tool reads its rules in."""

    MARKDOWN = "markdown"
    MDC = "mdc"
    JSON = "json"
    YAML = "yaml"
    TOML = "toml"
    TEXT = "text"


class AgentCategory(str, Enum):
    """Grouping used when listing agents."""

    POPULAR = "popular"
    MARKDOWN = "markdown"
    CONFIG = "config"
    MCP = "mcp"
    DIRECTORY = "directory"


class AgentDefinition(BaseModel):
    """One export target."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique key used in conf.yml exporters")
    name: str = Field(description="Display name")
    description: str = ""
    patterns: Tuple[str, ...] = Field(
        default=(),
        description="Paths whose presence means the tool is in use",
    )
    output: str = Field(description="Output file, or directory if it ends in '/'")
    format: WireFormat = WireFormat.MARKDOWN
    category: AgentCategory = AgentCategory.MARKDOWN
    popular: bool = False

    @property
    def is_directory(self) -> bool:
        """Directory-mode targets get a single fixed-name file inside."""
        return self.output.endswith("/")


def _agent(**kwargs) -> AgentDefinition:
    kwargs["patterns"] = tuple(kwargs.get("patterns", ()))
    return AgentDefinition(**kwargs)


_DEFINITIONS: Tuple[AgentDefinition, ...] = (
    # Popular
    _agent(
        id="cursor", name="Cursor",
        description="AI-powered code editor with .cursor/rules/ support",
        patterns=[".cursor/rules/"], output=".cursor/rules/",
        format=WireFormat.MDC, category=AgentCategory.POPULAR, popular=True,
    ),
    _agent(
        id="agents", name="AGENTS.md",
        description="Universal format for Claude Code, GitHub Copilot, Aider, and others",
        patterns=["AGENTS.md"], output="AGENTS.md",
        format=WireFormat.MARKDOWN, category=AgentCategory.POPULAR, popular=True,
    ),
    _agent(
        id="claude", name="Claude Code",
        description="Anthropic's Claude with CLAUDE.md support",
        patterns=["CLAUDE.md"], output="CLAUDE.md",
        format=WireFormat.MARKDOWN, category=AgentCategory.POPULAR, popular=True,
    ),
    _agent(
        id="copilot", name="GitHub Copilot",
        description="GitHub's AI pair programmer",
        patterns=[".github/copilot-instructions.md"],
        output=".github/copilot-instructions.md",
        format=WireFormat.MARKDOWN, category=AgentCategory.POPULAR, popular=True,
    ),
    _agent(
        id="windsurf", name="Windsurf",
        description="Codeium's AI IDE with .windsurfrules support",
        patterns=[".windsurfrules", ".windsurf/rules/"], output=".windsurfrules",
        format=WireFormat.TEXT, category=AgentCategory.POPULAR, popular=True,
    ),
    # Markdown
    _agent(
        id="gemini", name="Gemini", description="Google's Gemini AI assistant",
        patterns=["GEMINI.md"], output="GEMINI.md",
    ),
    _agent(
        id="warp", name="Warp AI", description="Warp terminal's AI assistant",
        patterns=["WARP.md"], output="WARP.md",
    ),
    _agent(
        id="zed", name="Zed", description="High-performance code editor with AI features",
        patterns=[".zed/instructions.md", "ZED.md"], output=".zed/instructions.md",
    ),
    _agent(
        id="crush", name="Crush", description="AI coding assistant",
        patterns=["CRUSH.md"], output="CRUSH.md",
    ),
    _agent(
        id="junie", name="Junie", description="JetBrains' AI coding assistant",
        patterns=[".junie/guidelines.md"], output=".junie/guidelines.md",
    ),
    _agent(
        id="openhands", name="OpenHands", description="Open-source AI coding agent",
        patterns=[".openhands/microagents/repo.md"],
        output=".openhands/microagents/repo.md",
    ),
    # Plain text / config
    _agent(
        id="cline", name="Cline", description="VS Code AI assistant extension",
        patterns=[".clinerules"], output=".clinerules",
        format=WireFormat.TEXT, category=AgentCategory.CONFIG,
    ),
    _agent(
        id="goose", name="Goose", description="Block's AI coding assistant",
        patterns=[".goosehints"], output=".goosehints",
        format=WireFormat.TEXT, category=AgentCategory.CONFIG,
    ),
    _agent(
        id="aider", name="Aider", description="AI pair programming in your terminal",
        patterns=[".aider.conf.yml", "AIDER.md"], output="AIDER.md",
        format=WireFormat.MARKDOWN, category=AgentCategory.CONFIG,
    ),
    # Directory-based
    _agent(
        id="amazonq", name="Amazon Q", description="AWS's AI coding assistant",
        patterns=[".amazonq/rules/"], output=".amazonq/rules/",
        format=WireFormat.MDC, category=AgentCategory.DIRECTORY,
    ),
    _agent(
        id="augmentcode", name="Augment Code", description="AI code augmentation tool",
        patterns=[".augment/rules/"], output=".augment/rules/",
        format=WireFormat.MDC, category=AgentCategory.DIRECTORY,
    ),
    _agent(
        id="kilocode", name="Kilocode", description="AI-powered code generation",
        patterns=[".kilocode/rules/"], output=".kilocode/rules/",
        format=WireFormat.MDC, category=AgentCategory.DIRECTORY,
    ),
    _agent(
        id="kiro", name="Kiro", description="AWS's spec-driven AI coding agent",
        patterns=[".kiro/steering/"], output=".kiro/steering/",
        format=WireFormat.MDC, category=AgentCategory.DIRECTORY,
    ),
    _agent(
        id="trae-ai", name="Trae AI", description="ByteDance's AI coding assistant",
        patterns=[".trae/rules/"], output=".trae/rules/",
        format=WireFormat.MDC, category=AgentCategory.DIRECTORY,
    ),
    _agent(
        id="firebase-studio", name="Firebase Studio",
        description="Google's Firebase development environment",
        patterns=[".idx/"], output=".idx/",
        format=WireFormat.MDC, category=AgentCategory.DIRECTORY,
    ),
    _agent(
        id="roocode", name="Roo Code", description="AI coding assistant for VS Code",
        patterns=[".roo/rules/"], output=".roo/rules/",
        format=WireFormat.MDC, category=AgentCategory.DIRECTORY,
    ),
    # JSON config
    _agent(
        id="firebender", name="Firebender", description="AI code transformation tool",
        patterns=["firebender.json"], output="firebender.json",
        format=WireFormat.JSON, category=AgentCategory.CONFIG,
    ),
    _agent(
        id="opencode", name="Open Code", description="Open-source AI coding tool",
        patterns=["opencode.json"], output="opencode.json",
        format=WireFormat.JSON, category=AgentCategory.CONFIG,
    ),
    # MCP
    _agent(
        id="vscode-mcp", name="VS Code MCP", description="VS Code with Model Context Protocol",
        patterns=[".vscode/mcp.json"], output=".vscode/mcp.json",
        format=WireFormat.JSON, category=AgentCategory.MCP,
    ),
    _agent(
        id="cursor-mcp", name="Cursor MCP", description="Cursor with Model Context Protocol",
        patterns=[".cursor/mcp.json"], output=".cursor/mcp.json",
        format=WireFormat.JSON, category=AgentCategory.MCP,
    ),
    _agent(
        id="root-mcp", name="Root MCP",
        description="Root-level MCP config for Claude Code, Aider",
        patterns=[".mcp.json"], output=".mcp.json",
        format=WireFormat.JSON, category=AgentCategory.MCP,
    ),
    _agent(
        id="windsurf-mcp", name="Windsurf MCP",
        description="Windsurf with Model Context Protocol",
        patterns=[".windsurf/mcp_config.json"], output=".windsurf/mcp_config.json",
        format=WireFormat.JSON, category=AgentCategory.MCP,
    ),
)

AGENTS: Mapping[str, AgentDefinition] = MappingProxyType(
    {agent.id: agent for agent in _DEFINITIONS}
)


def get_agent(agent_id: str) -> Optional[AgentDefinition]:
    """Look up an agent by id.

    Args:
        agent_id: Registry key (e.g. 'cursor').

    Returns:
        AgentDefinition or None if the id is unknown.
    """
    return AGENTS.get(agent_id)


def suggest_agents(query: str, limit: int = 5) -> List[AgentDefinition]:
    """Agents whose id or name contains ``query`` (case-insensitive)."""
    q = query.lower()
    return [
        a for a in AGENTS.values()
        if q in a.id or q in a.name.lower()
    ][:limit]


def require_agent(agent_id: str) -> AgentDefinition:
    """Like get_agent, but raise UnknownTarget with suggestions on a miss."""
    agent = get_agent(agent_id)
    if agent is None:
        raise UnknownTarget(agent_id, [a.id for a in suggest_agents(agent_id)])
    return agent


def popular_agents() -> List[AgentDefinition]:
    return [a for a in AGENTS.values() if a.popular]


def agents_by_category(category: AgentCategory) -> List[AgentDefinition]:
    return [a for a in AGENTS.values() if a.category == category]


def display_name(agent_id: str) -> str:
    agent = get_agent(agent_id)
    return agent.name if agent else agent_id
