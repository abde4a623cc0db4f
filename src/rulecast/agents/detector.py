"""Detect which AI coding tools a project already uses."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .registry import AGENTS, AgentDefinition, WireFormat, popular_agents

logger = logging.getLogger("rulecast.agents.detector")

_HEADING = re.compile(r"^#{1,6}\s+.+$", re.MULTILINE)

_DIRECTORY_SUFFIXES = {
    WireFormat.MDC: (".mdc", ".md"),
    WireFormat.MARKDOWN: (".md",),
    WireFormat.JSON: (".json",),
    WireFormat.YAML: (".yml", ".yaml"),
}


@dataclass
class DetectedAgent:
    """An agent whose files were found in the project."""

    agent: AgentDefinition
    files: List[str] = field(default_factory=list)
    has_content: bool = False
    rule_count: int = 0


@dataclass
class DetectionResult:
    detected: List[DetectedAgent] = field(default_factory=list)

    @property
    def popular(self) -> List[DetectedAgent]:
        return [d for d in self.detected if d.agent.popular]

    @property
    def importable(self) -> List[DetectedAgent]:
        return [d for d in self.detected if d.has_content]

    @property
    def agent_ids(self) -> List[str]:
        return [d.agent.id for d in self.detected]

    def summary(self) -> str:
        if not self.detected:
            return "No AI agent configuration files detected"
        if len(self.detected) == 1:
            return f"Found {self.detected[0].agent.name} configuration"
        names = ", ".join(d.agent.name for d in self.detected[:3])
        more = f" +{len(self.detected) - 3} more" if len(self.detected) > 3 else ""
        return f"Found {len(self.detected)} agents: {names}{more}"


def count_sections(content: str) -> int:
    """Number of markdown headings, or 1 for non-empty headingless text."""
    headings = _HEADING.findall(content)
    if headings:
        return len(headings)
    return 1 if content.strip() else 0


def _read(path: Path) -> Optional[str]:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Could not read %s: %s", path, exc)
        return None


def _scan_directory(path: Path, fmt: WireFormat) -> List[int]:
    suffixes = _DIRECTORY_SUFFIXES.get(fmt, ())
    counts = []
    for entry in sorted(path.iterdir()):
        if not entry.is_file() or not entry.name.lower().endswith(suffixes):
            continue
        content = _read(entry)
        if content and content.strip():
            counts.append(count_sections(content))
    return counts


def detect_agent(root: Path, agent: AgentDefinition) -> Optional[DetectedAgent]:
    """Check one agent's detection patterns under ``root``."""
    found = DetectedAgent(agent=agent)

    for pattern in agent.patterns:
        full = root / pattern
        if full.is_dir():
            counts = _scan_directory(full, agent.format)
            if counts:
                found.files.append(pattern)
                found.has_content = True
                found.rule_count += sum(counts)
        elif full.is_file():
            found.files.append(pattern)
            content = _read(full)
            if content and content.strip():
                found.has_content = True
                found.rule_count += count_sections(content)

    return found if found.files else None


def detect_agents(root: Path) -> DetectionResult:
    """Scan a project for every agent in the registry.

    Args:
        root: Project root.

    Returns:
        DetectionResult in registry order.
    """
    result = DetectionResult()
    for agent in AGENTS.values():
        detected = detect_agent(root, agent)
        if detected:
            result.detected.append(detected)
    return result


def recommended_agents(root: Path) -> List[AgentDefinition]:
    """Detected agents, or the first two popular ones when none are found."""
    result = detect_agents(root)
    if result.detected:
        return [d.agent for d in result.detected]
    return popular_agents()[:2]
