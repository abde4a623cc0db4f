"""
Project configuration -- .rulecast/conf.yml and the rules it points at.

conf.yml lists which agents to export to and where the authored rule
documents live. Unlike the ledger, a broken conf.yml is an error: the
user wrote it by hand and needs to hear about it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Union

import yaml

from . import PROJECT_DIR
from .agents.registry import require_agent
from .errors import (
    ConfigMissing,
    ConfigParseError,
    LastTargetProtection,
    SourceNotFound,
)
from .models import ProjectConfig, SourceDescriptor

logger = logging.getLogger("rulecast.config")

CONFIG_FILE = "conf.yml"
RULES_DIR = "rules"
RULE_SEPARATOR = "\n\n---\n\n"

STARTER_RULES = """# Project Rules

Describe how AI assistants should work in this project.

## Code Style

- Follow the conventions already used in the codebase.

## Testing

- Add or update tests with every behavior change.
"""


def config_path(root: Union[str, Path]) -> Path:
    return Path(root) / PROJECT_DIR / CONFIG_FILE


def is_initialized(root: Union[str, Path]) -> bool:
    return config_path(root).exists()


def load_project_config(root: Union[str, Path]) -> ProjectConfig:
    """Load conf.yml.

    Raises:
        ConfigMissing: If the project has no conf.yml.
        ConfigParseError: If it is not valid YAML or fails validation.
    """
    path = config_path(root)
    if not path.exists():
        raise ConfigMissing(f"{PROJECT_DIR}/{CONFIG_FILE} not found; run 'rulecast init'")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            raise ValueError(f"expected a mapping, got {type(data).__name__}")
        return ProjectConfig.model_validate(data)
    except (yaml.YAMLError, ValueError, TypeError) as exc:
        raise ConfigParseError(f"Could not parse {PROJECT_DIR}/{CONFIG_FILE}: {exc}") from exc


def save_project_config(root: Union[str, Path], config: ProjectConfig) -> Path:
    """Rewrite conf.yml from ``config``."""
    path = config_path(root)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        yaml.dump(config.model_dump(mode="json"), default_flow_style=False, sort_keys=False),
        encoding="utf-8",
    )
    return path


def init_project(
    root: Union[str, Path],
    exporters: Iterable[str],
    force: bool = False,
) -> Path:
    """Create conf.yml and the rules directory with a starter document.

    Args:
        root: Project root.
        exporters: Agent ids to enable. Each must be in the registry.
        force: Overwrite an existing conf.yml.

    Returns:
        Path to conf.yml.

    Raises:
        FileExistsError: If the project is already initialized and not ``force``.
        UnknownTarget: If an exporter id is not in the registry.
    """
    root = Path(root)
    if is_initialized(root) and not force:
        raise FileExistsError(str(config_path(root)))

    ids: List[str] = []
    for agent_id in exporters:
        require_agent(agent_id)
        if agent_id not in ids:
            ids.append(agent_id)

    config = ProjectConfig(
        exporters=ids,
        sources=[SourceDescriptor(type="local", path=f"{PROJECT_DIR}/{RULES_DIR}")],
    )
    path = save_project_config(root, config)

    rules_dir = root / PROJECT_DIR / RULES_DIR
    rules_dir.mkdir(parents=True, exist_ok=True)
    if not any(rules_dir.glob("*.md")):
        (rules_dir / "project.md").write_text(STARTER_RULES, encoding="utf-8")

    logger.info("Initialized %s with exporters %s", path, ids)
    return path


def enable_agent(root: Union[str, Path], agent_id: str) -> bool:
    """Add an agent to the exporters list.

    Returns:
        False if it was already enabled.

    Raises:
        UnknownTarget: If the id is not in the registry.
    """
    agent = require_agent(agent_id)
    config = load_project_config(root)
    if agent.id in config.exporters:
        return False
    config.exporters.append(agent.id)
    save_project_config(root, config)
    return True


def set_exporters(root: Union[str, Path], agent_ids: Iterable[str]) -> List[str]:
    """Replace the exporters list wholesale (interactive selection)."""
    ids = [require_agent(a).id for a in agent_ids]
    config = load_project_config(root)
    if not ids:
        raise LastTargetProtection(", ".join(config.exporters) or "all agents")
    config.exporters = ids
    save_project_config(root, config)
    return ids


def disable_agent(root: Union[str, Path], agent_id: str) -> bool:
    """Remove an agent from the exporters list.

    Returns:
        False if it was not enabled.

    Raises:
        LastTargetProtection: If it is the only enabled agent.
    """
    config = load_project_config(root)
    if agent_id not in config.exporters:
        return False
    if len(config.exporters) == 1:
        raise LastTargetProtection(agent_id)
    config.exporters = [e for e in config.exporters if e != agent_id]
    save_project_config(root, config)
    return True


@dataclass
class RuleFile:
    name: str
    content: str


@dataclass
class RulesContent:
    """Authored rules, trimmed and joined with '---' separators."""

    files: List[RuleFile] = field(default_factory=list)

    @property
    def combined(self) -> str:
        return RULE_SEPARATOR.join(f.content for f in self.files)

    @property
    def file_count(self) -> int:
        return len(self.files)


def load_rules(root: Union[str, Path], config: Optional[ProjectConfig] = None) -> Optional[RulesContent]:
    """Collect the rule documents from every local source directory.

    Files are read alphabetically by name; blank files are skipped.

    Returns:
        RulesContent, or None when there is no rule content at all.

    Raises:
        SourceNotFound: If a rule file cannot be read as UTF-8 text.
    """
    root = Path(root)
    sources = config.sources if config else [SourceDescriptor()]
    rules = RulesContent()

    for source in sources:
        if source.type != "local":
            logger.warning("Skipping unsupported rules source type: %s", source.type)
            continue
        rules_dir = root / source.path
        if not rules_dir.is_dir():
            logger.debug("Rules directory missing: %s", rules_dir)
            continue
        for path in sorted(rules_dir.iterdir(), key=lambda p: p.name):
            if not path.is_file() or path.suffix != ".md":
                continue
            try:
                content = path.read_text(encoding="utf-8").strip()
            except (OSError, UnicodeDecodeError) as exc:
                raise SourceNotFound(f"{source.path}/{path.name}", str(exc)) from exc
            if content:
                rules.files.append(RuleFile(name=path.name, content=content))

    return rules if rules.files else None
