"""
Formatter -- turn the combined rules text into each tool's native format.

The transforms are pure string functions. Writing is separate: a
file-mode agent gets its declared output path, a directory-mode agent
gets exactly one ``rulecast-rules.<ext>`` file inside its directory.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import yaml

from .. import PRODUCT_NAME
from ..errors import WriteFailure
from .registry import AgentDefinition, WireFormat

logger = logging.getLogger("rulecast.agents.formatter")

MARKDOWN_HEADER = f"# AI Coding Rules\n\n> Generated by {PRODUCT_NAME}\n\n"
SCHEMA_URL = f"https://{PRODUCT_NAME}.dev/schemas/rules.json"
PROJECT_URL = f"https://{PRODUCT_NAME}.dev"


def format_markdown(content: str) -> str:
    return MARKDOWN_HEADER + content


def format_mdc(content: str) -> str:
    """Cursor-style MDC: YAML frontmatter between '---' lines, then the rules."""
    frontmatter = yaml.dump(
        {
            "description": f"{PRODUCT_NAME} rules - AI coding guidelines",
            "globs": ["**/*"],
            "alwaysApply": True,
        },
        default_flow_style=False,
        sort_keys=False,
    )
    return f"---\n{frontmatter}---\n\n{content}"


def format_json(content: str) -> str:
    envelope = {
        "$schema": SCHEMA_URL,
        "version": "1.0",
        "rules": content,
        "meta": {
            "generator": PRODUCT_NAME,
            "url": PROJECT_URL,
        },
    }
    return json.dumps(envelope, indent=2, ensure_ascii=False)


def format_yaml(content: str) -> str:
    envelope = {
        "version": "1.0",
        "rules": content,
        "meta": {"generator": PRODUCT_NAME, "url": PROJECT_URL},
    }
    return yaml.dump(
        envelope, default_flow_style=False, sort_keys=False, allow_unicode=True
    )


_TRANSFORMS = {
    WireFormat.MARKDOWN: format_markdown,
    WireFormat.MDC: format_mdc,
    WireFormat.JSON: format_json,
    WireFormat.YAML: format_yaml,
}


def format_for_agent(agent: AgentDefinition, content: str) -> str:
    """Render ``content`` in the agent's wire format.

    Text and TOML targets receive the content unchanged.

    Args:
        agent: Target definition.
        content: Combined rules text.

    Returns:
        str: The document to write.
    """
    transform = _TRANSFORMS.get(agent.format)
    if transform is None:
        return content
    return transform(content)


def rules_filename(agent: AgentDefinition) -> str:
    """Fixed filename used inside directory-mode targets."""
    extension = ".mdc" if agent.format == WireFormat.MDC else ".md"
    return f"{PRODUCT_NAME}-rules{extension}"


def resolve_output_path(root: Path, agent: AgentDefinition) -> Path:
    """Absolute path of the single file written for ``agent``."""
    if agent.is_directory:
        return root / agent.output / rules_filename(agent)
    return root / agent.output


def write_agent_output(root: Path, agent: AgentDefinition, content: str) -> Path:
    """Format and write the rules for one agent.

    Parent directories are created as needed.

    Args:
        root: Project root.
        agent: Target definition.
        content: Combined rules text.

    Returns:
        Path: The file that was written.

    Raises:
        WriteFailure: If the directory or file cannot be written.
    """
    target = resolve_output_path(root, agent)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(format_for_agent(agent, content), encoding="utf-8")
    except OSError as exc:
        raise WriteFailure(agent.id, str(exc)) from exc
    logger.info("Wrote %s rules to %s", agent.id, target)
    return target
