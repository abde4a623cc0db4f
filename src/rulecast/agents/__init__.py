"""
Agents -- the export targets rulecast knows how to write.

The registry is the static catalog, the formatter renders and writes
each target, and the detector finds tools already configured in a
project.
"""

from .registry import (
    AGENTS,
    AgentCategory,
    AgentDefinition,
    WireFormat,
    get_agent,
    require_agent,
)
from .formatter import format_for_agent, write_agent_output

__all__ = [
    "AGENTS",
    "AgentCategory",
    "AgentDefinition",
    "WireFormat",
    "get_agent",
    "require_agent",
    "format_for_agent",
    "write_agent_output",
]
