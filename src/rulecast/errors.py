"""Exceptions raised by the rulecast core.

The CLI turns any RulecastError into a red message and exit code 1.
Per-target failures during sync are collected instead of raised.
"""

from __future__ import annotations

from typing import List, Optional


class RulecastError(Exception):
    """Base class for every rulecast failure."""


class ConfigMissing(RulecastError):
    """No conf.yml in the project (run ``rulecast init``)."""


class ConfigParseError(RulecastError):
    """conf.yml or blueprints.yml is not valid YAML or fails validation."""


class SourceNotFound(RulecastError):
    """A referenced local file does not exist or cannot be read."""

    def __init__(self, path: str, reason: Optional[str] = None):
        self.path = path
        msg = f"Could not read file {path}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class UnknownTarget(RulecastError):
    """An agent id that is not in the format registry."""

    def __init__(self, agent_id: str, suggestions: Optional[List[str]] = None):
        self.agent_id = agent_id
        self.suggestions = suggestions or []
        super().__init__(f"Unknown agent: {agent_id}")


class WriteFailure(RulecastError):
    """Writing one output target failed."""

    def __init__(self, target: str, reason: str):
        self.target = target
        self.reason = reason
        super().__init__(f"{target}: {reason}")


class AlreadyLinked(RulecastError):
    """The file is already tracked and replacing it was not confirmed."""

    def __init__(self, file: str, blueprint_id: str, name: str):
        self.file = file
        self.blueprint_id = blueprint_id
        self.name = name
        super().__init__(f"{file} is already linked to {name} ({blueprint_id})")


class LastTargetProtection(RulecastError):
    """Refusing to disable the only enabled agent."""

    def __init__(self, agent_id: str):
        self.agent_id = agent_id
        super().__init__(
            f"Cannot disable {agent_id}: at least one agent must stay enabled"
        )


class OutputExists(RulecastError):
    """The merge output file exists and --force was not given."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"File already exists: {path} (use --force to overwrite)")


class BlueprintNotFound(RulecastError):
    """The blueprint store has no blueprint with this id."""

    def __init__(self, blueprint_id: str):
        self.blueprint_id = blueprint_id
        super().__init__(f"Blueprint not found: {blueprint_id}")


class NotEditable(RulecastError):
    """Marketplace blueprints are never pushed back upstream."""

    def __init__(self, file: str):
        self.file = file
        super().__init__(
            f"{file} comes from the marketplace; local changes are not pushed back"
        )


class BlueprintParseError(RulecastError):
    """A blueprint document in the store is not valid YAML or fails validation."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not parse blueprint {path}: {reason}")
