"""
Sync data models -- the plan and the outcome of a sync run.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from ..agents.registry import AgentDefinition


class SyncPlan(BaseModel):
    """What a sync would do, resolved from conf.yml and the rules dir."""

    targets: List[AgentDefinition] = Field(default_factory=list)
    unknown: List[str] = Field(default_factory=list)
    rule_files: List[str] = Field(default_factory=list)
    content: Optional[str] = None

    @property
    def has_rules(self) -> bool:
        return self.content is not None


class SyncReport(BaseModel):
    """Per-target outcome of a sync.

    ``written`` holds output paths, ``skipped`` holds agent ids that
    were not attempted, ``errors`` holds "<id>: <reason>" strings.
    """

    written: List[str] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    dry_run: bool = False

    @property
    def ok(self) -> bool:
        return not self.errors
