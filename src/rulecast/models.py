"""
Pydantic models for the rulecast project state.

Two documents live under .rulecast/: conf.yml (which tools to export
to and where the rules come from) and blueprints.yml (the ledger of
files that were pulled from, or linked to, a shared blueprint).
Ledger keys stay camelCase on disk so existing ledgers load unchanged.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class BlueprintSource(str, Enum):
    """Where a tracked blueprint came from."""

    MARKETPLACE = "marketplace"
    TEAM = "team"
    PRIVATE = "private"
    LOCAL = "local"


class Visibility(str, Enum):
    """Visibility of a blueprint in the remote store."""

    PUBLIC = "PUBLIC"
    TEAM = "TEAM"
    PRIVATE = "PRIVATE"

    def to_source(self) -> BlueprintSource:
        """Map remote visibility onto the ledger source."""
        return {
            Visibility.PUBLIC: BlueprintSource.MARKETPLACE,
            Visibility.TEAM: BlueprintSource.TEAM,
            Visibility.PRIVATE: BlueprintSource.PRIVATE,
        }[self]


class TrackingState(str, Enum):
    """Derived sync state of a tracked file."""

    SYNCED = "synced"
    MODIFIED = "modified"
    MISSING = "missing"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TrackedBlueprint(BaseModel):
    """One ledger row: a local file linked to a remote blueprint.

    The ``file`` path (relative to the project root) is the natural key.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    source: BlueprintSource
    file: str
    name: str
    pulled_at: datetime = Field(default_factory=_utcnow, alias="pulledAt")
    checksum: str
    version: Optional[str] = None
    editable: bool = True
    can_pull: bool = Field(default=True, alias="canPull")
    hierarchy_id: Optional[str] = Field(default=None, alias="hierarchyId")
    hierarchy_name: Optional[str] = Field(default=None, alias="hierarchyName")
    repository_path: Optional[str] = Field(default=None, alias="repositoryPath")

    @field_validator("id", "name", "version", mode="before")
    @classmethod
    def _coerce_scalar(cls, v):
        # YAML turns bare numbers into ints
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class BlueprintsConfig(BaseModel):
    """The whole ledger document.

    Rows are unique by ``file``. Duplicates in a hand-edited document
    collapse to the last row for that path when loaded.
    """

    version: str = "1"
    blueprints: List[TrackedBlueprint] = Field(default_factory=list)

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, v):
        return str(v) if v is not None else "1"

    @model_validator(mode="after")
    def _unique_by_file(self) -> "BlueprintsConfig":
        by_file: Dict[str, TrackedBlueprint] = {}
        for row in self.blueprints:
            by_file.pop(row.file, None)
            by_file[row.file] = row
        if len(by_file) != len(self.blueprints):
            self.blueprints = list(by_file.values())
        return self

    def by_file(self) -> Dict[str, TrackedBlueprint]:
        """Return the rows keyed by file path, in ledger order."""
        return {row.file: row for row in self.blueprints}

    def get(self, file: str) -> Optional[TrackedBlueprint]:
        return self.by_file().get(file)

    def upsert(self, row: TrackedBlueprint) -> None:
        """Replace any row for ``row.file`` and append the new one."""
        rows = self.by_file()
        rows.pop(row.file, None)
        rows[row.file] = row
        self.blueprints = list(rows.values())

    def remove(self, file: str) -> bool:
        """Drop the row for ``file``. Returns True if one was removed."""
        rows = self.by_file()
        if rows.pop(file, None) is None:
            return False
        self.blueprints = list(rows.values())
        return True


class SyncStatusEntry(BaseModel):
    """Result of checking one ledger row against the working tree."""

    blueprint: TrackedBlueprint
    file_exists: bool
    local_modified: bool = False

    @property
    def state(self) -> TrackingState:
        if not self.file_exists:
            return TrackingState.MISSING
        if self.local_modified:
            return TrackingState.MODIFIED
        return TrackingState.SYNCED


class SourceDescriptor(BaseModel):
    """Where authored rule documents are read from."""

    type: str = "local"
    path: str = ".rulecast/rules"


class ProjectConfig(BaseModel):
    """User-editable project configuration (conf.yml)."""

    version: str = "1"
    exporters: List[str] = Field(default_factory=list)
    sources: List[SourceDescriptor] = Field(
        default_factory=lambda: [SourceDescriptor()]
    )

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, v):
        return str(v) if v is not None else "1"

    @field_validator("exporters", "sources", mode="before")
    @classmethod
    def _none_is_empty(cls, v):
        return [] if v is None else v
