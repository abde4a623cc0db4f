"""
Blueprint stores -- where shared blueprints are pulled from and pushed to.

The core only needs two calls: fetch a blueprint by id, and upload new
content for an id. How the store is reached is its own business.
LocalDirectoryStore keeps one YAML document per blueprint, which is
enough for a shared drive, a synced folder, or tests.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Union

import yaml
from pydantic import BaseModel, field_validator

from .errors import BlueprintNotFound, BlueprintParseError, WriteFailure
from .models import BlueprintSource, Visibility

logger = logging.getLogger("rulecast.remote")

TYPE_TO_FILENAME = {
    "AGENTS_MD": "AGENTS.md",
    "CURSOR_RULES": ".cursorrules",
    "COPILOT_INSTRUCTIONS": ".github/copilot-instructions.md",
    "WINDSURF_RULES": ".windsurfrules",
    "ZED_INSTRUCTIONS": ".zed/instructions.md",
    "CLAUDE_MD": "CLAUDE.md",
    "GENERIC": "ai-config.md",
}

_SAFE_ID = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.\-]*$")


class RemoteBlueprint(BaseModel):
    """A blueprint as the store returns it."""

    id: str
    name: str
    description: str = ""
    visibility: Visibility = Visibility.PRIVATE
    content: str = ""
    type: str = "GENERIC"
    version: Optional[str] = None

    @field_validator("id", "name", "version", mode="before")
    @classmethod
    def _coerce_scalar(cls, v):
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @property
    def source(self) -> BlueprintSource:
        return self.visibility.to_source()

    @property
    def default_filename(self) -> str:
        return TYPE_TO_FILENAME.get(self.type, TYPE_TO_FILENAME["GENERIC"])


class RemoteStore(ABC):
    """Abstract blueprint store."""

    @abstractmethod
    def get_blueprint(self, blueprint_id: str) -> RemoteBlueprint:
        """Fetch one blueprint.

        Raises:
            BlueprintNotFound: If the store has no such id.
        """

    @abstractmethod
    def push_blueprint(self, blueprint_id: str, content: str) -> RemoteBlueprint:
        """Replace the content of an existing blueprint.

        Raises:
            BlueprintNotFound: If the store has no such id.
        """

    @abstractmethod
    def list_blueprints(self) -> List[RemoteBlueprint]:
        """Every blueprint in the store."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable store name."""


class LocalDirectoryStore(RemoteStore):
    """Blueprint store backed by a directory of ``<id>.yaml`` files."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    @property
    def name(self) -> str:
        return f"local:{self.path}"

    def _file_for(self, blueprint_id: str) -> Path:
        if not _SAFE_ID.match(blueprint_id):
            raise BlueprintNotFound(blueprint_id)
        return self.path / f"{blueprint_id}.yaml"

    def _read(self, path: Path) -> RemoteBlueprint:
        """Parse one blueprint document.

        Raises:
            BlueprintParseError: If the file is unreadable, not a YAML
                mapping, or fails validation.
        """
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
            if not isinstance(raw, dict):
                raise ValueError(f"expected a YAML mapping, got {type(raw).__name__}")
            raw.setdefault("id", path.stem)
            return RemoteBlueprint.model_validate(raw)
        except (yaml.YAMLError, ValueError, TypeError, OSError) as exc:
            raise BlueprintParseError(path.name, str(exc)) from exc

    def get_blueprint(self, blueprint_id: str) -> RemoteBlueprint:
        path = self._file_for(blueprint_id)
        if not path.is_file():
            raise BlueprintNotFound(blueprint_id)
        return self._read(path)

    def save_blueprint(self, blueprint: RemoteBlueprint) -> Path:
        """Write (or overwrite) a blueprint document."""
        self.path.mkdir(parents=True, exist_ok=True)
        path = self._file_for(blueprint.id)
        path.write_text(
            yaml.dump(
                blueprint.model_dump(mode="json", exclude_none=True),
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
            ),
            encoding="utf-8",
        )
        return path

    def push_blueprint(self, blueprint_id: str, content: str) -> RemoteBlueprint:
        blueprint = self.get_blueprint(blueprint_id)
        blueprint.content = content
        try:
            self.save_blueprint(blueprint)
        except OSError as exc:
            raise WriteFailure(self.name, str(exc)) from exc
        logger.info("Pushed %s to %s", blueprint_id, self.name)
        return blueprint

    def list_blueprints(self) -> List[RemoteBlueprint]:
        if not self.path.is_dir():
            return []
        found = []
        for path in sorted(self.path.glob("*.yaml")):
            try:
                found.append(self._read(path))
            except BlueprintParseError as exc:
                logger.warning("Skipping %s: %s", path, exc)
        return found
