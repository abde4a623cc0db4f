"""
Blueprint Tracker -- the ledger of files that came from shared blueprints.

Each row links a local file (relative to the project root) to a
remote blueprint id and records a fingerprint of the content at the
last pull or push. Comparing that fingerprint with the file on disk
tells us whether the user has edited it since.

Storage: .rulecast/blueprints.yml, rewritten whole on every change.
A missing or unreadable ledger is treated as "nothing tracked yet".
"""

from __future__ import annotations

import hashlib
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union

import yaml

from . import PROJECT_DIR
from .errors import SourceNotFound
from .models import (
    BlueprintSource,
    BlueprintsConfig,
    SyncStatusEntry,
    TrackedBlueprint,
)

logger = logging.getLogger("rulecast.tracker")

BLUEPRINTS_FILE = "blueprints.yml"
CHECKSUM_LENGTH = 16


def calculate_checksum(content: str) -> str:
    """Fingerprint content for change detection.

    SHA-256 of the UTF-8 bytes, truncated to 16 hex characters so
    ledgers stay compatible across implementations. Not a security
    control.
    """
    return hashlib.sha256(content.encode("utf-8")).hexdigest()[:CHECKSUM_LENGTH]


class BlueprintTracker:
    """Read-modify-write access to a project's blueprint ledger.

    Args:
        root: Project root directory.
    """

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root).expanduser()
        self.ledger_path = self.root / PROJECT_DIR / BLUEPRINTS_FILE

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self) -> BlueprintsConfig:
        """Load the ledger, or an empty one if it is missing or malformed."""
        if not self.ledger_path.exists():
            return BlueprintsConfig()
        try:
            data = yaml.safe_load(self.ledger_path.read_text(encoding="utf-8"))
            if data is None:
                return BlueprintsConfig()
            if not isinstance(data, dict):
                raise ValueError(f"expected a mapping, got {type(data).__name__}")
            return BlueprintsConfig.model_validate(data)
        except (yaml.YAMLError, ValueError, TypeError, OSError) as exc:
            logger.warning("Ignoring unreadable ledger %s: %s", self.ledger_path, exc)
            return BlueprintsConfig()

    def save(self, config: BlueprintsConfig) -> None:
        """Write the whole ledger document."""
        self.ledger_path.parent.mkdir(parents=True, exist_ok=True)
        data = config.model_dump(mode="json", by_alias=True, exclude_none=True)
        self.ledger_path.write_text(
            yaml.dump(
                data,
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
                width=4096,
            ),
            encoding="utf-8",
        )
        logger.debug("Saved %d ledger row(s) to %s", len(config.blueprints), self.ledger_path)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def normalize(self, file: Union[str, Path]) -> str:
        """Ledger key for ``file``: a POSIX path relative to the root."""
        path = Path(file)
        if path.is_absolute():
            try:
                path = path.resolve().relative_to(self.root.resolve())
            except ValueError:
                pass
        return Path(os.path.normpath(path)).as_posix()

    def all(self) -> List[TrackedBlueprint]:
        return self.load().blueprints

    def find_by_file(self, file: Union[str, Path]) -> Optional[TrackedBlueprint]:
        return self.load().get(self.normalize(file))

    def find_by_id(self, blueprint_id: str) -> Optional[TrackedBlueprint]:
        for row in self.load().blueprints:
            if row.id == blueprint_id:
                return row
        return None

    def find_by_hierarchy(self, hierarchy_id: str) -> List[TrackedBlueprint]:
        return [b for b in self.load().blueprints if b.hierarchy_id == hierarchy_id]

    def has_local_changes(self, tracked: TrackedBlueprint) -> bool:
        """True if the file on disk no longer matches the recorded checksum.

        An unreadable file counts as unchanged; check_sync_status reports
        it as missing instead.
        """
        try:
            content = (self.root / tracked.file).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return False
        return calculate_checksum(content) != tracked.checksum

    def check_sync_status(self) -> List[SyncStatusEntry]:
        """Existence and drift for every tracked file, in ledger order."""
        results = []
        for row in self.load().blueprints:
            exists = (self.root / row.file).exists()
            modified = self.has_local_changes(row) if exists else False
            results.append(
                SyncStatusEntry(blueprint=row, file_exists=exists, local_modified=modified)
            )
        return results

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def track(
        self,
        blueprint_id: str,
        name: str,
        file: Union[str, Path],
        content: str,
        source: BlueprintSource,
        version: Optional[str] = None,
        hierarchy_id: Optional[str] = None,
        hierarchy_name: Optional[str] = None,
        repository_path: Optional[str] = None,
    ) -> TrackedBlueprint:
        """Record ``file`` as derived from a blueprint, replacing any old row.

        Args:
            blueprint_id: Remote blueprint id.
            name: Display name.
            file: Local path (relative to root, or absolute under it).
            content: Content the checksum is taken from.
            source: Where the blueprint came from.
            version: Optional upstream version.
            hierarchy_id: Optional monorepo hierarchy id.
            hierarchy_name: Optional hierarchy display name.
            repository_path: Optional path within the hierarchy.

        Returns:
            The new ledger row.
        """
        source = BlueprintSource(source)
        row = TrackedBlueprint(
            id=blueprint_id,
            source=source,
            file=self.normalize(file),
            name=name,
            pulled_at=datetime.now(timezone.utc),
            checksum=calculate_checksum(content),
            version=version,
            editable=source != BlueprintSource.MARKETPLACE,
            can_pull=True,
            hierarchy_id=hierarchy_id,
            hierarchy_name=hierarchy_name,
            repository_path=repository_path,
        )
        config = self.load()
        config.upsert(row)
        self.save(config)
        logger.info("Tracking %s as %s (%s)", row.file, row.id, row.source.value)
        return row

    def update_checksum(self, file: Union[str, Path], content: str) -> bool:
        """Re-fingerprint a tracked file after a push or pull.

        Returns:
            False if the file is not tracked (nothing is written).
        """
        config = self.load()
        row = config.get(self.normalize(file))
        if row is None:
            return False
        row.checksum = calculate_checksum(content)
        row.pulled_at = datetime.now(timezone.utc)
        self.save(config)
        return True

    def untrack(self, file: Union[str, Path]) -> bool:
        """Remove the row for ``file``. Returns True if there was one."""
        config = self.load()
        if not config.remove(self.normalize(file)):
            return False
        self.save(config)
        logger.info("Untracked %s", file)
        return True

    def link(
        self,
        file: Union[str, Path],
        blueprint_id: str,
        name: str,
        source: BlueprintSource,
    ) -> TrackedBlueprint:
        """Start tracking an existing local file without overwriting it.

        Raises:
            SourceNotFound: If the file cannot be read.
        """
        key = self.normalize(file)
        try:
            content = (self.root / key).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceNotFound(key, str(exc)) from exc
        return self.track(blueprint_id, name, key, content, source)

    def assign_hierarchy(
        self,
        file: Union[str, Path],
        hierarchy_id: str,
        hierarchy_name: Optional[str] = None,
        repository_path: Optional[str] = None,
    ) -> bool:
        """Attach a tracked file to a monorepo hierarchy."""
        config = self.load()
        row = config.get(self.normalize(file))
        if row is None:
            return False
        row.hierarchy_id = hierarchy_id
        row.hierarchy_name = hierarchy_name
        row.repository_path = repository_path or row.file
        self.save(config)
        return True

    def clear_hierarchy(self, file: Union[str, Path]) -> bool:
        """Detach a tracked file from its hierarchy."""
        config = self.load()
        row = config.get(self.normalize(file))
        if row is None or row.hierarchy_id is None:
            return False
        row.hierarchy_id = None
        row.hierarchy_name = None
        row.repository_path = None
        self.save(config)
        return True
