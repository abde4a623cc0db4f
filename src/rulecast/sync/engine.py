"""
Sync Engine -- project the authored rules into every enabled agent.

    rulecast sync  ->  conf.yml -> resolve exporters -> load rules
                   ->  format + write each target, collecting failures

Targets are written one after another. A failure on one target is
recorded in the report and the remaining targets are still attempted.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from ..agents.formatter import resolve_output_path, write_agent_output
from ..agents.registry import get_agent
from ..config import load_project_config, load_rules
from ..errors import WriteFailure
from ..models import ProjectConfig
from .models import SyncPlan, SyncReport

logger = logging.getLogger("rulecast.sync.engine")


class SyncEngine:
    """Writes a project's rules to all of its configured agents.

    Args:
        root: Project root containing .rulecast/.
        config: Pre-loaded conf.yml. Loaded from disk when omitted.
    """

    def __init__(
        self,
        root: Union[str, Path],
        config: Optional[ProjectConfig] = None,
    ) -> None:
        self.root = Path(root).expanduser()
        self.config = config or load_project_config(self.root)

    def plan(self) -> SyncPlan:
        """Resolve exporters against the registry and load the rules.

        Unknown exporter ids are kept aside with a warning; they never
        stop the known ones from syncing.
        """
        plan = SyncPlan()
        for agent_id in self.config.exporters:
            agent = get_agent(agent_id)
            if agent is None:
                logger.warning("Unknown exporter %r, skipping", agent_id)
                plan.unknown.append(agent_id)
                continue
            plan.targets.append(agent)

        rules = load_rules(self.root, self.config)
        if rules is not None:
            plan.rule_files = [f.name for f in rules.files]
            plan.content = rules.combined
        return plan

    def run(self, plan: Optional[SyncPlan] = None, dry_run: bool = False) -> SyncReport:
        """Write every target in the plan.

        Args:
            plan: Output of plan(). Computed when omitted.
            dry_run: Report the paths that would be written without writing.

        Returns:
            SyncReport with written paths, skipped ids and collected errors.
        """
        plan = plan or self.plan()
        report = SyncReport(skipped=list(plan.unknown), dry_run=dry_run)

        if plan.content is None:
            logger.info("No rule content; nothing to sync")
            report.skipped.extend(a.id for a in plan.targets)
            return report

        for agent in plan.targets:
            if dry_run:
                report.written.append(self._relative(resolve_output_path(self.root, agent)))
                continue
            try:
                path = write_agent_output(self.root, agent, plan.content)
            except WriteFailure as exc:
                logger.warning("Sync to %s failed: %s", agent.id, exc.reason)
                report.errors.append(str(exc))
                continue
            report.written.append(self._relative(path))

        return report

    def _relative(self, path: Path) -> str:
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return str(path)
