"""Project commands: init and sync."""

from __future__ import annotations

import sys

import click

from ._common import (
    console,
    fail,
    fail_on,
    plural,
    project_root,
    prompter_for,
    root_option,
    yes_option,
)
from .. import PROJECT_DIR
from ..config import RULES_DIR, init_project, is_initialized
from ..errors import ConfigMissing, RulecastError


def register_sync_commands(main: click.Group) -> None:
    """Register init and sync on the main CLI group."""

    @main.command()
    @root_option
    @click.option("--agent", "-a", "agents", multiple=True, help="Agent id to enable (repeatable).")
    @click.option("--force", is_flag=True, help="Overwrite an existing conf.yml.")
    def init(root, agents, force):
        """Set up .rulecast/ with a config and a starter rules file.

        Without --agent, enables the agents already detected in the
        project, or the two most popular ones.
        """
        from ..agents.detector import recommended_agents

        root_path = project_root(root)
        if is_initialized(root_path) and not force:
            console.print(f"[yellow]Already initialized:[/] {PROJECT_DIR}/conf.yml (use --force to recreate)")
            sys.exit(1)

        ids = list(agents) or [a.id for a in recommended_agents(root_path)]
        try:
            path = init_project(root_path, ids, force=force)
        except RulecastError as exc:
            fail_on(exc)

        console.print(f"\n  [green]Initialized[/] {path}")
        console.print(f"  Exporters: [cyan]{', '.join(ids)}[/]")
        console.print(f"  [dim]Write rules in {PROJECT_DIR}/{RULES_DIR}/ then run 'rulecast sync'.[/]\n")

    @main.command()
    @root_option
    @click.option("--dry-run", is_flag=True, help="Show what would be written.")
    @click.option("--force", is_flag=True, help="Skip confirmation (for CI).")
    @yes_option
    def sync(root, dry_run, force, assume_yes):
        """Write the rules to every enabled agent."""
        from ..sync import SyncEngine

        root_path = project_root(root)
        try:
            engine = SyncEngine(root_path)
        except ConfigMissing:
            console.print("[yellow]rulecast is not initialized in this project.[/]")
            console.print("[dim]Run 'rulecast init' first.[/]")
            return
        except RulecastError as exc:
            fail_on(exc)

        if not engine.config.exporters:
            console.print("[yellow]No exporters configured.[/]")
            console.print("[dim]Run 'rulecast agents enable <agent>'.[/]")
            return

        try:
            plan = engine.plan()
        except RulecastError as exc:
            fail_on(exc)
        if plan.unknown:
            console.print(f"[yellow]Unknown exporters (skipped):[/] {', '.join(plan.unknown)}")
        if not plan.targets:
            fail("No valid exporters configured.")

        console.print(f"[dim]Exporters: {', '.join(a.name for a in plan.targets)}[/]")

        if not plan.has_rules:
            console.print(f"[yellow]No rules found in {PROJECT_DIR}/{RULES_DIR}/.[/]")
            return
        console.print(f"[dim]Loaded {plural(len(plan.rule_files), 'rule file')}[/]\n")

        if dry_run:
            report = engine.run(plan, dry_run=True)
            console.print("[cyan]Dry run - no files will be written[/]\nWould write:")
            for path in report.written:
                console.print(f"  [dim]{path}[/]")
            console.print()
            return

        prompter = prompter_for(assume_yes or force)
        if not prompter.confirm(f"Sync to {plural(len(plan.targets), 'agent')}?", default=True):
            console.print("[dim]Cancelled.[/]")
            return

        report = engine.run(plan)

        if report.written:
            console.print(f"[green]Synced to {plural(len(report.written), 'agent')}:[/]")
            for path in report.written:
                console.print(f"  [dim]{path}[/]")
        if report.errors:
            console.print("\n[red]Errors:[/]")
            for error in report.errors:
                console.print(f"  [red]{error}[/]")
            sys.exit(1)
        console.print()
