"""Link commands: link and unlink a local file to a blueprint."""

from __future__ import annotations

import click

from ._common import (
    console,
    fail,
    fail_on,
    project_root,
    prompter_for,
    root_option,
    store_option,
    yes_option,
)
from ..errors import AlreadyLinked, BlueprintNotFound, RulecastError
from ..models import BlueprintSource

# Files offered when `link` is run without a file argument
CANDIDATE_FILES = [
    "AGENTS.md",
    "CLAUDE.md",
    ".cursor/rules/project.mdc",
    ".github/copilot-instructions.md",
    ".windsurfrules",
    ".zed/instructions.md",
    ".clinerules",
]


def register_link_commands(main: click.Group) -> None:
    """Register link and unlink on the main CLI group."""

    @main.command()
    @click.argument("file", required=False)
    @click.argument("blueprint_id", required=False)
    @click.option("--name", default=None, help="Display name (default: from the store, else the id).")
    @click.option(
        "--source",
        type=click.Choice([s.value for s in BlueprintSource]),
        default=None,
        help="Blueprint source (default: from the store, else 'local').",
    )
    @click.option("--list", "list_only", is_flag=True, help="List tracked blueprints.")
    @root_option
    @store_option
    @yes_option
    def link(file, blueprint_id, name, source, list_only, root, store, assume_yes):
        """Track an existing local FILE as derived from BLUEPRINT_ID.

        The file is not overwritten; its current content becomes the
        baseline for drift detection.
        """
        from ..remote import LocalDirectoryStore
        from ..tracker import BlueprintTracker
        from .status import render_tracked

        root_path = project_root(root)
        if list_only:
            render_tracked(root_path)
            return

        prompter = prompter_for(assume_yes)
        tracker = BlueprintTracker(root_path)
        remote = LocalDirectoryStore(store)

        if not file:
            found = [f for f in CANDIDATE_FILES if (root_path / f).exists()]
            if not found:
                fail("No AI configuration files found in this directory.")
            file = prompter.select("Which file do you want to link?", found)
            if not file:
                console.print("[dim]Cancelled.[/]")
                return

        if not (root_path / file).is_file():
            fail(f"File not found: {file}")

        existing = tracker.find_by_file(file)
        if existing:
            console.print(f"[yellow]This file is already linked to:[/] {existing.name}")
            console.print(f"[dim]   ID: {existing.id}[/]")
            if not prompter.confirm("Replace the existing link?", default=False):
                fail_on(AlreadyLinked(existing.file, existing.id, existing.name))

        if not blueprint_id:
            choices = {f"{bp.id} - {bp.name}": bp.id for bp in remote.list_blueprints()}
            if not choices:
                raise click.UsageError("BLUEPRINT_ID is required (no blueprints in the store).")
            picked = prompter.select("Select a blueprint", list(choices))
            if not picked:
                console.print("[dim]Cancelled.[/]")
                return
            blueprint_id = choices[picked]

        resolved_name, resolved_source = blueprint_id, BlueprintSource.LOCAL
        try:
            remote_bp = remote.get_blueprint(blueprint_id)
            resolved_name, resolved_source = remote_bp.name, remote_bp.source
            console.print(f"\n  Blueprint: [bold]{remote_bp.name}[/]")
            if remote_bp.description:
                console.print(f"  [dim]{remote_bp.description}[/]")
            console.print(f"  [dim]Visibility: {remote_bp.visibility.value}[/]\n")
        except BlueprintNotFound:
            console.print(f"[dim]{blueprint_id} is not in {remote.name}; linking by id only.[/]")
        except RulecastError as exc:
            fail_on(exc)

        name = name or resolved_name
        blueprint_source = BlueprintSource(source) if source else resolved_source

        if blueprint_source == BlueprintSource.MARKETPLACE:
            console.print("[yellow]This is a marketplace blueprint.[/]")
            console.print("[dim]  Local changes will NOT be pushed back.[/]")

        if not prompter.confirm(f"Link {file} to {name}?", default=True):
            console.print("[dim]Cancelled.[/]")
            return

        try:
            row = tracker.link(file, blueprint_id, name, blueprint_source)
        except RulecastError as exc:
            fail_on(exc)

        console.print(f"\n[green]Linked:[/] {row.file} -> {row.id}")
        console.print("[dim]  Run 'rulecast status' to see all tracked blueprints.[/]")
        if row.editable:
            console.print("[dim]  Run 'rulecast push' to push local changes.[/]")
        console.print()

    @main.command()
    @click.argument("file", required=False)
    @root_option
    @yes_option
    def unlink(file, root, assume_yes):
        """Stop tracking FILE. The file itself is left untouched."""
        from ..tracker import BlueprintTracker

        tracker = BlueprintTracker(project_root(root))
        prompter = prompter_for(assume_yes)

        if not file:
            tracked = [b.file for b in tracker.all()]
            if not tracked:
                console.print("[yellow]No files are currently linked to blueprints.[/]")
                return
            file = prompter.select("Which file do you want to unlink?", tracked)
            if not file:
                console.print("[dim]Cancelled.[/]")
                return

        row = tracker.find_by_file(file)
        if row is None:
            fail(f"File is not linked to any blueprint: {file}")

        console.print(f"[dim]Currently linked to: {row.name} ({row.id}, {row.source.value})[/]")
        if not prompter.confirm(f"Unlink {row.file} from {row.name}?", default=True):
            console.print("[dim]Cancelled.[/]")
            return

        if not tracker.untrack(row.file):
            fail("Failed to unlink file.")
        console.print(f"[green]Unlinked:[/] {row.file}")
        console.print("[dim]  The file is now standalone.[/]")
