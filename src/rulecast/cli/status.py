"""Status commands: status (tracked blueprints and their drift)."""

from __future__ import annotations

import json
from pathlib import Path

import click
from rich.table import Table

from ._common import console, project_root, root_option, source_label, state_icon
from ..models import TrackingState


def render_tracked(root_path: Path) -> None:
    """Print every tracked file with its derived sync state."""
    from ..tracker import BlueprintTracker

    entries = BlueprintTracker(root_path).check_sync_status()

    if not entries:
        console.print("\n  [dim]No blueprints are currently tracked.[/]\n")
        console.print("  [dim]rulecast pull <id>          Download and track a blueprint[/]")
        console.print("  [dim]rulecast link <file> <id>   Track an existing file[/]\n")
        return

    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("File", style="cyan")
    table.add_column("State")
    table.add_column("Source")
    table.add_column("Blueprint")
    table.add_column("Pulled", style="dim")

    for entry in entries:
        bp = entry.blueprint
        name = f"{bp.name} [dim]({bp.id})[/]"
        if bp.hierarchy_name or bp.hierarchy_id:
            name += f"\n[dim]hierarchy: {bp.hierarchy_name or bp.hierarchy_id}[/]"
        table.add_row(
            bp.file,
            state_icon(entry.state),
            source_label(bp.source),
            name,
            bp.pulled_at.strftime("%Y-%m-%d %H:%M"),
        )

    console.print()
    console.print(table)

    modified = [e for e in entries if e.state == TrackingState.MODIFIED]
    missing = [e for e in entries if e.state == TrackingState.MISSING]
    if modified:
        console.print(f"\n  [yellow]{len(modified)} modified locally.[/]", end="")
        if any(not e.blueprint.editable for e in modified):
            console.print(" [dim]Marketplace files are never pushed back.[/]", end="")
    if missing:
        console.print(f"\n  [red]{len(missing)} missing from disk.[/]", end="")
    console.print("\n")


def register_status_commands(main: click.Group) -> None:
    """Register the status command on the main CLI group."""

    @main.command()
    @root_option
    @click.option("--json-out", is_flag=True, help="Output as JSON.")
    def status(root, json_out):
        """Show tracked blueprints and whether they drifted."""
        from ..tracker import BlueprintTracker

        root_path = project_root(root)
        if json_out:
            entries = BlueprintTracker(root_path).check_sync_status()
            click.echo(json.dumps([
                {
                    **e.blueprint.model_dump(mode="json", by_alias=True, exclude_none=True),
                    "fileExists": e.file_exists,
                    "localModified": e.local_modified,
                    "state": e.state.value,
                }
                for e in entries
            ], indent=2))
            return

        console.print(f"\n  [bold]rulecast status[/] [dim]{root_path.resolve()}[/]")
        render_tracked(root_path)
