"""Blueprint store commands: pull, push, diff, hierarchy."""

from __future__ import annotations

import difflib

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
from ..errors import NotEditable, RulecastError


def register_blueprint_commands(main: click.Group) -> None:
    """Register pull, push, diff and the hierarchy group."""

    @main.command()
    @click.argument("blueprint_id")
    @click.option("--file", "-f", "file", default=None, help="Where to write (default: by blueprint type).")
    @root_option
    @store_option
    @yes_option
    def pull(blueprint_id, file, root, store, assume_yes):
        """Download a blueprint and start tracking it."""
        from ..remote import LocalDirectoryStore
        from ..tracker import BlueprintTracker

        root_path = project_root(root)
        tracker = BlueprintTracker(root_path)
        prompter = prompter_for(assume_yes)

        try:
            blueprint = LocalDirectoryStore(store).get_blueprint(blueprint_id)
        except RulecastError as exc:
            fail_on(exc)

        if not blueprint.content:
            fail("Blueprint has no content.")

        file = file or blueprint.default_filename
        target = root_path / file

        if target.exists():
            tracked = tracker.find_by_file(file)
            if tracked and tracker.has_local_changes(tracked):
                console.print(f"[yellow]{file} has local changes that will be lost.[/]")
            if not prompter.confirm(f"File {file} already exists. Overwrite?", default=False):
                console.print("[yellow]Aborted.[/]")
                return

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(blueprint.content, encoding="utf-8")
        except OSError as exc:
            fail(f"Could not write {file}: {exc}")
        row = tracker.track(
            blueprint.id,
            blueprint.name,
            file,
            blueprint.content,
            blueprint.source,
            version=blueprint.version,
        )

        console.print(f"\n[green]Downloaded[/] [bold]{blueprint.name}[/]")
        console.print(f"  [dim]File:[/] [cyan]{row.file}[/]")
        console.print(f"  [dim]Source:[/] {row.source.value}")
        if not row.editable:
            console.print("  [dim]Marketplace blueprint: local edits stay local.[/]")
        console.print()

    @main.command()
    @click.argument("file")
    @root_option
    @store_option
    @yes_option
    def push(file, root, store, assume_yes):
        """Upload local changes of a tracked FILE to its blueprint."""
        from ..remote import LocalDirectoryStore
        from ..tracker import BlueprintTracker

        root_path = project_root(root)
        tracker = BlueprintTracker(root_path)

        row = tracker.find_by_file(file)
        if row is None:
            fail(f"{file} is not tracked. Use 'rulecast link' first.")
        if not row.editable:
            fail_on(NotEditable(row.file))

        try:
            content = (root_path / row.file).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            fail(f"Could not read {row.file}: {exc}")

        if not tracker.has_local_changes(row):
            console.print(f"[green]{row.file} is already in sync.[/]")
            return

        if not prompter_for(assume_yes).confirm(f"Push changes to {row.id}?", default=True):
            console.print("[yellow]Push cancelled.[/]")
            return

        try:
            LocalDirectoryStore(store).push_blueprint(row.id, content)
        except RulecastError as exc:
            fail_on(exc)
        tracker.update_checksum(row.file, content)
        console.print(f"[green]Updated[/] [bold]{row.name}[/] [dim]({row.id})[/]")

    @main.command()
    @click.argument("file")
    @root_option
    @store_option
    def diff(file, root, store):
        """Show how a tracked FILE differs from its blueprint."""
        from ..remote import LocalDirectoryStore
        from ..tracker import BlueprintTracker

        root_path = project_root(root)
        row = BlueprintTracker(root_path).find_by_file(file)
        if row is None:
            fail(f"{file} is not tracked.")

        try:
            remote = LocalDirectoryStore(store).get_blueprint(row.id)
        except RulecastError as exc:
            fail_on(exc)
        try:
            local = (root_path / row.file).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            fail(f"Could not read {row.file}: {exc}")

        lines = list(difflib.unified_diff(
            remote.content.splitlines(keepends=True),
            local.splitlines(keepends=True),
            fromfile=f"{row.id} (remote)",
            tofile=f"{row.file} (local)",
        ))
        if not lines:
            console.print(f"[green]No differences[/] between {row.file} and {row.id}.")
            return

        for line in lines:
            text = line.rstrip("\n")
            if line.startswith(("+++", "---")):
                style = "bold"
            elif line.startswith("+"):
                style = "green"
            elif line.startswith("-"):
                style = "red"
            elif line.startswith("@@"):
                style = "cyan"
            else:
                style = None
            console.print(text, style=style, markup=False, highlight=False)

    @main.group()
    def hierarchy():
        """Group tracked blueprints by repository hierarchy."""

    @hierarchy.command("assign")
    @click.argument("file")
    @click.argument("hierarchy_id")
    @click.option("--name", default=None, help="Hierarchy display name.")
    @click.option("--path", "repository_path", default=None, help="Path within the repository.")
    @root_option
    def hierarchy_assign(file, hierarchy_id, name, repository_path, root):
        """Attach a tracked FILE to HIERARCHY_ID."""
        from ..tracker import BlueprintTracker

        tracker = BlueprintTracker(project_root(root))
        if not tracker.assign_hierarchy(file, hierarchy_id, name, repository_path):
            fail(f"{file} is not tracked.")
        console.print(f"[green]Assigned[/] {file} -> {name or hierarchy_id}")

    @hierarchy.command("clear")
    @click.argument("file")
    @root_option
    def hierarchy_clear(file, root):
        """Detach a tracked FILE from its hierarchy."""
        from ..tracker import BlueprintTracker

        if not BlueprintTracker(project_root(root)).clear_hierarchy(file):
            fail(f"{file} is not tracked or has no hierarchy.")
        console.print(f"[green]Cleared hierarchy[/] for {file}")

    @hierarchy.command("list")
    @root_option
    def hierarchy_list(root):
        """List tracked blueprints grouped by hierarchy."""
        from ..tracker import BlueprintTracker

        groups = {}
        for row in BlueprintTracker(project_root(root)).all():
            if row.hierarchy_id:
                groups.setdefault(row.hierarchy_id, []).append(row)

        if not groups:
            console.print("[yellow]No hierarchies found.[/]")
            return

        for hierarchy_id, rows in groups.items():
            label = rows[0].hierarchy_name or hierarchy_id
            console.print(f"\n  [bold]{label}[/] [dim]({hierarchy_id})[/]")
            for row in rows:
                console.print(f"    [cyan]{row.repository_path or row.file}[/] [dim]{row.id}[/]")
        console.print()
