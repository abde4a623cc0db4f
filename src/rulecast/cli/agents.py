"""Agent commands: list, enable, disable, detect."""

from __future__ import annotations

import sys

import click
from rich.table import Table

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
from ..errors import RulecastError, UnknownTarget


def _load_exporters(root_path) -> list:
    from ..config import load_project_config

    try:
        return load_project_config(root_path).exporters
    except RulecastError:
        return []


def register_agents_commands(main: click.Group) -> None:
    """Register the agents command group."""

    @main.group()
    def agents():
        """Manage which AI coding agents receive your rules."""

    @agents.command("list")
    @root_option
    def agents_list(root):
        """Show enabled, detected, and available agents."""
        from ..agents.detector import detect_agents
        from ..agents.registry import AGENTS, display_name

        root_path = project_root(root)
        enabled = _load_exporters(root_path)
        detection = detect_agents(root_path)

        table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
        table.add_column("Agent", style="cyan")
        table.add_column("Name")
        table.add_column("Status")
        table.add_column("Output", style="dim")

        detected_ids = set(detection.agent_ids)
        for agent_id in enabled:
            agent = AGENTS.get(agent_id)
            output = agent.output if agent else "[red]unknown agent[/]"
            table.add_row(agent_id, display_name(agent_id), "[green]enabled[/]", output)
        for agent in AGENTS.values():
            if agent.id in enabled:
                continue
            status = "[yellow]detected[/]" if agent.id in detected_ids else "[dim]available[/]"
            table.add_row(agent.id, agent.name, status, agent.output)

        console.print()
        console.print(table)
        console.print()

    @agents.command("enable")
    @click.argument("agent_id", required=False)
    @root_option
    @yes_option
    def agents_enable(agent_id, root, assume_yes):
        """Enable an agent, or pick several interactively."""
        from ..agents.registry import AGENTS, get_agent
        from ..config import enable_agent, set_exporters

        root_path = project_root(root)

        if not agent_id:
            enabled = _load_exporters(root_path)
            labels = {f"{a.id} - {a.name}": a.id for a in AGENTS.values()}
            preselected = [label for label, aid in labels.items() if aid in enabled]
            picked = prompter_for(assume_yes).multiselect(
                "Select agents to enable", list(labels), selected=preselected,
            )
            if not picked:
                console.print("[yellow]No agents selected.[/]")
                return
            try:
                ids = set_exporters(root_path, [labels[p] for p in picked])
            except RulecastError as exc:
                fail_on(exc)
            console.print(f"[green]Enabled {plural(len(ids), 'agent')}[/]")
            return

        try:
            changed = enable_agent(root_path, agent_id)
        except UnknownTarget as exc:
            console.print(f"[red]Unknown agent: {exc.agent_id}[/]")
            if exc.suggestions:
                console.print("[dim]Did you mean:[/]")
                for suggestion in exc.suggestions:
                    console.print(f"  [dim]{suggestion}[/]")
            sys.exit(1)
        except RulecastError as exc:
            fail_on(exc)

        agent = get_agent(agent_id)
        if not changed:
            console.print(f"[yellow]{agent.name} is already enabled.[/]")
            return
        console.print(f"[green]Enabled {agent.name}[/]")
        console.print(f"[dim]Output: {agent.output}[/]")

    @agents.command("disable")
    @click.argument("agent_id")
    @root_option
    def agents_disable(agent_id, root):
        """Disable an agent. The last enabled agent cannot be disabled."""
        from ..agents.registry import display_name
        from ..config import disable_agent

        try:
            changed = disable_agent(project_root(root), agent_id)
        except RulecastError as exc:
            fail_on(exc)

        if not changed:
            fail(f"{display_name(agent_id)} is not enabled.")
        console.print(f"[green]Disabled {display_name(agent_id)}[/]")

    @agents.command("detect")
    @root_option
    @click.option("--enable", "do_enable", is_flag=True, help="Enable newly detected agents.")
    @yes_option
    def agents_detect(root, do_enable, assume_yes):
        """Detect agent configuration files already in the project."""
        from ..agents.detector import detect_agents
        from ..config import enable_agent

        root_path = project_root(root)
        detection = detect_agents(root_path)

        if not detection.detected:
            console.print("[yellow]No AI agent configuration files found.[/]")
            return

        console.print(f"\n  {detection.summary()}\n")
        for found in detection.detected:
            icon = "[green]v[/]" if found.has_content else "[dim]o[/]"
            rules = f" ({found.rule_count} sections)" if found.rule_count else ""
            console.print(f"  {icon} {found.agent.name}{rules}")
            for file in found.files:
                console.print(f"      [dim]{file}[/]")
        console.print()

        if not do_enable:
            return

        enabled = set(_load_exporters(root_path))
        new_ids = [aid for aid in detection.agent_ids if aid not in enabled]
        if not new_ids:
            console.print("[dim]All detected agents are already enabled.[/]")
            return
        if not prompter_for(assume_yes).confirm(
            f"Enable {plural(len(new_ids), 'detected agent')}?", default=True
        ):
            return
        try:
            for aid in new_ids:
                enable_agent(root_path, aid)
        except RulecastError as exc:
            fail_on(exc)
        console.print(f"[green]Enabled {plural(len(new_ids), 'agent')}[/]")
