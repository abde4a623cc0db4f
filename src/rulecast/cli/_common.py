"""Shared utilities for all CLI command modules.

Provides the Rich console instance, the --root option, state
formatting helpers, and the error exit used by every command group.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console

from .. import BLUEPRINT_STORE
from ..errors import RulecastError
from ..models import BlueprintSource, TrackingState
from ..prompts import Prompter, get_prompter

console = Console()

root_option = click.option(
    "--root",
    default=".",
    type=click.Path(file_okay=False),
    help="Project root (default: current directory).",
)

store_option = click.option(
    "--store",
    default=BLUEPRINT_STORE,
    type=click.Path(file_okay=False),
    show_default=True,
    help="Blueprint store directory (env: RULECAST_STORE).",
)

yes_option = click.option(
    "--yes", "-y", "assume_yes", is_flag=True,
    help="Answer yes to every prompt.",
)


def project_root(root: str) -> Path:
    return Path(root).expanduser()


def prompter_for(assume_yes: bool) -> Prompter:
    return get_prompter(assume_yes)


def fail(message: str) -> NoReturn:
    """Print a red error and exit 1."""
    console.print(f"[bold red]x[/] {message}")
    sys.exit(1)


def fail_on(exc: RulecastError) -> NoReturn:
    fail(str(exc))


def state_icon(state: TrackingState) -> str:
    """Map a tracked file's state to a Rich-formatted indicator.

    Args:
        state: Derived sync state.

    Returns:
        str: Rich markup string for the state.
    """
    return {
        TrackingState.SYNCED: "[bold green]IN SYNC[/]",
        TrackingState.MODIFIED: "[bold yellow]MODIFIED[/]",
        TrackingState.MISSING: "[bold red]MISSING[/]",
    }.get(state, "[dim]UNKNOWN[/]")


def source_label(source: BlueprintSource) -> str:
    return {
        BlueprintSource.MARKETPLACE: "[dim]marketplace[/]",
        BlueprintSource.TEAM: "[blue]team[/]",
        BlueprintSource.PRIVATE: "[green]private[/]",
        BlueprintSource.LOCAL: "[dim]local[/]",
    }.get(source, source.value)


def plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"
