"""
rulecast CLI -- author rules once, sync them to every AI agent.

Each command group lives in its own module and is registered on the
main Click group below.

Entry point: rulecast.cli:main
"""

from __future__ import annotations

import logging

import click

from .. import __version__


@click.group()
@click.version_option(version=__version__, prog_name="rulecast")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose):
    """rulecast -- one set of AI coding rules, every agent's format.

    Sync rules to Cursor, Claude Code, Copilot and friends, track files
    pulled from shared blueprints, and merge rule documents.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# Register all command groups/commands from modular files
# ---------------------------------------------------------------------------

from .sync_cmd import register_sync_commands
from .agents import register_agents_commands
from .status import register_status_commands
from .link import register_link_commands
from .blueprints import register_blueprint_commands
from .merge import register_merge_commands

register_sync_commands(main)
register_agents_commands(main)
register_status_commands(main)
register_link_commands(main)
register_blueprint_commands(main)
register_merge_commands(main)
