"""Merge command: combine several rule documents into one."""

from __future__ import annotations

import sys

import click

from ._common import console, fail_on, project_root, prompter_for, root_option
from ..errors import OutputExists, RulecastError
from ..merge import MergeStrategy


def register_merge_commands(main: click.Group) -> None:
    """Register the merge command on the main CLI group."""

    @main.command()
    @click.argument("files", nargs=-1)
    @click.option("--output", "-o", default="merged.md", show_default=True, help="Output filename.")
    @click.option(
        "--strategy", "-s",
        type=click.Choice([s.value for s in MergeStrategy]),
        default=MergeStrategy.SMART.value,
        show_default=True,
        help="How sections are combined.",
    )
    @click.option("--force", is_flag=True, help="Overwrite an existing output file.")
    @click.option("--interactive", "-i", is_flag=True, help="Pick the sections to include.")
    @root_option
    def merge(files, output, strategy, force, interactive, root):
        """Merge two or more AI configuration FILES into one.

        \b
        Strategies:
          concat    keep each file together, separated by '---'
          sections  combine same-titled sections across files
          smart     longest section first, drop near-duplicates
        """
        from ..merge import merge_files, read_documents

        if len(files) < 2:
            raise click.UsageError(
                "Please provide at least 2 files to merge "
                "(e.g. rulecast merge AGENTS.md team-rules.md -o merged.md)"
            )

        root_path = project_root(root)
        console.print(f"\n  Files to merge: {len(files)}")
        console.print(f"  Strategy: {strategy}\n")

        try:
            if (root_path / output).exists() and not force:
                raise OutputExists(output)

            documents = read_documents(root_path, files)
            for file, sections in zip(files, documents):
                console.print(f"  [dim]v Read {file} ({len(sections)} sections)[/]")

            if interactive:
                flat = [s for sections in documents for s in sections]
                labels = []
                for s in flat:
                    label = f"[{s.source}] {s.title}"
                    n = 2
                    while label in labels:
                        label = f"[{s.source}] {s.title} ({n})"
                        n += 1
                    labels.append(label)
                picked = prompter_for(False).multiselect("Select sections to include", labels)
                if not picked:
                    console.print("[yellow]  No sections selected, aborting.[/]")
                    sys.exit(0)
                chosen = set(picked)
                documents = [[s for s, label in zip(flat, labels) if label in chosen]]

            result = merge_files(
                root_path, files, output=output, strategy=strategy,
                force=force, documents=documents,
            )
        except RulecastError as exc:
            fail_on(exc)

        console.print(f"\n  [green]Merged to {output}[/]")
        console.print(f"  [dim]Sources: {len(files)} files[/]")
        console.print(f"  [dim]Lines: {result.line_count}[/]")
        console.print(f"  [dim]Size: {result.size} bytes[/]\n")
