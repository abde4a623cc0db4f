"""Prompt providers -- the only place rulecast waits on a human.

Commands take a Prompter and never call click.prompt directly, so a
scripted "--yes" run goes through exactly the same code path as an
interactive one.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

import click


class Prompter(ABC):
    """Yes/no, single-select and multi-select questions.

    Select methods return None when the user cancels.
    """

    @abstractmethod
    def confirm(self, message: str, default: bool = True) -> bool:
        ...

    @abstractmethod
    def select(self, message: str, choices: Sequence[str]) -> Optional[str]:
        ...

    @abstractmethod
    def multiselect(
        self,
        message: str,
        choices: Sequence[str],
        selected: Optional[Sequence[str]] = None,
    ) -> Optional[List[str]]:
        ...


class AssumeYesPrompter(Prompter):
    """Non-interactive answers: yes, the first choice, the pre-selection."""

    def confirm(self, message: str, default: bool = True) -> bool:
        return True

    def select(self, message: str, choices: Sequence[str]) -> Optional[str]:
        return choices[0] if choices else None

    def multiselect(self, message, choices, selected=None):
        return list(selected) if selected is not None else list(choices)


class ClickPrompter(Prompter):
    """Terminal prompts via click."""

    def confirm(self, message: str, default: bool = True) -> bool:
        return click.confirm(message, default=default)

    def select(self, message: str, choices: Sequence[str]) -> Optional[str]:
        if not choices:
            return None
        for i, choice in enumerate(choices, 1):
            click.echo(f"  {i}) {choice}")
        index = click.prompt(
            message,
            type=click.IntRange(0, len(choices)),
            default=1,
            show_default=True,
        )
        return choices[index - 1] if index else None

    def multiselect(self, message, choices, selected=None):
        if not choices:
            return None
        preselected = set(selected) if selected is not None else set(choices)
        for i, choice in enumerate(choices, 1):
            mark = "x" if choice in preselected else " "
            click.echo(f"  [{mark}] {i}) {choice}")
        default = ",".join(
            str(i) for i, c in enumerate(choices, 1) if c in preselected
        )
        raw = click.prompt(
            f"{message} (comma-separated numbers, blank to cancel)",
            default=default,
            show_default=False,
        )
        picked = []
        for token in raw.replace(" ", "").split(","):
            if not token:
                continue
            if not token.isdigit() or not 1 <= int(token) <= len(choices):
                raise click.BadParameter(f"not a choice: {token}")
            picked.append(choices[int(token) - 1])
        return picked or None


def get_prompter(assume_yes: bool = False) -> Prompter:
    return AssumeYesPrompter() if assume_yes else ClickPrompter()
