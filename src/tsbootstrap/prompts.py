"""Interactive input used when the caller has not supplied every choice."""

from __future__ import annotations

from typing import Protocol

import typer

from .exceptions import PromptUnavailableError


class Prompter(Protocol):
    """Asks the user for text or a yes/no decision."""

    def ask(self, question: str, default: str | None = None) -> str:
        ...

    def confirm(self, question: str, default: bool = False) -> bool:
        ...


class TyperPrompter:
    """Prompts on the terminal through Typer."""

    def ask(self, question: str, default: str | None = None) -> str:
        return typer.prompt(question, default=default)

    def confirm(self, question: str, default: bool = False) -> bool:
        return typer.confirm(question, default=default)


class NonInteractivePrompter:
    """Refuses every prompt; used when prompts are disabled (``--yes``)."""

    def ask(self, question: str, default: str | None = None) -> str:
        msg = f"Input required but prompts are disabled: {question}"
        raise PromptUnavailableError(msg, details={"question": question})

    def confirm(self, question: str, default: bool = False) -> bool:
        msg = f"Confirmation required but prompts are disabled: {question}"
        raise PromptUnavailableError(msg, details={"question": question})
