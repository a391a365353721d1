"""
Confirmation capability.

Every gated action (installing a tool, overwriting an artifact, running a
cracking job) asks a Confirmer instead of reading stdin directly, so the lab
can run headless in scripts and tests.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum

from rich.console import Console
from rich.prompt import Confirm

logger = logging.getLogger(__name__)


class ConfirmMode(str, Enum):
    ASK = "ask"
    YES = "yes"
    NO = "no"


class Confirmer(ABC):
    """Answers yes/no questions for gated actions."""

    @abstractmethod
    def confirm(self, question: str) -> bool:
        """Return True when the action described by QUESTION may proceed."""


class AlwaysYes(Confirmer):
    def confirm(self, question: str) -> bool:
        logger.debug("Auto-confirmed: %s", question)
        return True


class AlwaysNo(Confirmer):
    def confirm(self, question: str) -> bool:
        logger.debug("Auto-declined: %s", question)
        return False


class InteractivePrompt(Confirmer):
    """Blocking y/n prompt on the terminal; re-asks until it gets an answer."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def confirm(self, question: str) -> bool:
        return Confirm.ask(question, console=self.console)


def confirmer_for(mode: ConfirmMode | str, console: Console | None = None) -> Confirmer:
    mode = ConfirmMode(mode)
    if mode is ConfirmMode.YES:
        return AlwaysYes()
    if mode is ConfirmMode.NO:
        return AlwaysNo()
    return InteractivePrompt(console)
