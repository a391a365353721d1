"""
Tool Installer - Makes john and hashcat available before cracking.

Detects a package manager (Homebrew, then apt-get), and for each missing
tool asks the Confirmer before installing it. The package index is
refreshed once, right after the first install is confirmed. Install
failures are logged and reported; the lab simply skips the exercises of a
tool that is still missing afterwards.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from ...core.capability import ToolCapabilities
from ...core.confirm import Confirmer

logger = logging.getLogger(__name__)


# package name per tool and package manager
PACKAGES = {
    "brew": {"john": "john", "hashcat": "hashcat"},
    "apt-get": {"john": "john", "hashcat": "hashcat"},
}

INSTALL_COMMANDS = {
    "brew": ["brew", "install"],
    "apt-get": ["sudo", "apt-get", "install", "-y"],
}

# refreshed once, before the first install of a session
UPDATE_COMMANDS = {
    "brew": ["brew", "update"],
    "apt-get": ["sudo", "apt-get", "update"],
}


@dataclass
class InstallOutcome:
    """Result of ensuring one tool."""
    tool: str
    installed: bool = False
    already_present: bool = False
    declined: bool = False
    error: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "tool": self.tool,
            "installed": self.installed,
            "already_present": self.already_present,
            "declined": self.declined,
            "error": self.error,
        }


class ToolInstaller:
    """
    Installs missing cracking tools through the system package manager.

    Usage:
        installer = ToolInstaller(InteractivePrompt())
        caps, outcomes = installer.ensure({"john": "john", "hashcat": "hashcat"})
    """

    def __init__(
        self,
        confirmer: Confirmer,
        package_manager: str = "auto",
        which: Callable[[str], str | None] = shutil.which,
        run: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ) -> None:
        self.confirmer = confirmer
        self.package_manager = package_manager
        self._which = which
        self._run = run

    def detect_package_manager(self) -> str | None:
        if self.package_manager != "auto":
            return self.package_manager if self._which(self.package_manager) else None
        for candidate in ("brew", "apt-get"):
            if self._which(candidate):
                return candidate
        return None

    def install_command(self, manager: str, tool: str) -> list[str]:
        return [*INSTALL_COMMANDS[manager], PACKAGES[manager][tool]]

    def update(self, manager: str) -> bool:
        """Refresh the package index; a failure is logged and installing goes on."""
        cmd = UPDATE_COMMANDS[manager]
        logger.info("Updating package index: %s", " ".join(cmd))
        try:
            completed = self._run(cmd, check=False)
        except OSError as exc:
            logger.warning("%s failed: %s", " ".join(cmd), exc.strerror or exc)
            return False
        if completed.returncode != 0:
            logger.warning("%s exited with status %d", " ".join(cmd), completed.returncode)
            return False
        return True

    def ensure(
        self,
        executables: dict[str, str],
        tools: Iterable[str] | None = None,
    ) -> tuple[ToolCapabilities, list[InstallOutcome]]:
        """
        Make sure each tool is on PATH, installing with confirmation.

        Returns:
            Refreshed capabilities and one outcome per tool.
        """
        wanted = list(tools) if tools is not None else list(executables)
        outcomes: list[InstallOutcome] = []
        manager: str | None = None
        manager_checked = False
        updated = False

        for tool in wanted:
            executable = executables.get(tool, tool)
            outcome = InstallOutcome(tool=tool)
            outcomes.append(outcome)

            if self._which(executable):
                outcome.already_present = True
                continue

            if not manager_checked:
                manager = self.detect_package_manager()
                manager_checked = True
            if manager is None:
                outcome.error = "no supported package manager (brew, apt-get) found"
                logger.warning("Cannot install %s: %s", tool, outcome.error)
                continue
            if tool not in PACKAGES[manager]:
                outcome.error = f"no {manager} package known for {tool}"
                logger.warning("Cannot install %s: %s", tool, outcome.error)
                continue

            if not self.confirmer.confirm(f"Install {tool} via {manager}?"):
                outcome.declined = True
                logger.info("Install of %s declined; its exercises will be skipped", tool)
                continue

            if not updated:
                self.update(manager)
                updated = True

            cmd = self.install_command(manager, tool)
            logger.info("Installing %s: %s", tool, " ".join(cmd))
            try:
                completed = self._run(cmd, check=False)
            except OSError as exc:
                outcome.error = exc.strerror or str(exc)
                logger.error("Install of %s failed: %s", tool, outcome.error)
                continue
            if completed.returncode != 0:
                outcome.error = f"{' '.join(cmd)} exited with status {completed.returncode}"
                logger.error("Install of %s failed: %s", tool, outcome.error)
                continue
            outcome.installed = True

        caps = ToolCapabilities.detect(executables, which=self._which)
        return caps, outcomes
