"""Package-manager bootstrap for the external cracking tools."""

from .installer import INSTALL_COMMANDS, PACKAGES, UPDATE_COMMANDS, InstallOutcome, ToolInstaller

__all__ = [
    "INSTALL_COMMANDS",
    "PACKAGES",
    "UPDATE_COMMANDS",
    "InstallOutcome",
    "ToolInstaller",
]
