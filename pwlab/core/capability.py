"""
pwlab Capability Set - Which external cracking tools are usable.

The set is built once (from PATH, or explicitly in tests) and injected into
the runner and installer instead of consulting process-wide state on every
call.

Usage:
    caps = ToolCapabilities.detect({"john": "john", "hashcat": "hashcat"})

    if caps.is_available("john"):
        ...

    path = caps.require("hashcat")  # raises ToolUnavailableError
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from .errors import ToolUnavailableError

logger = logging.getLogger(__name__)

STANDARD_TOOLS = ("john", "hashcat")


@dataclass
class CapabilityStatus:
    """Status of one external tool."""
    name: str
    available: bool
    path: str | None = None
    reason: str = ""
    last_checked: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "available": self.available,
            "path": self.path,
            "reason": self.reason,
            "last_checked": self.last_checked.isoformat(),
        }


class ToolCapabilities:
    """Immutable view of which tools may be invoked."""

    def __init__(self, statuses: Iterable[CapabilityStatus] = ()) -> None:
        self._statuses: dict[str, CapabilityStatus] = {s.name: s for s in statuses}

    @classmethod
    def detect(
        cls,
        executables: Mapping[str, str] | None = None,
        which: Callable[[str], str | None] = shutil.which,
    ) -> ToolCapabilities:
        """Resolve each tool name -> executable via WHICH."""
        executables = executables or {name: name for name in STANDARD_TOOLS}
        statuses = []
        for name, executable in executables.items():
            resolved = which(executable)
            if resolved:
                statuses.append(CapabilityStatus(name=name, available=True, path=resolved, reason="found"))
            else:
                statuses.append(CapabilityStatus(name=name, available=False, reason=f"{executable} not found on PATH"))
        caps = cls(statuses)
        logger.info("Tool capabilities: %s", ", ".join(f"{s.name}={s.available}" for s in statuses) or "none")
        return caps

    @classmethod
    def from_paths(cls, paths: Mapping[str, str]) -> ToolCapabilities:
        """Declare tools as available without looking at PATH."""
        return cls(CapabilityStatus(name=name, available=True, path=path, reason="declared") for name, path in paths.items())

    @classmethod
    def none(cls) -> ToolCapabilities:
        return cls()

    def is_available(self, name: str) -> bool:
        status = self._statuses.get(name)
        return bool(status and status.available)

    def get_status(self, name: str) -> CapabilityStatus | None:
        return self._statuses.get(name)

    def require(self, name: str) -> str:
        """Return the executable path for NAME or raise ToolUnavailableError."""
        status = self._statuses.get(name)
        if not status or not status.available or not status.path:
            raise ToolUnavailableError(name, status.reason if status and status.reason else "not found on PATH")
        return status.path

    @property
    def available(self) -> list[str]:
        return [name for name, s in self._statuses.items() if s.available]

    @property
    def missing(self) -> list[str]:
        return [name for name, s in self._statuses.items() if not s.available]

    def with_status(self, status: CapabilityStatus) -> ToolCapabilities:
        """Copy with one tool's status replaced."""
        statuses = dict(self._statuses)
        statuses[status.name] = status
        return ToolCapabilities(statuses.values())

    def to_dict(self) -> dict[str, Any]:
        return {name: s.to_dict() for name, s in self._statuses.items()}
