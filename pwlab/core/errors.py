"""Lab error types.

Corpus and derivation errors abort a run. Tool errors are reported per
invocation and never stop the remaining steps.
"""

from __future__ import annotations

from pathlib import Path


class LabError(Exception):
    """Base class for all pwlab errors."""


class CorpusReadError(LabError):
    """The password corpus could not be read."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"cannot read corpus {self.path}: {reason}")


class UnsupportedAlgorithmError(LabError):
    """A required hashing primitive is not available."""

    def __init__(self, algorithm: str, reason: str) -> None:
        self.algorithm = algorithm
        self.reason = reason
        super().__init__(f"hash algorithm {algorithm} unavailable: {reason}")


class ArtifactWriteError(LabError):
    """Writing an artifact file failed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"cannot write {self.path}: {reason}")


class ToolUnavailableError(LabError):
    """A required external executable is not on the execution path."""

    def __init__(self, tool: str, reason: str = "not found on PATH") -> None:
        self.tool = tool
        self.reason = reason
        super().__init__(f"{tool} unavailable: {reason}")


class ToolInvocationError(LabError):
    """An external tool exited with a non-zero status."""

    def __init__(self, tool: str, argv: list[str], returncode: int, target: Path | None = None) -> None:
        self.tool = tool
        self.argv = list(argv)
        self.returncode = returncode
        self.target = target
        where = f" on {target}" if target is not None else ""
        super().__init__(f"{tool} exited with status {returncode}{where}")


__all__ = [
    "ArtifactWriteError",
    "CorpusReadError",
    "LabError",
    "ToolInvocationError",
    "ToolUnavailableError",
    "UnsupportedAlgorithmError",
]
