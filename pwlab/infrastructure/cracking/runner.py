"""
Tool Runner - Runs john / hashcat against the lab's hash files.

Each invocation is independent and best effort:
- the tool must be in the capability set (ToolUnavailableError otherwise)
- an empty or missing hash file is skipped
- the Confirmer is asked before every run
- a non-zero exit is captured as ToolInvocationError, never raised
- Ctrl+C stops the current tool and the rest of the plan

Tools run in the foreground with the terminal attached; their output is
for the user and is not parsed. Artifact files are only read.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ...core.capability import ToolCapabilities
from ...core.confirm import Confirmer
from ...core.errors import LabError, ToolInvocationError, ToolUnavailableError
from ...domain.models import ArtifactKind, AttackKind, CrackedCredential, HashAlgorithm
from .hashcat_manager import DEFAULT_MASK, HashcatManager
from .john_manager import JohnManager

if TYPE_CHECKING:
    from ..storage.artifact_store import ArtifactStore

logger = logging.getLogger(__name__)


class InvocationStatus(str, Enum):
    """Outcome of one tool invocation."""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    DECLINED = "declined"
    SKIPPED = "skipped"
    INTERRUPTED = "interrupted"


# (tool, hash file, attack) run by default
DEFAULT_PLAN: tuple[tuple[str, HashAlgorithm, AttackKind], ...] = (
    ("john", HashAlgorithm.MD5, AttackKind.DICTIONARY),
    ("john", HashAlgorithm.SHA256, AttackKind.DICTIONARY),
    ("john", HashAlgorithm.SHA512CRYPT, AttackKind.BATCH),
    ("hashcat", HashAlgorithm.SHA256, AttackKind.DICTIONARY),
)

# Printed as reference; includes the slower rules and mask exercises
RECOMMENDED_PLAN: tuple[tuple[str, HashAlgorithm, AttackKind], ...] = (
    ("john", HashAlgorithm.MD5, AttackKind.DICTIONARY),
    ("john", HashAlgorithm.SHA256, AttackKind.DICTIONARY),
    ("john", HashAlgorithm.SHA256, AttackKind.RULES),
    ("john", HashAlgorithm.SHA512CRYPT, AttackKind.BATCH),
    ("hashcat", HashAlgorithm.SHA256, AttackKind.DICTIONARY),
    ("hashcat", HashAlgorithm.SHA256, AttackKind.MASK),
)


@dataclass
class ToolInvocation:
    """One fully-built external command."""
    tool: str
    algorithm: HashAlgorithm
    attack: AttackKind
    argv: list[str]
    hash_file: Path

    @property
    def command(self) -> str:
        return shlex.join(self.argv)

    @property
    def description(self) -> str:
        return f"{self.tool} {self.attack.value} attack on {self.hash_file.name}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "tool": self.tool,
            "algorithm": self.algorithm.value,
            "attack": self.attack.value,
            "argv": list(self.argv),
            "hash_file": str(self.hash_file),
        }


@dataclass
class InvocationResult:
    """Result of running (or not running) a ToolInvocation."""
    invocation: ToolInvocation
    status: InvocationStatus = InvocationStatus.PENDING
    returncode: int | None = None
    error: LabError | None = None
    reason: str = ""
    started_at: datetime | None = None
    finished_at: datetime | None = None

    @property
    def duration_seconds(self) -> float:
        if self.started_at is None:
            return 0.0
        end = self.finished_at or datetime.now(UTC)
        return (end - self.started_at).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        return {
            "invocation": self.invocation.to_dict(),
            "status": self.status.value,
            "returncode": self.returncode,
            "error": str(self.error) if self.error else None,
            "reason": self.reason,
            "duration_seconds": self.duration_seconds,
        }


@dataclass
class RunnerStats:
    """Tool runner statistics."""
    invocations_total: int = 0
    completed: int = 0
    failed: int = 0
    declined: int = 0
    skipped: int = 0
    interrupted: int = 0

    def record(self, status: InvocationStatus) -> None:
        self.invocations_total += 1
        if status != InvocationStatus.PENDING:
            setattr(self, status.value, getattr(self, status.value) + 1)

    def to_dict(self) -> dict[str, Any]:
        return {
            "invocations_total": self.invocations_total,
            "completed": self.completed,
            "failed": self.failed,
            "declined": self.declined,
            "skipped": self.skipped,
            "interrupted": self.interrupted,
        }

    def summary(self) -> str:
        parts = [f"{getattr(self, s.value)} {s.value}" for s in InvocationStatus if s != InvocationStatus.PENDING]
        return f"{self.invocations_total} jobs: " + ", ".join(parts)


class ToolRunner:
    """
    Plans and runs cracking tool invocations against an ArtifactStore.

    Usage:
        runner = ToolRunner(store, ToolCapabilities.detect(), InteractivePrompt())

        for inv in runner.plan(RECOMMENDED_PLAN):
            print(inv.command)

        results = runner.run_all(runner.plan())
    """

    def __init__(
        self,
        store: ArtifactStore,
        capabilities: ToolCapabilities,
        confirmer: Confirmer,
        john: JohnManager | None = None,
        hashcat: HashcatManager | None = None,
        wordlist: Path | None = None,
        mask: str | None = None,
        run: Callable[..., subprocess.CompletedProcess] = subprocess.run,
        stats: RunnerStats | None = None,
    ) -> None:
        self.store = store
        self.capabilities = capabilities
        self.confirmer = confirmer
        self.managers: dict[str, JohnManager | HashcatManager] = {
            "john": john or JohnManager(),
            "hashcat": hashcat or HashcatManager(potfile=store.root / "hashcat.pot"),
        }
        self.wordlist = wordlist
        self.mask = mask or DEFAULT_MASK
        self._run = run
        self.stats = stats if stats is not None else RunnerStats()

    @property
    def wordlist_path(self) -> Path:
        return self.wordlist or self.store.wordlist_path

    def invocation(
        self,
        tool: str,
        algorithm: HashAlgorithm,
        attack: AttackKind,
        mask: str | None = None,
    ) -> ToolInvocation:
        manager = self.managers.get(tool)
        if manager is None:
            raise ToolUnavailableError(tool, "no command builder for this tool")
        hash_file = self.store.hash_path(algorithm)
        argv = manager.build_command(
            hash_file,
            algorithm,
            attack,
            wordlist=self.wordlist_path,
            mask=mask or self.mask,
        )
        return ToolInvocation(tool=tool, algorithm=algorithm, attack=attack, argv=argv, hash_file=hash_file)

    def plan(
        self,
        steps: Iterable[tuple[str, HashAlgorithm, AttackKind]] = DEFAULT_PLAN,
        tools: Iterable[str] | None = None,
        algorithms: Iterable[HashAlgorithm] | None = None,
        attacks: Iterable[AttackKind] | None = None,
    ) -> list[ToolInvocation]:
        """Build invocations for STEPS, filtered by tool / algorithm / attack."""
        tools = set(tools) if tools else None
        algorithms = set(algorithms) if algorithms else None
        attacks = set(attacks) if attacks else None

        invocations = []
        for tool, algorithm, attack in steps:
            if tools is not None and tool not in tools:
                continue
            if algorithms is not None and algorithm not in algorithms:
                continue
            if attacks is not None and attack not in attacks:
                continue
            manager = self.managers.get(tool)
            if manager is None or not manager.supports(algorithm, attack):
                logger.debug("Skipping unsupported step: %s %s %s", tool, algorithm.value, attack.value)
                continue
            invocations.append(self.invocation(tool, algorithm, attack))
        return invocations

    def run(self, invocation: ToolInvocation) -> InvocationResult:
        """
        Run one invocation in the foreground.

        Raises:
            ToolUnavailableError: the tool is not in the capability set.
        """
        executable = self.capabilities.require(invocation.tool)
        result = InvocationResult(invocation=invocation)

        if not self.store.has_content(ArtifactKind.for_algorithm(invocation.algorithm)):
            result.status = InvocationStatus.SKIPPED
            result.reason = f"{invocation.hash_file} is missing or empty"
            logger.info("Skipping %s: %s", invocation.description, result.reason)
            self.stats.record(result.status)
            return result

        if not self.confirmer.confirm(f"Run `{invocation.command}`?"):
            result.status = InvocationStatus.DECLINED
            result.reason = "not authorized"
            logger.info("Declined: %s", invocation.command)
            self.stats.record(result.status)
            return result

        argv = [executable, *invocation.argv[1:]]
        result.started_at = datetime.now(UTC)
        logger.info("Starting %s: %s", invocation.tool, shlex.join(argv))
        try:
            completed = self._run(argv, check=False, cwd=str(self.store.root))
        except KeyboardInterrupt:
            result.status = InvocationStatus.INTERRUPTED
            result.reason = "interrupted by user"
            logger.warning("%s interrupted", invocation.description)
        except OSError as exc:
            result.status = InvocationStatus.FAILED
            result.error = ToolUnavailableError(invocation.tool, exc.strerror or str(exc))
            result.reason = str(result.error)
            logger.error("Could not start %s: %s", invocation.tool, exc)
        else:
            result.returncode = completed.returncode
            if completed.returncode == 0:
                result.status = InvocationStatus.COMPLETED
            else:
                result.status = InvocationStatus.FAILED
                result.error = ToolInvocationError(
                    invocation.tool,
                    argv,
                    completed.returncode,
                    target=invocation.hash_file,
                )
                result.reason = str(result.error)
                logger.warning("%s", result.error)
        finally:
            result.finished_at = datetime.now(UTC)

        self.stats.record(result.status)
        return result

    def run_all(self, invocations: Iterable[ToolInvocation]) -> list[InvocationResult]:
        """Run each invocation in turn; failures never stop the rest."""
        results = []
        for invocation in invocations:
            try:
                result = self.run(invocation)
            except ToolUnavailableError as exc:
                logger.warning("Skipping %s: %s", invocation.description, exc)
                result = InvocationResult(
                    invocation=invocation,
                    status=InvocationStatus.SKIPPED,
                    error=exc,
                    reason=str(exc),
                )
                self.stats.record(result.status)
            results.append(result)
            if result.status == InvocationStatus.INTERRUPTED:
                break
        return results

    def show(self, tool: str, algorithm: HashAlgorithm) -> list[CrackedCredential]:
        """Ask TOOL which passwords of ALGORITHM's hash file it has cracked."""
        executable = self.capabilities.require(tool)
        manager = self.managers[tool]
        hash_file = self.store.path_for(ArtifactKind.for_algorithm(algorithm))
        argv = [executable, *manager.show_command(hash_file, algorithm)[1:]]
        try:
            completed = self._run(argv, check=False, cwd=str(self.store.root), capture_output=True, text=True)
        except OSError as exc:
            raise ToolUnavailableError(tool, exc.strerror or str(exc)) from exc
        if completed.returncode != 0:
            raise ToolInvocationError(tool, argv, completed.returncode, target=hash_file)
        return manager.parse_show(completed.stdout or "")

