"""
Lab Pipeline - corpus -> hash files -> (optional) cracking.

The pipeline owns one ArtifactStore, one capability set and one Confirmer
for the whole run. Generation always completes (or aborts) before any tool
is started.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ...config import LabConfig
from ...core.capability import ToolCapabilities
from ...core.confirm import Confirmer
from ...core.errors import ArtifactWriteError
from ...domain.models import ArtifactKind, AttackKind, CrackedCredential, HashAlgorithm, OverwritePolicy
from ...infrastructure.corpus.corpus import PasswordCorpus
from ...infrastructure.cracking.hashcat_manager import HashcatManager
from ...infrastructure.cracking.john_manager import JohnManager
from ...infrastructure.cracking.runner import (
    DEFAULT_PLAN,
    RECOMMENDED_PLAN,
    InvocationResult,
    RunnerStats,
    ToolInvocation,
    ToolRunner,
)
from ...infrastructure.cracking.wordlist_manager import Wordlist, WordlistManager
from ...infrastructure.installer.installer import InstallOutcome, ToolInstaller
from ...infrastructure.storage.artifact_store import ArtifactStore, ArtifactWrite

logger = logging.getLogger(__name__)


@dataclass
class LabRun:
    """Everything one pipeline run produced."""
    corpus: PasswordCorpus | None = None
    writes: list[ArtifactWrite] = field(default_factory=list)
    install: list[InstallOutcome] = field(default_factory=list)
    results: list[InvocationResult] = field(default_factory=list)
    stats: RunnerStats = field(default_factory=RunnerStats)

    def to_dict(self) -> dict[str, Any]:
        return {
            "entries": len(self.corpus) if self.corpus is not None else 0,
            "writes": [w.to_dict() for w in self.writes],
            "install": [o.to_dict() for o in self.install],
            "results": [r.to_dict() for r in self.results],
            "stats": self.stats.to_dict(),
        }


class LabPipeline:
    """
    Wires the lab components together from a LabConfig.

    Usage:
        pipeline = LabPipeline(load_config(path), AlwaysNo())
        run = pipeline.generate()
        for inv in pipeline.recommended():
            print(inv.command)
        run.results = pipeline.crack()
    """

    def __init__(
        self,
        config: LabConfig,
        confirmer: Confirmer,
        capabilities: ToolCapabilities | None = None,
        overwrite: OverwritePolicy | None = None,
        run: Callable[..., subprocess.CompletedProcess] = subprocess.run,
        which: Callable[[str], str | None] = shutil.which,
    ) -> None:
        self.config = config
        self.confirmer = confirmer
        self._run = run
        self._which = which
        self.store = ArtifactStore(
            config.workdir,
            config.artifacts,
            config.hashing,
            overwrite=overwrite,
            confirmer=confirmer,
        )
        self._capabilities = capabilities
        self.stats = RunnerStats()

    @property
    def capabilities(self) -> ToolCapabilities:
        if self._capabilities is None:
            self._capabilities = ToolCapabilities.detect(self.config.tools.executables(), which=self._which)
        return self._capabilities

    @property
    def enabled_tools(self) -> list[str]:
        return list(self.config.tools.executables())

    # ------------------------------------------------------------------
    # Install
    # ------------------------------------------------------------------

    def install(self, tools: Iterable[str] | None = None) -> list[InstallOutcome]:
        installer = ToolInstaller(
            self.confirmer,
            package_manager=self.config.installer.package_manager,
            which=self._which,
            run=self._run,
        )
        self._capabilities, outcomes = installer.ensure(self.config.tools.executables(), tools=tools)
        return outcomes

    # ------------------------------------------------------------------
    # Generate
    # ------------------------------------------------------------------

    def load_corpus(self, source: Path | None = None) -> tuple[PasswordCorpus, bool]:
        """
        Pick the corpus for this run.

        Returns:
            (corpus, write_corpus). An existing corpus file that may not be
            overwritten becomes the corpus itself, so the derived files
            always match the corpus on disk.

        Raises:
            ArtifactWriteError: SOURCE was given but the existing corpus file
                may not be replaced.
        """
        if source is not None:
            corpus = PasswordCorpus.load(source)
            if not self.store.may_write(ArtifactKind.CORPUS):
                raise ArtifactWriteError(
                    self.store.corpus_path,
                    f"already exists and may not be overwritten, so hash files derived from {source} "
                    "would not match it (use --overwrite overwrite or remove the file)",
                )
            return corpus, True

        if self.store.corpus_path.exists() and not self.store.may_write(ArtifactKind.CORPUS):
            return PasswordCorpus.load(self.store.corpus_path), False
        return PasswordCorpus.default(), True

    def generate(self, source: Path | None = None) -> LabRun:
        """Write the corpus, the three hash files and the wordlist."""
        self.store.prepare()
        corpus, write_corpus = self.load_corpus(source)
        writes = self.store.write_all(corpus, write_corpus=write_corpus)
        return LabRun(corpus=corpus, writes=writes)

    # ------------------------------------------------------------------
    # Crack
    # ------------------------------------------------------------------

    def wordlists(self) -> list[Wordlist]:
        """Larger dictionaries found in the lab directory and system paths."""
        manager = WordlistManager(custom_paths=[self.store.root])
        manager.scan()
        return manager.wordlists

    def build_runner(self) -> ToolRunner:
        tools_cfg = self.config.tools
        wordlists = WordlistManager(custom_paths=[self.store.root])
        if tools_cfg.wordlist:
            wordlists.scan()
        wordlist = wordlists.resolve(tools_cfg.wordlist, self.store.wordlist_path)
        return ToolRunner(
            self.store,
            self.capabilities,
            self.confirmer,
            john=JohnManager(tools_cfg.john),
            hashcat=HashcatManager(tools_cfg.hashcat, potfile=self.config.hashcat_potfile),
            wordlist=wordlist,
            mask=tools_cfg.hashcat.mask,
            run=self._run,
            stats=self.stats,
        )

    def recommended(self, tools: Iterable[str] | None = None) -> list[ToolInvocation]:
        """Every documented exercise, whether or not the tool is installed."""
        return self.build_runner().plan(RECOMMENDED_PLAN, tools=tools or self.enabled_tools)

    def crack(
        self,
        tools: Iterable[str] | None = None,
        algorithms: Iterable[HashAlgorithm] | None = None,
        attacks: Iterable[AttackKind] | None = None,
        full: bool = False,
    ) -> list[InvocationResult]:
        """
        Run the cracking exercises, each one confirmed separately.

        The default set is the quick one; `full` (or any attack filter)
        draws from the complete exercise list instead.
        """
        attacks = list(attacks) if attacks else None
        steps = RECOMMENDED_PLAN if (full or attacks) else DEFAULT_PLAN
        runner = self.build_runner()
        invocations = runner.plan(
            steps,
            tools=tools or self.enabled_tools,
            algorithms=algorithms,
            attacks=attacks,
        )
        if not invocations:
            logger.info("Nothing to run for the selected tools/attacks")
            return []
        return runner.run_all(invocations)

    def show(self, tool: str, algorithm: HashAlgorithm) -> list[CrackedCredential]:
        return self.build_runner().show(tool, algorithm)

    def run(self, source: Path | None = None, install: bool = True, crack: bool = True) -> LabRun:
        """The whole lab: install, generate, crack."""
        outcomes = self.install() if install else []
        lab_run = self.generate(source)
        lab_run.install = outcomes
        if crack:
            lab_run.results = self.crack()
            lab_run.stats = self.stats
        return lab_run
