"""
Artifact Store - The lab directory and every file in it.

Supports:
- Corpus file (one password per line)
- Unsalted hash files (one digest per line, corpus order)
- Salted hash file (`<label>:$6$<salt>$<hash>` per line)
- Static small wordlist

Every digest is derived before the first file is written, and each file is
replaced atomically, so an interrupted or failed run never leaves a
half-written artifact behind. Existing files are only replaced when the
overwrite policy allows it.
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ...config import ArtifactsConfig, HashingConfig
from ...core.confirm import AlwaysNo, Confirmer
from ...core.errors import ArtifactWriteError
from ...domain.models import FAST_ALGORITHMS, ArtifactKind, HashAlgorithm, OverwritePolicy
from ..corpus.corpus import PasswordCorpus
from ..cracking.wordlist_manager import SMALL_WORDLIST
from ..hashing.deriver import derive_fast, salted_record

logger = logging.getLogger(__name__)


@dataclass
class ArtifactWrite:
    """Outcome of writing one artifact."""
    kind: ArtifactKind
    path: Path
    lines: int = 0
    written: bool = True  # False = existing file preserved

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "path": str(self.path),
            "lines": self.lines,
            "written": self.written,
        }


class ArtifactStore:
    """
    Owns the lab directory.

    Usage:
        store = ArtifactStore(Path("~/password_lab").expanduser())
        store.prepare()
        writes = store.write_all(PasswordCorpus.default())

        for w in writes:
            print(w.path, "written" if w.written else "kept")
    """

    def __init__(
        self,
        root: Path,
        artifacts: ArtifactsConfig | None = None,
        hashing: HashingConfig | None = None,
        overwrite: OverwritePolicy | None = None,
        confirmer: Confirmer | None = None,
    ) -> None:
        self.root = Path(root).expanduser()
        self.artifacts = artifacts or ArtifactsConfig()
        self.hashing = hashing or HashingConfig()
        self.overwrite = OverwritePolicy(overwrite or self.artifacts.overwrite)
        self.confirmer = confirmer or AlwaysNo()

        self._names = {
            ArtifactKind.CORPUS: self.artifacts.passwords_file,
            ArtifactKind.MD5: self.artifacts.md5_file,
            ArtifactKind.SHA256: self.artifacts.sha256_file,
            ArtifactKind.SHA512CRYPT: self.artifacts.sha512crypt_file,
            ArtifactKind.WORDLIST: self.artifacts.wordlist_file,
        }
        self._decisions: dict[ArtifactKind, bool] = {}

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def path_for(self, kind: ArtifactKind) -> Path:
        return self.root / self._names[ArtifactKind(kind)]

    def hash_path(self, algorithm: HashAlgorithm) -> Path:
        return self.path_for(ArtifactKind.for_algorithm(algorithm))

    @property
    def corpus_path(self) -> Path:
        return self.path_for(ArtifactKind.CORPUS)

    @property
    def wordlist_path(self) -> Path:
        return self.path_for(ArtifactKind.WORDLIST)

    def existing(self) -> list[ArtifactKind]:
        return [kind for kind in ArtifactKind if self.path_for(kind).exists()]

    def has_content(self, kind: ArtifactKind) -> bool:
        path = self.path_for(kind)
        return path.is_file() and path.stat().st_size > 0

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def prepare(self) -> Path:
        """Create the lab directory if needed."""
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ArtifactWriteError(self.root, exc.strerror or str(exc)) from exc
        if not self.root.is_dir():
            raise ArtifactWriteError(self.root, "not a directory")
        return self.root

    def may_write(self, kind: ArtifactKind) -> bool:
        """Apply the overwrite policy to KIND's file (asked at most once per file)."""
        kind = ArtifactKind(kind)
        if kind in self._decisions:
            return self._decisions[kind]
        path = self.path_for(kind)
        if not path.exists():
            return True
        if self.overwrite is OverwritePolicy.OVERWRITE:
            allowed = True
        elif self.overwrite is OverwritePolicy.ASK:
            allowed = self.confirmer.confirm(f"{path} already exists. Overwrite?")
        else:
            allowed = False
        self._decisions[kind] = allowed
        return allowed

    def fast_hash_lines(self, corpus: PasswordCorpus, algorithm: HashAlgorithm) -> list[str]:
        return [derive_fast(entry, algorithm) for entry in corpus]

    def salted_hash_lines(self, corpus: PasswordCorpus) -> list[str]:
        label = self.artifacts.salted_label
        lines = []
        for entry in corpus.lines:
            record = salted_record(
                entry,
                salt_length=self.hashing.salt_length,
                rounds=self.hashing.sha512_rounds,
            )
            if record is None:
                continue
            lines.append(record.to_line(label))
        return lines

    def write_corpus(self, corpus: PasswordCorpus) -> ArtifactWrite:
        return self._write(ArtifactKind.CORPUS, corpus.lines)

    def write_fast_hashes(self, corpus: PasswordCorpus, algorithm: HashAlgorithm) -> ArtifactWrite:
        kind = ArtifactKind.for_algorithm(algorithm)
        return self._write(kind, self.fast_hash_lines(corpus, algorithm))

    def write_salted_hashes(self, corpus: PasswordCorpus) -> ArtifactWrite:
        return self._write(ArtifactKind.SHA512CRYPT, self.salted_hash_lines(corpus))

    def write_wordlist(self, words: Iterable[str] = SMALL_WORDLIST) -> ArtifactWrite:
        return self._write(ArtifactKind.WORDLIST, words)

    def write_all(self, corpus: PasswordCorpus, write_corpus: bool = True) -> list[ArtifactWrite]:
        """
        Derive every hash file from CORPUS, then write the whole set.

        With write_corpus=False the corpus file is left alone (the corpus was
        loaded from it).
        """
        self.prepare()

        # Derivation errors abort here, before any file is touched
        planned: list[tuple[ArtifactKind, list[str]]] = []
        if write_corpus:
            planned.append((ArtifactKind.CORPUS, list(corpus.lines)))
        for algorithm in FAST_ALGORITHMS:
            planned.append((ArtifactKind.for_algorithm(algorithm), self.fast_hash_lines(corpus, algorithm)))
        planned.append((ArtifactKind.SHA512CRYPT, self.salted_hash_lines(corpus)))
        planned.append((ArtifactKind.WORDLIST, list(SMALL_WORDLIST)))

        return [self._write(kind, lines) for kind, lines in planned]

    def _write(self, kind: ArtifactKind, lines: Iterable[str]) -> ArtifactWrite:
        path = self.path_for(kind)
        lines = list(lines)
        if not self.may_write(kind):
            logger.warning("Keeping existing %s (overwrite not authorized)", path)
            return ArtifactWrite(kind=kind, path=path, lines=self._count_lines(path), written=False)

        self.prepare()
        self._write_atomic(path, lines)
        logger.info("Wrote %s: %d lines", path, len(lines))
        return ArtifactWrite(kind=kind, path=path, lines=len(lines), written=True)

    def _write_atomic(self, path: Path, lines: list[str]) -> None:
        content = "".join(f"{line}\n" for line in lines)
        tmp_name: str | None = None
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fp:
                fp.write(content)
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as exc:
            raise ArtifactWriteError(path, exc.strerror or str(exc)) from exc
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)

    @staticmethod
    def _count_lines(path: Path) -> int:
        try:
            with path.open("rb") as fp:
                return sum(1 for _ in fp)
        except OSError:
            return 0
