"""
Password Corpus - The plaintext list every hash file is derived from.

The corpus is read once per run and never changes afterwards. Lines keep
their exact content: only the line terminator is stripped, so leading and
trailing spaces are part of the password.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from ...core.errors import CorpusReadError

logger = logging.getLogger(__name__)


# Sample passwords written when no corpus is supplied
DEFAULT_PASSWORDS = (
    "password123",
    "letmein",
    "Tr0ub4dor!",
    "S3cureP@ssw0rd",
    "12345678",
    "admin2020",
    "Summer2021",
    "MyPuppy!",
    "P@ssw0rd!",
    "qwerty",
)


class PasswordCorpus:
    """
    Ordered, immutable list of test passwords.

    Usage:
        corpus = PasswordCorpus.load(Path("passwords.txt"))
        for entry in corpus:       # non-empty entries only
            ...
        corpus.lines               # raw lines, blanks included
    """

    def __init__(self, lines: Iterable[str], source: Path | None = None) -> None:
        self._lines: tuple[str, ...] = tuple(lines)
        self._entries: tuple[str, ...] = tuple(line for line in self._lines if line)
        self.source = source

    @classmethod
    def default(cls) -> PasswordCorpus:
        return cls(DEFAULT_PASSWORDS)

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> PasswordCorpus:
        return cls(lines)

    @classmethod
    def load(cls, path: Path) -> PasswordCorpus:
        """Read a UTF-8 corpus file, one password per line."""
        path = Path(path).expanduser()
        if not path.exists():
            raise CorpusReadError(path, "file does not exist")
        if not path.is_file():
            raise CorpusReadError(path, "not a regular file")
        try:
            with path.open("r", encoding="utf-8") as fp:
                lines = [line.rstrip("\n") for line in fp]
        except UnicodeDecodeError as exc:
            raise CorpusReadError(path, f"not valid UTF-8 ({exc.reason})") from exc
        except OSError as exc:
            raise CorpusReadError(path, exc.strerror or str(exc)) from exc

        corpus = cls(lines, source=path)
        logger.info("Loaded corpus %s: %d entries (%d lines)", path, len(corpus), len(corpus.lines))
        return corpus

    @property
    def lines(self) -> tuple[str, ...]:
        return self._lines

    @property
    def entries(self) -> tuple[str, ...]:
        return self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PasswordCorpus):
            return NotImplemented
        return self._lines == other._lines

    def __hash__(self) -> int:
        return hash(self._lines)

    def __repr__(self) -> str:
        return f"PasswordCorpus(entries={len(self._entries)}, source={self.source})"
