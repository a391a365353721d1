"""
Wordlist Manager - Dictionaries for the lab's cracking attempts.

Supports:
- The built-in small wordlist written into every lab directory
- Discovery of larger wordlists (rockyou etc.) the user placed on disk
- Resolving the dictionary named in the config
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


# Static dictionary for safe offline testing; independent of the corpus
SMALL_WORDLIST = (
    "password",
    "123456",
    "12345678",
    "qwerty",
    "abc123",
    "password1",
    "iloveyou",
    "admin",
    "welcome",
    "monkey",
)

# Common wordlist locations
WORDLIST_PATHS = [
    Path("/usr/share/wordlists"),
    Path("/usr/share/dict"),
    Path("/opt/homebrew/share/john"),
    Path("/usr/local/share/john"),
    Path.home() / ".wordlists",
]

# Well-known wordlists
KNOWN_WORDLISTS = {
    "rockyou": "rockyou.txt",
    "common": "common-passwords.txt",
    "john": "password.lst",
    "darkweb": "darkweb2017-top10000.txt",
}


@dataclass
class Wordlist:
    """A wordlist for cracking."""
    name: str
    path: Path
    size_bytes: int = 0
    word_count: int = 0

    @property
    def size_mb(self) -> float:
        return self.size_bytes / (1024 * 1024)


class WordlistManager:
    """
    Finds wordlists to use as the dictionary for cracking.

    The lab directory itself is searched first, so a rockyou.txt copied
    next to the hash files is picked up without configuration.

    Usage:
        manager = WordlistManager(custom_paths=[workdir])
        manager.scan()

        rockyou = manager.get("rockyou")
        if rockyou:
            print(f"Using: {rockyou.path}")
    """

    def __init__(self, custom_paths: list[Path] | None = None, include_system: bool = True) -> None:
        self._wordlists: dict[str, Wordlist] = {}
        self._search_paths: list[Path] = list(custom_paths or [])
        if include_system:
            self._search_paths.extend(WORDLIST_PATHS)

    @property
    def wordlists(self) -> list[Wordlist]:
        return list(self._wordlists.values())

    def scan(self) -> int:
        """
        Look for the well-known wordlists in the search paths.

        Returns:
            Number of wordlists found.
        """
        found = 0

        for search_path in self._search_paths:
            if not search_path.is_dir():
                continue

            for name, filename in KNOWN_WORDLISTS.items():
                path = search_path / filename
                if path.is_file() and name not in self._wordlists:
                    wl = self._create_wordlist(path, name=name)
                    if wl:
                        self._wordlists[name] = wl
                        found += 1

        logger.info("Found %d wordlists", len(self._wordlists))
        return found

    def _create_wordlist(
        self,
        path: Path,
        name: str | None = None,
    ) -> Wordlist | None:
        """Create a Wordlist object from a file."""
        try:
            stat = path.stat()

            # Count lines (approximate for large files)
            if stat.st_size < 100 * 1024 * 1024:  # < 100MB
                with path.open("rb") as f:
                    word_count = sum(1 for _ in f)
            else:
                word_count = stat.st_size // 10  # Estimate ~10 bytes per word

            return Wordlist(
                name=name or path.stem,
                path=path,
                size_bytes=stat.st_size,
                word_count=word_count,
            )
        except OSError as e:
            logger.debug("Failed to read wordlist %s: %s", path, e)
            return None

    def get(self, name: str) -> Wordlist | None:
        """Get wordlist by name."""
        return self._wordlists.get(name)

    def add(self, path: Path, name: str | None = None) -> Wordlist | None:
        """Add a custom wordlist."""
        if not path.is_file():
            logger.error("Wordlist not found: %s", path)
            return None

        wl = self._create_wordlist(path, name=name)
        if wl:
            self._wordlists[wl.name] = wl
            logger.info("Added wordlist: %s (%d words)", wl.name, wl.word_count)
        return wl

    def resolve(self, choice: str | None, fallback: Path) -> Path:
        """
        Pick the dictionary for an attack.

        CHOICE may be a known name ("rockyou"), a file path, or None for the
        lab's small wordlist at FALLBACK.
        """
        if not choice:
            return fallback
        wl = self.get(choice)
        if wl is None:
            candidate = Path(choice).expanduser()
            if candidate.is_file():
                wl = self.add(candidate)
        if wl is None:
            logger.warning("Wordlist %s not found, using %s", choice, fallback)
            return fallback
        return wl.path

