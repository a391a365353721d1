"""
John the Ripper Manager - Command lines for the lab's john exercises.

Supports:
- Dictionary attacks (--wordlist)
- Rules-based attacks (--wordlist --rules)
- Mask attacks (--mask)
- Batch mode (john's default single -> wordlist -> incremental)
- Reading cracked passwords back (--show)
"""

from __future__ import annotations

import logging
from pathlib import Path

from ...config import JohnConfig
from ...domain.models import AttackKind, CrackedCredential, HashAlgorithm

logger = logging.getLogger(__name__)


# --format= selector per hash file
JOHN_FORMATS = {
    HashAlgorithm.MD5: "raw-md5",
    HashAlgorithm.SHA256: "raw-sha256",
    HashAlgorithm.SHA512CRYPT: "sha512crypt",
}


class JohnManager:
    """
    Builds john invocations for the lab's hash files.

    Usage:
        john = JohnManager()
        cmd = john.build_command(
            Path("md5_hashes.txt"),
            HashAlgorithm.MD5,
            AttackKind.DICTIONARY,
            wordlist=Path("small_wordlist.txt"),
        )
        # ['john', '--wordlist=small_wordlist.txt', '--format=raw-md5', 'md5_hashes.txt']
    """

    name = "john"
    attacks = (AttackKind.DICTIONARY, AttackKind.RULES, AttackKind.MASK, AttackKind.BATCH)

    def __init__(self, config: JohnConfig | None = None) -> None:
        self.config = config or JohnConfig()

    @property
    def executable(self) -> str:
        return self.config.path

    def supports(self, algorithm: HashAlgorithm, attack: AttackKind) -> bool:
        return algorithm in JOHN_FORMATS and attack in self.attacks

    def build_command(
        self,
        hash_file: Path,
        algorithm: HashAlgorithm,
        attack: AttackKind = AttackKind.DICTIONARY,
        wordlist: Path | None = None,
        mask: str | None = None,
    ) -> list[str]:
        """
        Build a john command line.

        Args:
            hash_file: Hash file to attack
            algorithm: Encoding of the hash file (selects --format)
            attack: Attack strategy
            wordlist: Dictionary for DICTIONARY / RULES
            mask: Pattern for MASK (?l?l?d...)
        """
        if not self.supports(algorithm, attack):
            raise ValueError(f"john cannot run {attack.value} against {algorithm.value}")

        cmd = [self.executable]

        # Mode-specific options
        if attack in (AttackKind.DICTIONARY, AttackKind.RULES):
            if wordlist is None:
                raise ValueError(f"{attack.value} attack needs a wordlist")
            cmd.append(f"--wordlist={wordlist}")
            if attack == AttackKind.RULES:
                cmd.append("--rules")
        elif attack == AttackKind.MASK:
            if not mask:
                raise ValueError("mask attack needs a mask")
            cmd.append(f"--mask={mask}")

        # Format
        cmd.append(f"--format={JOHN_FORMATS[algorithm]}")

        # Potfile
        if self.config.pot_file:
            cmd.append(f"--pot={Path(self.config.pot_file).expanduser()}")

        # Hash file
        cmd.append(str(hash_file))
        return cmd

    def show_command(self, hash_file: Path, algorithm: HashAlgorithm) -> list[str]:
        """Command listing passwords already cracked for HASH_FILE."""
        cmd = [self.executable, "--show", f"--format={JOHN_FORMATS[algorithm]}"]
        if self.config.pot_file:
            cmd.append(f"--pot={Path(self.config.pot_file).expanduser()}")
        cmd.append(str(hash_file))
        return cmd

    @staticmethod
    def parse_show(output: str) -> list[CrackedCredential]:
        """
        Parse `john --show` output.

        Lines look like `user:letmein` (or `?:letmein` for files without
        labels); the trailing "N password hashes cracked, M left" summary
        carries no colon and is skipped.
        """
        cracked = []
        for line in output.splitlines():
            if ":" not in line or line.startswith("Warning"):
                continue
            label, password = line.split(":", 1)
            cracked.append(CrackedCredential(label=label, password=password))
        return cracked
