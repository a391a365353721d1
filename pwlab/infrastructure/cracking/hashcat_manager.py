"""
Hashcat Manager - Command lines for the lab's hashcat exercises.

Supports:
- Dictionary attacks (-a 0)
- Rule-based attacks (-a 0 -r, when a rules file is configured)
- Mask attacks (-a 3)
- Reading cracked passwords back (--show)
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

from ...config import HashcatConfig
from ...domain.models import AttackKind, CrackedCredential, HashAlgorithm

logger = logging.getLogger(__name__)


# 6 lowercase letters + 2 digits, e.g. "summer21"
DEFAULT_MASK = "?l?l?l?l?l?l?d?d"


class AttackMode(int, Enum):
    """Hashcat attack modes."""
    DICTIONARY = 0      # -a 0 (wordlist)
    BRUTE_FORCE = 3     # -a 3 (mask)


# -m hash mode per hash file
HASH_MODES = {
    HashAlgorithm.MD5: 0,
    HashAlgorithm.SHA256: 1400,
    HashAlgorithm.SHA512CRYPT: 1800,
}


class HashcatManager:
    """
    Builds hashcat invocations for the lab's hash files.

    Usage:
        hashcat = HashcatManager(potfile=workdir / "hashcat.pot")
        cmd = hashcat.build_command(
            Path("sha256_hashes.txt"),
            HashAlgorithm.SHA256,
            AttackKind.MASK,
        )
        # ['hashcat', '-m', '1400', '-a', '3', 'sha256_hashes.txt',
        #  '?l?l?l?l?l?l?d?d', '--potfile-path=.../hashcat.pot']
    """

    name = "hashcat"

    def __init__(self, config: HashcatConfig | None = None, potfile: Path | None = None) -> None:
        self.config = config or HashcatConfig()
        self.potfile = potfile

    @property
    def executable(self) -> str:
        return self.config.path

    @property
    def attacks(self) -> tuple[AttackKind, ...]:
        if self.config.rules_file:
            return (AttackKind.DICTIONARY, AttackKind.RULES, AttackKind.MASK)
        return (AttackKind.DICTIONARY, AttackKind.MASK)

    def supports(self, algorithm: HashAlgorithm, attack: AttackKind) -> bool:
        return algorithm in HASH_MODES and attack in self.attacks

    def build_command(
        self,
        hash_file: Path,
        algorithm: HashAlgorithm,
        attack: AttackKind = AttackKind.DICTIONARY,
        wordlist: Path | None = None,
        mask: str | None = None,
    ) -> list[str]:
        """
        Build a hashcat command line.

        Args:
            hash_file: Hash file to attack
            algorithm: Encoding of the hash file (selects -m)
            attack: Attack strategy
            wordlist: Dictionary for DICTIONARY / RULES
            mask: Pattern for MASK; defaults to the configured mask
        """
        if not self.supports(algorithm, attack):
            raise ValueError(f"hashcat cannot run {attack.value} against {algorithm.value}")

        mode = AttackMode.BRUTE_FORCE if attack == AttackKind.MASK else AttackMode.DICTIONARY
        cmd = [
            self.executable,
            "-m", str(HASH_MODES[algorithm]),
            "-a", str(mode.value),
            str(hash_file),
        ]

        # Attack-specific options
        if mode == AttackMode.DICTIONARY:
            if wordlist is None:
                raise ValueError(f"{attack.value} attack needs a wordlist")
            cmd.append(str(wordlist))
            if attack == AttackKind.RULES:
                cmd.extend(["-r", str(Path(self.config.rules_file).expanduser())])
        else:
            cmd.append(mask or self.config.mask)

        cmd.extend(self._common_options(algorithm))
        return cmd

    def show_command(self, hash_file: Path, algorithm: HashAlgorithm) -> list[str]:
        """Command listing passwords already cracked for HASH_FILE."""
        cmd = [self.executable, "-m", str(HASH_MODES[algorithm]), "--show", str(hash_file)]
        cmd.extend(self._common_options(algorithm, workload=False))
        return cmd

    def _common_options(self, algorithm: HashAlgorithm, workload: bool = True) -> list[str]:
        opts: list[str] = []
        # Salted file lines carry a "<label>:" prefix
        if algorithm == HashAlgorithm.SHA512CRYPT:
            opts.append("--username")
        if workload and self.config.workload_profile:
            opts.extend(["-w", str(self.config.workload_profile)])
        if self.potfile is not None:
            opts.append(f"--potfile-path={self.potfile}")
        return opts

    @staticmethod
    def parse_show(output: str) -> list[CrackedCredential]:
        """
        Parse `hashcat --show` output.

        Lines are `<hash>:<password>` (or `<user>:<hash>:<password>` with
        --username); the password is the last field.
        """
        cracked = []
        for line in output.splitlines():
            if ":" not in line:
                continue
            label, password = line.rsplit(":", 1)
            cracked.append(CrackedCredential(label=label, password=password))
        return cracked
