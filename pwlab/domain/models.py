"""pwlab Domain Models - Pydantic models for lab entities."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, model_validator


class HashAlgorithm(str, Enum):
    """Hash encodings derived from the corpus."""

    MD5 = "md5"
    SHA256 = "sha256"
    SHA512CRYPT = "sha512crypt"

    @property
    def is_salted(self) -> bool:
        return self is HashAlgorithm.SHA512CRYPT


FAST_ALGORITHMS = (HashAlgorithm.MD5, HashAlgorithm.SHA256)


class ArtifactKind(str, Enum):
    """Files owned by the artifact store."""

    CORPUS = "corpus"
    MD5 = "md5"
    SHA256 = "sha256"
    SHA512CRYPT = "sha512crypt"
    WORDLIST = "wordlist"

    @classmethod
    def for_algorithm(cls, algorithm: HashAlgorithm) -> ArtifactKind:
        return cls(algorithm.value)


class AttackKind(str, Enum):
    """Cracking strategies the runner knows how to invoke."""

    DICTIONARY = "dictionary"  # wordlist as-is
    RULES = "rules"            # wordlist + mangling rules
    MASK = "mask"              # character-pattern brute force
    BATCH = "batch"            # john default mode (single, wordlist, incremental)


class OverwritePolicy(str, Enum):
    """What to do when an artifact file already exists."""

    KEEP = "keep"
    OVERWRITE = "overwrite"
    ASK = "ask"


class HashRecord(BaseModel):
    """One derived hash of one plaintext entry."""

    algorithm: HashAlgorithm
    plaintext: str = Field(..., min_length=1)
    salt: str | None = None  # sha512crypt only
    digest: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def _salt_matches_algorithm(self) -> HashRecord:
        if self.algorithm.is_salted and not self.salt:
            raise ValueError(f"{self.algorithm.value} record requires a salt")
        if not self.algorithm.is_salted and self.salt is not None:
            raise ValueError(f"{self.algorithm.value} record must not carry a salt")
        return self

    def to_line(self, label: str | None = None) -> str:
        """Serialize for a hash file (salted records carry a label prefix)."""
        if label is None:
            return self.digest
        return f"{label}:{self.digest}"


class CrackedCredential(BaseModel):
    """One line of a tool's `--show` output."""

    label: str
    password: str
