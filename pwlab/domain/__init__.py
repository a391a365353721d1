"""pwlab Domain Layer - Lab models and enums."""

from .models import (
    FAST_ALGORITHMS,
    ArtifactKind,
    AttackKind,
    CrackedCredential,
    HashAlgorithm,
    HashRecord,
    OverwritePolicy,
)

__all__ = [
    "FAST_ALGORITHMS",
    "ArtifactKind",
    "AttackKind",
    "CrackedCredential",
    "HashAlgorithm",
    "HashRecord",
    "OverwritePolicy",
]
