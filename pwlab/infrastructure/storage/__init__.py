"""Lab directory ownership: corpus, hash files and wordlist."""

from .artifact_store import ArtifactStore, ArtifactWrite

__all__ = [
    "ArtifactStore",
    "ArtifactWrite",
]
