"""Password corpus loading and the default sample list."""

from .corpus import DEFAULT_PASSWORDS, PasswordCorpus

__all__ = [
    "DEFAULT_PASSWORDS",
    "PasswordCorpus",
]
