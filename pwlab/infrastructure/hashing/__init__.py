"""
Hashing Module.

Unsalted fast digests (MD5, SHA-256) and salted SHA512-crypt digests of
corpus entries.
"""

from .deriver import (
    DEFAULT_ROUNDS,
    DEFAULT_SALT_LENGTH,
    crypt_identifier,
    crypt_salt,
    derive_fast,
    derive_salted,
    fast_record,
    generate_salt,
    salted_record,
    verify_salted,
)

__all__ = [
    "DEFAULT_ROUNDS",
    "DEFAULT_SALT_LENGTH",
    "crypt_identifier",
    "crypt_salt",
    # Fast (unsalted)
    "derive_fast",
    "fast_record",
    # Salted
    "derive_salted",
    "generate_salt",
    "salted_record",
    "verify_salted",
]
