"""
Hash Deriver - Hash encodings of corpus entries.

Two separate paths:
- fast: unsalted MD5 / SHA-256 hex digests, the shape of a leaked legacy dump
- salted: SHA512-crypt (`$6$<salt>$<hash>`), the shape of a shadow file entry

The salt is for teaching only and is not meant as production-grade entropy.
"""

from __future__ import annotations

import hashlib
import logging
import secrets
import string

from passlib.exc import MissingBackendError
from passlib.hash import sha512_crypt

from ...core.errors import UnsupportedAlgorithmError
from ...domain.models import FAST_ALGORITHMS, HashAlgorithm, HashRecord

logger = logging.getLogger(__name__)

SALT_ALPHABET = string.ascii_letters + string.digits
DEFAULT_SALT_LENGTH = 8
# crypt(3) default; encoded implicitly, so no "rounds=" field appears
DEFAULT_ROUNDS = 5000
SHA512_CRYPT_IDENT = "6"

_HASHLIB_NAMES = {
    HashAlgorithm.MD5: "md5",
    HashAlgorithm.SHA256: "sha256",
}


def derive_fast(entry: str, algorithm: HashAlgorithm) -> str:
    """Lowercase hex digest of the UTF-8 bytes of ENTRY, no salt, one round."""
    algorithm = HashAlgorithm(algorithm)
    if algorithm not in FAST_ALGORITHMS:
        raise UnsupportedAlgorithmError(algorithm.value, "not an unsalted fast hash")
    name = _HASHLIB_NAMES[algorithm]
    try:
        hasher = hashlib.new(name, usedforsecurity=False)
    except ValueError as exc:
        # FIPS-restricted OpenSSL builds refuse md5
        raise UnsupportedAlgorithmError(algorithm.value, str(exc)) from exc
    hasher.update(entry.encode("utf-8"))
    return hasher.hexdigest()


def generate_salt(length: int = DEFAULT_SALT_LENGTH) -> str:
    if not 1 <= length <= 16:
        raise ValueError(f"salt length must be 1..16, got {length}")
    return "".join(secrets.choice(SALT_ALPHABET) for _ in range(length))


def derive_salted(
    entry: str,
    salt_length: int = DEFAULT_SALT_LENGTH,
    rounds: int = DEFAULT_ROUNDS,
) -> tuple[str, str] | None:
    """
    SHA512-crypt ENTRY with a fresh random salt.

    Returns:
        (salt, "$6$<salt>$<hash>"), or None for an empty entry.
    """
    if not entry:
        return None
    salt = generate_salt(salt_length)
    try:
        digest = sha512_crypt.using(salt=salt, rounds=rounds).hash(entry)
    except MissingBackendError as exc:
        raise UnsupportedAlgorithmError(HashAlgorithm.SHA512CRYPT.value, str(exc)) from exc
    return salt, digest


def crypt_identifier(digest: str) -> str:
    """Return the `$<id>$` scheme identifier of a crypt-style digest."""
    if not digest.startswith("$"):
        raise ValueError(f"not a crypt-style digest: {digest!r}")
    ident = digest[1:].split("$", 1)[0]
    if not ident:
        raise ValueError(f"missing scheme identifier: {digest!r}")
    if ident == SHA512_CRYPT_IDENT and not sha512_crypt.identify(digest):
        raise ValueError(f"malformed sha512-crypt digest: {digest!r}")
    return ident


def crypt_salt(digest: str) -> str:
    """Salt embedded in a sha512-crypt digest."""
    return sha512_crypt.from_string(digest).salt


def verify_salted(entry: str, digest: str) -> bool:
    return sha512_crypt.verify(entry, digest)


def fast_record(entry: str, algorithm: HashAlgorithm) -> HashRecord:
    return HashRecord(algorithm=algorithm, plaintext=entry, digest=derive_fast(entry, algorithm))


def salted_record(
    entry: str,
    salt_length: int = DEFAULT_SALT_LENGTH,
    rounds: int = DEFAULT_ROUNDS,
) -> HashRecord | None:
    derived = derive_salted(entry, salt_length=salt_length, rounds=rounds)
    if derived is None:
        return None
    salt, digest = derived
    return HashRecord(algorithm=HashAlgorithm.SHA512CRYPT, plaintext=entry, salt=salt, digest=digest)
