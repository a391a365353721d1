"""Printable lab worksheet."""

from __future__ import annotations

from ...domain.models import ArtifactKind
from ...infrastructure.storage.artifact_store import ArtifactStore

RULE = "=" * 64

_DESCRIPTIONS = {
    ArtifactKind.CORPUS: "your test plaintext passwords",
    ArtifactKind.MD5: "unsalted MD5, one hash/line",
    ArtifactKind.SHA256: "SHA-256, one hash/line",
    ArtifactKind.SHA512CRYPT: "shadow-like salted SHA512 entries",
    ArtifactKind.WORDLIST: "small local wordlist for testing",
}

_EXERCISES = """\
Exercise 1: Dictionary attack with John
 - Command used: ___________________________________________
 - Which hashes were cracked? _______________________________
 - Example cracked (hash -> password): _______________________
 - Time taken (approx): ___________________________________

Exercise 2: Rules & Masks
 - Command used: ___________________________________________
 - Which additional passwords cracked? _______________________
 - Patterns observed (e.g., 'password with digit at end'): _______________

Exercise 3: Salted hashes
 - Command used: ___________________________________________
 - Were any salted hashes cracked? Yes / No
 - Notes: _________________________________________________

Defensive lessons learned:
 - What made passwords weak? _______________________________
 - What would you recommend to users/administrators? _________

Notes / next steps:
 - Try adding rockyou.txt and rerun with --rules
 - Try creating longer/random passwords and verify they are not cracked
"""


def render_worksheet(store: ArtifactStore) -> str:
    files = "\n".join(
        f" - {store.path_for(kind).name} ({_DESCRIPTIONS[kind]})" for kind in ArtifactKind
    )
    return (
        f"{' PASSWORD CRACKING LAB WORKSHEET '.center(64, '=')}\n"
        "Lab date: ____________________\n"
        "\n"
        f"Files created (location: {store.root}):\n"
        f"{files}\n"
        "\n"
        f"{_EXERCISES}"
        "\n"
        f"{RULE}\n"
    )
