"""
Cracking Infrastructure Module.

Builds and runs John the Ripper and Hashcat invocations against the lab's
hash files. Tools run locally in the foreground and only with confirmation.
"""

from .hashcat_manager import HASH_MODES, AttackMode, HashcatManager
from .john_manager import JOHN_FORMATS, JohnManager
from .runner import (
    DEFAULT_PLAN,
    RECOMMENDED_PLAN,
    InvocationResult,
    InvocationStatus,
    RunnerStats,
    ToolInvocation,
    ToolRunner,
)
from .wordlist_manager import (
    SMALL_WORDLIST,
    Wordlist,
    WordlistManager,
)

__all__ = [
    "DEFAULT_PLAN",
    # Hashcat
    "HASH_MODES",
    "AttackMode",
    "HashcatManager",
    # John
    "JOHN_FORMATS",
    "JohnManager",
    # Runner
    "InvocationResult",
    "InvocationStatus",
    "RECOMMENDED_PLAN",
    "RunnerStats",
    "ToolInvocation",
    "ToolRunner",
    # Wordlist
    "SMALL_WORDLIST",
    "Wordlist",
    "WordlistManager",
]
