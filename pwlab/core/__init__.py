"""pwlab Core - Errors, confirmation and tool capability gating."""

from .capability import STANDARD_TOOLS, CapabilityStatus, ToolCapabilities
from .confirm import (
    AlwaysNo,
    AlwaysYes,
    Confirmer,
    ConfirmMode,
    InteractivePrompt,
    confirmer_for,
)
from .errors import (
    ArtifactWriteError,
    CorpusReadError,
    LabError,
    ToolInvocationError,
    ToolUnavailableError,
    UnsupportedAlgorithmError,
)

__all__ = [
    # Confirmation
    "AlwaysNo",
    "AlwaysYes",
    # Errors
    "ArtifactWriteError",
    # Capabilities
    "CapabilityStatus",
    "ConfirmMode",
    "Confirmer",
    "CorpusReadError",
    "InteractivePrompt",
    "LabError",
    "STANDARD_TOOLS",
    "ToolCapabilities",
    "ToolInvocationError",
    "ToolUnavailableError",
    "UnsupportedAlgorithmError",
    "confirmer_for",
]
