"""Enum constants shared by the droidport kernel and API.

These constants prevent stringly-typed kinds and classes and ensure
client code uses the values the engine actually emits.
"""

from enum import Enum


class ArtifactKind(str, Enum):
    """Kinds of plugin artifacts the engine analyzes and converts."""

    AGENT = "agent"  # Capability-bearing definition; installed as a droid
    COMMAND = "command"
    SKILL = "skill"


class Origin(str, Enum):
    """Where artifact bytes come from."""

    LOCAL = "local"
    REMOTE = "remote"


class ToolClass(str, Enum):
    """Classification of a single capability token.

    Precedence is fixed: NATIVE, PASSTHROUGH, RESTRICTED, then MAPPED/UNMAPPED.
    """

    NATIVE = "native"  # Already a destination tool name
    PASSTHROUGH = "passthrough"  # mcp__<server>[__<tool>], kept as-is
    RESTRICTED = "restricted"  # Bash(git *) style, collapsed to the tool
    MAPPED = "mapped"  # Renamed through the mapping table
    UNMAPPED = "unmapped"  # Null mapping or unknown token
