"""Static catalogs: destination tools, tool mapping, and legacy-pattern rules.

All mapping semantics live in a single `ToolCatalog` value. The resolver,
analyzer and converters receive a catalog instead of reading module-level
state, so alternate catalogs can be substituted (tests, other destinations).
"""

import json
import re
from typing import Dict, FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LegacyPatternRule(BaseModel):
    """A body-text convention from the source runtime.

    Matched read-only during analysis. The normalizer rewrites the subset
    of these conventions it knows how to express in the destination runtime.
    """
    pattern: str  # Regex source
    warning: str
    suggestion: Optional[str] = None
    multiline: bool = False
    ignore_case: bool = False

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        """Reject patterns that do not compile."""
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid rule pattern '{v}': {e}")
        return v

    def compiled(self) -> "re.Pattern[str]":
        flags = 0
        if self.multiline:
            flags |= re.MULTILINE
        if self.ignore_case:
            flags |= re.IGNORECASE
        return re.compile(self.pattern, flags)

    def matches(self, text: str) -> bool:
        return self.compiled().search(text) is not None


class ToolCatalog(BaseModel):
    """Everything the engine needs to know about both tool vocabularies.

    - destination_tools: tokens that are already valid in the destination
    - tool_mapping: source token -> destination token, or None when the
      destination has no equivalent
    - passthrough_pattern: externally provided tool servers, kept unchanged;
      group 1 is the server name
    - restricted_tools: shell-like tools accepting `Name(restriction)`,
      mapped to their destination token (the restriction is dropped)
    - soft_unmapped_tool: unmapped, but advisory rather than blocking
    - legacy_rules / runtime_reference_rules: body-text checks
    """
    destination_name: str = "Factory"
    source_name: str = "Claude"
    destination_tools: FrozenSet[str]
    tool_mapping: Dict[str, Optional[str]]
    passthrough_pattern: str = r"^mcp__([A-Za-z0-9-]+(?:_[A-Za-z0-9-]+)*)(?:__(.*))?$"
    restricted_tools: Dict[str, str] = Field(default_factory=dict)
    soft_unmapped_tool: str = "AskUserQuestion"
    legacy_rules: Tuple[LegacyPatternRule, ...] = ()
    runtime_reference_rules: Tuple[LegacyPatternRule, ...] = ()
    delegation_tool: str = "Task"
    skill_tool: str = "Skill"

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("passthrough_pattern")
    @classmethod
    def validate_passthrough_pattern(cls, v: str) -> str:
        """Pattern must compile and capture the server name in group 1."""
        try:
            compiled = re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid passthrough pattern '{v}': {e}")
        if compiled.groups < 1:
            raise ValueError("passthrough_pattern must capture the server name in group 1")
        return v

    @classmethod
    def from_json_bytes(cls, data: bytes) -> "ToolCatalog":
        """Load a catalog from JSON bytes (UTF-8)."""
        return cls.model_validate(json.loads(data.decode("utf-8")))


# Destination (Factory) tool vocabulary
FACTORY_TOOLS = frozenset([
    # Read-only
    "Read",
    "LS",
    "Grep",
    "Glob",
    # Edit
    "Create",
    "Edit",
    "ApplyPatch",
    "MultiEdit",
    # Execute
    "Execute",
    # Web
    "WebSearch",
    "FetchUrl",
    # Special
    "TodoWrite",
    "Task",
    "Skill",
    # Categories (allowed as values)
    "read-only",
    "edit",
    "execute",
    "web",
    "mcp",
])

# Source (Claude Code) tool -> destination tool; None means no equivalent
CLAUDE_TO_FACTORY: Dict[str, Optional[str]] = {
    "Read": "Read",
    "Write": "Create",
    "Edit": "Edit",
    "MultiEdit": "MultiEdit",
    "Bash": "Execute",
    "Execute": "Execute",
    "Glob": "Glob",
    "Grep": "Grep",
    "LS": "LS",
    "WebSearch": "WebSearch",
    "FetchUrl": "FetchUrl",
    "WebFetch": "FetchUrl",
    "TodoWrite": "TodoWrite",
    "Task": "Task",
    "Create": "Create",
    "ApplyPatch": "ApplyPatch",
    "Skill": "Skill",
    "NotebookEdit": None,
    "BrowseURL": None,  # Use WebSearch/FetchUrl instead
    "AskUserQuestion": None,  # Conversation flow replaces it
}

LEGACY_RULES = (
    LegacyPatternRule(
        pattern=r"\bAskUserQuestion\b",
        warning="References AskUserQuestion (not available in Factory) - should ask questions in normal chat",
        suggestion="Replace 'AskUserQuestion' references with plain-language prompts to ask the user",
    ),
    LegacyPatternRule(
        pattern=r"^[ \t]*agent[ \t]+\S+",
        multiline=True,
        ignore_case=True,
        warning="Contains 'agent <name>' invocations - Factory uses the Task tool + subagent_type",
        suggestion="Replace 'agent <name>' with guidance to use the Task tool (subagent_type: <name>)",
    ),
    LegacyPatternRule(
        pattern=r"^[ \t]*skill[ \t]+\S+",
        multiline=True,
        ignore_case=True,
        warning="Contains 'skill <name>' invocations - Factory uses the Skill tool",
        suggestion="Replace 'skill <name>' with guidance to use the Skill tool",
    ),
    LegacyPatternRule(
        pattern=r"(?<![\w.])\.claude/",
        warning="References .claude/ paths - Factory uses .factory/ for most local automation/config",
        suggestion="If this is a Factory workflow, update paths to .factory/ equivalents",
    ),
)

RUNTIME_REFERENCE_RULES = (
    LegacyPatternRule(pattern=r"/claude\s+", ignore_case=True,
                      warning="Contains Claude-specific reference: /claude\\s+"),
    LegacyPatternRule(pattern=r"claude\s+code\s+specific", ignore_case=True,
                      warning="Contains Claude-specific reference: claude\\s+code\\s+specific"),
    LegacyPatternRule(pattern=r"NotebookEdit",
                      warning="Contains Claude-specific reference: NotebookEdit"),
    LegacyPatternRule(pattern=r"@claude", ignore_case=True,
                      warning="Contains Claude-specific reference: @claude"),
)

DEFAULT_CATALOG = ToolCatalog(
    destination_tools=FACTORY_TOOLS,
    tool_mapping=CLAUDE_TO_FACTORY,
    restricted_tools={"Bash": "Execute", "Execute": "Execute"},
    legacy_rules=LEGACY_RULES,
    runtime_reference_rules=RUNTIME_REFERENCE_RULES,
)
