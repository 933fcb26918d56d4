"""Resolve source-runtime capability tokens into the destination vocabulary.

Classification precedence (first match wins):
1. native       - token is already a destination tool
2. passthrough  - mcp__<server> / mcp__<server>__<tool>; server recorded
3. restricted   - Bash(git *) style; collapses to the tool, restriction dropped
4. mapped       - non-null entry in the mapping table
   unmapped     - null entry or unknown token

Resolution is pure: the same token list always yields the same analysis.
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from droidport.codes import ToolClass
from .catalog import DEFAULT_CATALOG, ToolCatalog


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one token."""
    token: str
    target: Optional[str]  # Destination token, None when unmapped
    tool_class: ToolClass
    dependency: Optional[str] = None  # MCP server name for passthrough tokens
    soft: bool = False  # Unmapped but advisory only


@dataclass
class ToolAnalysis:
    """Resolution of a whole token list, with findings."""
    mapped: List[str] = field(default_factory=list)  # Deduplicated, first-seen order
    unmapped: List[str] = field(default_factory=list)
    required_mcps: List[str] = field(default_factory=list)
    issues: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    soft_unmapped: List[str] = field(default_factory=list)

    @property
    def hard_unmapped(self) -> List[str]:
        """Unmapped tokens that block compatibility."""
        return [t for t in self.unmapped if t not in self.soft_unmapped]


def _dedupe(items: Iterable[str]) -> List[str]:
    seen = set()
    out = []
    for item in items:
        if item not in seen:
            seen.add(item)
            out.append(item)
    return out


class ToolResolver:
    """Maps capability tokens using a ToolCatalog."""

    def __init__(self, catalog: ToolCatalog = DEFAULT_CATALOG):
        self.catalog = catalog
        self._passthrough = re.compile(catalog.passthrough_pattern)
        if catalog.restricted_tools:
            names = "|".join(re.escape(n) for n in sorted(catalog.restricted_tools))
            self._restricted: Optional[re.Pattern] = re.compile(rf"^({names})\(.+\)$", re.DOTALL)
        else:
            self._restricted = None

    def resolve(self, token: str) -> Resolution:
        """Classify a single token."""
        catalog = self.catalog

        if token in catalog.destination_tools:
            return Resolution(token=token, target=token, tool_class=ToolClass.NATIVE)

        m = self._passthrough.match(token)
        if m:
            return Resolution(
                token=token,
                target=token,
                tool_class=ToolClass.PASSTHROUGH,
                dependency=m.group(1),
            )

        if self._restricted is not None:
            m = self._restricted.match(token)
            if m:
                return Resolution(
                    token=token,
                    target=catalog.restricted_tools[m.group(1)],
                    tool_class=ToolClass.RESTRICTED,
                )

        mapping = catalog.tool_mapping.get(token)
        if mapping:
            return Resolution(token=token, target=mapping, tool_class=ToolClass.MAPPED)

        return Resolution(
            token=token,
            target=None,
            tool_class=ToolClass.UNMAPPED,
            soft=token == catalog.soft_unmapped_tool,
        )

    def analyze(self, tokens: Iterable[str]) -> ToolAnalysis:
        """Resolve every token and collect issues, warnings and suggestions."""
        catalog = self.catalog
        analysis = ToolAnalysis()
        mapped: List[str] = []

        for token in tokens:
            resolution = self.resolve(token)
            if resolution.target is not None:
                mapped.append(resolution.target)
                if resolution.dependency and resolution.dependency not in analysis.required_mcps:
                    analysis.required_mcps.append(resolution.dependency)
                continue

            analysis.unmapped.append(token)
            if resolution.soft:
                analysis.soft_unmapped.append(token)
                analysis.warnings.append(
                    f"{token} not available - agent will use conversation flow for clarification"
                )
                analysis.suggestions.append(
                    "Consider adding 'Ask clarifying questions before proceeding' to the prompt"
                )
            elif token in catalog.tool_mapping:
                analysis.issues.append(f"Tool '{token}' has no {catalog.destination_name} equivalent")
            else:
                analysis.issues.append(
                    f"Unknown tool '{token}' - may be {catalog.source_name}-specific"
                )

        if analysis.required_mcps:
            analysis.warnings.append(f"Requires MCP servers: {', '.join(analysis.required_mcps)}")

        analysis.mapped = _dedupe(mapped)
        return analysis

    def map_tools(self, tokens: Iterable[str]) -> List[str]:
        """Destination tokens only; unmapped tokens are dropped."""
        return _dedupe(
            r.target for r in (self.resolve(t) for t in tokens) if r.target is not None
        )
