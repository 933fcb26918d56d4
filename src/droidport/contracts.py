"""Public result models for droidport."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AnalysisResult(BaseModel):
    """Compatibility analysis of one artifact."""
    compatible: bool
    score: int = Field(..., ge=0, le=100)
    issues: List[str] = Field(default_factory=list)  # Blocking, -20 each
    warnings: List[str] = Field(default_factory=list)  # Advisory, -5 each
    mapped_tools: List[str] = Field(default_factory=list)
    unmapped_tools: List[str] = Field(default_factory=list)
    required_mcps: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def failure(cls, issue: str) -> "AnalysisResult":
        """Zero-score, incompatible result with a single issue."""
        return cls(compatible=False, score=0, issues=[issue])


class NormalizeResult(BaseModel):
    """Outcome of rewriting legacy body patterns."""
    text: str
    changed: bool
    notes: List[str] = Field(default_factory=list)
    referenced_droids: List[str] = Field(default_factory=list)
    unresolved_droids: List[str] = Field(default_factory=list)
    referenced_skills: List[str] = Field(default_factory=list)
    unresolved_skills: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class ItemAnalysis(BaseModel):
    """Analysis of one agent or command within a plugin."""
    name: str
    src: str
    result: AnalysisResult


class SkillAnalysis(BaseModel):
    """Analysis of one skill directory within a plugin."""
    name: str
    src_dir: str
    result: AnalysisResult


class PluginSummary(BaseModel):
    """Per-kind totals for a plugin."""
    total_agents: int = 0
    compatible_agents: int = 0
    total_commands: int = 0
    compatible_commands: int = 0
    total_skills: int = 0
    compatible_skills: int = 0
    overall_score: int = 100  # Percentage of compatible items


class PluginAnalysis(BaseModel):
    """Analysis of every artifact in a plugin."""
    name: str
    description: str = ""
    agents: List[ItemAnalysis] = Field(default_factory=list)
    commands: List[ItemAnalysis] = Field(default_factory=list)
    skills: List[SkillAnalysis] = Field(default_factory=list)
    summary: PluginSummary = Field(default_factory=PluginSummary)

    def required_mcps(self) -> List[str]:
        """Union of required MCP servers across all items, first-seen order."""
        seen: List[str] = []
        for item in [*self.agents, *self.commands, *self.skills]:
            for mcp in item.result.required_mcps:
                if mcp not in seen:
                    seen.append(mcp)
        return seen


class ConversionResult(BaseModel):
    """Converted artifact text plus what the body normalizer did."""
    text: str
    normalized: Optional[NormalizeResult] = None
    fallback: bool = False  # Metadata was unparseable (salvaged or passed through)

    model_config = ConfigDict(frozen=True)
