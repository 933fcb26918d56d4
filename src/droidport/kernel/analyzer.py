"""Score how cleanly agents, commands and skills map to the destination runtime.

Scoring rule (deterministic):
    score = clamp(100 - 20 * len(issues) - 5 * len(warnings), 0, 100)

Compatibility:
    compatible iff every unmapped tool is the soft-unmapped exception

Failure containment:
    A fetch failure or a skill without SKILL.md is a zero-score result, never
    an exception, so a batch over many artifacts cannot abort on one item.
"""

import logging
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

from droidport.codes import ArtifactKind, Origin
from droidport.contracts import (
    AnalysisResult,
    ItemAnalysis,
    PluginAnalysis,
    PluginSummary,
    SkillAnalysis,
)
from .artifacts import Artifact, PluginArtifacts, SkillArtifact
from .catalog import DEFAULT_CATALOG, ToolCatalog
from .frontmatter import FrontmatterError, parse_frontmatter, parse_tool_list
from .tools import ToolAnalysis, ToolResolver

logger = logging.getLogger(__name__)

FetchFn = Callable[[str, Origin], str]

ISSUE_PENALTY = 20
WARNING_PENALTY = 5

MISSING_NAME = "Missing required 'name' field"
MISSING_DESCRIPTION = "Missing 'description' field (recommended)"
MISSING_SKILL_FILE = "Missing SKILL.md file"
UNPARSED_METADATA = "Failed to parse YAML frontmatter"
NAME_STYLE = "Name should be lowercase with hyphens/underscores only"

_NAME_PATTERN = re.compile(r"^[a-z0-9_-]+$", re.IGNORECASE)


def compute_score(issue_count: int, warning_count: int) -> int:
    """Start at 100, -20 per issue, -5 per warning, clamped to [0, 100]."""
    score = 100 - ISSUE_PENALTY * issue_count - WARNING_PENALTY * warning_count
    return max(0, min(100, score))


def _dedupe(items: List[str]) -> List[str]:
    return list(dict.fromkeys(items))


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


class Analyzer:
    """Compatibility analyzer bound to a catalog."""

    def __init__(self, catalog: ToolCatalog = DEFAULT_CATALOG):
        self.catalog = catalog
        self.resolver = ToolResolver(catalog)

    # -- body checks --------------------------------------------------------

    def check_body(self, body: str) -> Tuple[List[str], List[str]]:
        """Run runtime-reference and legacy-pattern rules over body text.

        Returns:
            (warnings, suggestions), each deduplicated in catalog order.
        """
        warnings: List[str] = []
        suggestions: List[str] = []
        for rule in self.catalog.runtime_reference_rules:
            if rule.matches(body):
                warnings.append(rule.warning)
        for rule in self.catalog.legacy_rules:
            if rule.matches(body):
                warnings.append(rule.warning)
                if rule.suggestion:
                    suggestions.append(rule.suggestion)
        return _dedupe(warnings), _dedupe(suggestions)

    # -- shared plumbing ----------------------------------------------------

    def _split(self, text: str, warnings: List[str]) -> Tuple[Dict[str, Any], str]:
        try:
            block = parse_frontmatter(text)
        except FrontmatterError as e:
            logger.warning("Unparseable metadata, analyzing body only: %s", e)
            warnings.append(UNPARSED_METADATA)
            return {}, text or ""
        return block.data, block.body

    def _finish(
        self,
        issues: List[str],
        warnings: List[str],
        suggestions: List[str],
        tools: ToolAnalysis,
    ) -> AnalysisResult:
        return AnalysisResult(
            compatible=not tools.hard_unmapped,
            score=compute_score(len(issues), len(warnings)),
            issues=issues,
            warnings=warnings,
            mapped_tools=tools.mapped,
            unmapped_tools=tools.unmapped,
            required_mcps=tools.required_mcps,
            suggestions=suggestions,
        )

    # -- text-level analysis (pure) -----------------------------------------

    def analyze_agent_text(self, text: str, fallback_name: Optional[str] = None) -> AnalysisResult:
        """Analyze an agent definition; `tools` holds its capability tokens."""
        issues: List[str] = []
        warnings: List[str] = []
        suggestions: List[str] = []

        data, body = self._split(text, warnings)

        name = data.get("name") or fallback_name
        if not name:
            issues.append(MISSING_NAME)
        elif not _NAME_PATTERN.match(str(name)):
            warnings.append(NAME_STYLE)

        tools = self.resolver.analyze(parse_tool_list(data.get("tools")))
        issues.extend(tools.issues)
        warnings.extend(tools.warnings)
        suggestions.extend(tools.suggestions)
        if tools.hard_unmapped:
            suggestions.append(f"Consider removing or replacing: {', '.join(tools.hard_unmapped)}")

        body_warnings, body_suggestions = self.check_body(body)
        warnings.extend(body_warnings)
        suggestions.extend(body_suggestions)

        if not data.get("description"):
            warnings.append(MISSING_DESCRIPTION)

        return self._finish(issues, warnings, suggestions, tools)

    def analyze_command_text(self, text: str) -> AnalysisResult:
        """Analyze a command; `allowed-tools` holds its capability tokens."""
        issues: List[str] = []
        warnings: List[str] = []
        suggestions: List[str] = []

        data, body = self._split(text, warnings)

        tools = self.resolver.analyze(parse_tool_list(data.get("allowed-tools")))
        issues.extend(tools.issues)
        warnings.extend(tools.warnings)
        suggestions.extend(tools.suggestions)

        body_warnings, body_suggestions = self.check_body(body)
        warnings.extend(body_warnings)
        suggestions.extend(body_suggestions)

        return self._finish(issues, warnings, suggestions, tools)

    def analyze_skill_text(self, text: str) -> AnalysisResult:
        """Analyze a SKILL.md; `allowed-tools` is optional."""
        issues: List[str] = []
        warnings: List[str] = []
        suggestions: List[str] = []

        data, body = self._split(text, warnings)

        if not data.get("name"):
            issues.append(MISSING_NAME)
        if not data.get("description"):
            warnings.append(MISSING_DESCRIPTION)

        tools = self.resolver.analyze(parse_tool_list(data.get("allowed-tools")))
        issues.extend(tools.issues)
        warnings.extend(tools.warnings)
        suggestions.extend(tools.suggestions)

        body_warnings, body_suggestions = self.check_body(body)
        warnings.extend(body_warnings)
        suggestions.extend(body_suggestions)

        return self._finish(issues, warnings, suggestions, tools)

    # -- artifact-level analysis --------------------------------------------

    def _content(self, src: str, origin: Origin, content: Optional[str], fetch: Optional[FetchFn]) -> str:
        if content is not None:
            return content
        if fetch is None:
            raise ValueError(f"No content and no fetch function for {src}")
        return fetch(src, origin)

    def analyze_agent(self, agent: Artifact, fetch: Optional[FetchFn] = None) -> AnalysisResult:
        try:
            text = self._content(agent.src, agent.origin, agent.content, fetch)
        except Exception as e:
            logger.warning("Failed to fetch agent %s from %s: %s", agent.name, agent.src, e)
            return AnalysisResult.failure(f"Failed to fetch content: {e}")
        return self.analyze_agent_text(text, fallback_name=agent.name)

    def analyze_command(self, command: Artifact, fetch: Optional[FetchFn] = None) -> AnalysisResult:
        try:
            text = self._content(command.src, command.origin, command.content, fetch)
        except Exception as e:
            logger.warning("Failed to fetch command %s from %s: %s", command.name, command.src, e)
            return AnalysisResult.failure(f"Failed to fetch content: {e}")
        return self.analyze_command_text(text)

    def analyze_skill(self, skill: SkillArtifact, fetch: Optional[FetchFn] = None) -> AnalysisResult:
        """Locate SKILL.md first; without it there is nothing to analyze."""
        main = skill.main_file()
        if main is None:
            return AnalysisResult.failure(MISSING_SKILL_FILE)
        try:
            text = self._content(main.src, main.origin, main.content, fetch)
        except Exception as e:
            logger.warning("Failed to fetch skill %s from %s: %s", skill.name, main.src, e)
            return AnalysisResult.failure(f"Failed to fetch content: {e}")
        return self.analyze_skill_text(text)

    def analyze(self, artifact: Artifact, fetch: Optional[FetchFn] = None) -> AnalysisResult:
        """Dispatch on artifact.kind (agents and commands only)."""
        if artifact.kind == ArtifactKind.AGENT:
            return self.analyze_agent(artifact, fetch)
        if artifact.kind == ArtifactKind.COMMAND:
            return self.analyze_command(artifact, fetch)
        raise ValueError(f"Use analyze_skill for skill artifacts: {artifact.name}")

    # -- batch ----------------------------------------------------------------

    def analyze_plugin(self, plugin: PluginArtifacts, fetch: Optional[FetchFn] = None) -> PluginAnalysis:
        """Analyze every artifact of a plugin, one at a time, in discovery order."""
        agents: List[ItemAnalysis] = []
        commands: List[ItemAnalysis] = []
        skills: List[SkillAnalysis] = []

        for agent in plugin.agents:
            logger.debug("Analyzing agent: %s", agent.name)
            agents.append(ItemAnalysis(name=agent.name, src=agent.src, result=self.analyze_agent(agent, fetch)))

        for command in plugin.commands:
            logger.debug("Analyzing command: %s", command.name)
            commands.append(ItemAnalysis(name=command.name, src=command.src, result=self.analyze_command(command, fetch)))

        for skill in plugin.skills:
            logger.debug("Analyzing skill: %s", skill.name)
            skills.append(SkillAnalysis(name=skill.name, src_dir=skill.src_dir, result=self.analyze_skill(skill, fetch)))

        compatible_agents = sum(1 for a in agents if a.result.compatible)
        compatible_commands = sum(1 for c in commands if c.result.compatible)
        compatible_skills = sum(1 for s in skills if s.result.compatible)

        total = len(agents) + len(commands) + len(skills)
        compatible = compatible_agents + compatible_commands + compatible_skills
        overall = _round_half_up(compatible / total * 100) if total else 100

        return PluginAnalysis(
            name=plugin.name,
            description=plugin.description,
            agents=agents,
            commands=commands,
            skills=skills,
            summary=PluginSummary(
                total_agents=len(agents),
                compatible_agents=compatible_agents,
                total_commands=len(commands),
                compatible_commands=compatible_commands,
                total_skills=len(skills),
                compatible_skills=compatible_skills,
                overall_score=overall,
            ),
        )
