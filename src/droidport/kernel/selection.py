"""Decide which analyzed artifacts are handed to the installer.

Selection is per kind and purely a function of the analysis results:
compatible items are kept, incompatible ones are reported by name. The
`include_all` override keeps everything (operators accepting unmapped tools).
"""

from dataclasses import dataclass, field
from typing import Dict, Generic, List, Sequence, TypeVar

from droidport.contracts import AnalysisResult, PluginAnalysis
from .artifacts import Artifact, PluginArtifacts, SkillArtifact

T = TypeVar("T")


@dataclass
class Selection(Generic[T]):
    """Items to install plus names of the skipped ones."""
    selected: List[T] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


@dataclass
class SelectionPlan:
    """Per-kind selections across a batch of plugins."""
    agents: List[Artifact] = field(default_factory=list)
    commands: List[Artifact] = field(default_factory=list)
    skills: List[SkillArtifact] = field(default_factory=list)
    skipped_agents: List[str] = field(default_factory=list)
    skipped_commands: List[str] = field(default_factory=list)
    skipped_skills: List[str] = field(default_factory=list)

    @property
    def total_selected(self) -> int:
        return len(self.agents) + len(self.commands) + len(self.skills)

    @property
    def total_skipped(self) -> int:
        return len(self.skipped_agents) + len(self.skipped_commands) + len(self.skipped_skills)


def select_compatible(
    items: Sequence[T],
    results: Sequence[AnalysisResult],
    include_all: bool = False,
) -> Selection[T]:
    """Split items into compatible (selected) and incompatible (skipped names).

    Raises:
        ValueError: items and results differ in length.
    """
    if len(items) != len(results):
        raise ValueError(f"Got {len(items)} items but {len(results)} analysis results")

    selection: Selection[T] = Selection()
    for item, result in zip(items, results):
        if include_all or result.compatible:
            selection.selected.append(item)
        else:
            selection.skipped.append(getattr(item, "name", str(item)))
    return selection


def plan_selection(
    plugins: Sequence[PluginArtifacts],
    analyses: Sequence[PluginAnalysis],
    include_all: bool = False,
    include_agents: bool = True,
    include_commands: bool = True,
    include_skills: bool = True,
) -> SelectionPlan:
    """Apply select_compatible per plugin and per kind.

    Analyses are matched to plugins by name. A plugin without an analysis is
    only installable under the include_all override.
    """
    by_name: Dict[str, PluginAnalysis] = {a.name: a for a in analyses}
    plan = SelectionPlan()

    for plugin in plugins:
        analysis = by_name.get(plugin.name)
        if analysis is None:
            if include_all:
                if include_agents:
                    plan.agents.extend(plugin.agents)
                if include_commands:
                    plan.commands.extend(plugin.commands)
                if include_skills:
                    plan.skills.extend(plugin.skills)
            else:
                if include_agents:
                    plan.skipped_agents.extend(a.name for a in plugin.agents)
                if include_commands:
                    plan.skipped_commands.extend(c.name for c in plugin.commands)
                if include_skills:
                    plan.skipped_skills.extend(s.name for s in plugin.skills)
            continue

        if include_agents:
            agents = select_compatible(plugin.agents, [a.result for a in analysis.agents], include_all)
            plan.agents.extend(agents.selected)
            plan.skipped_agents.extend(agents.skipped)
        if include_commands:
            commands = select_compatible(plugin.commands, [c.result for c in analysis.commands], include_all)
            plan.commands.extend(commands.selected)
            plan.skipped_commands.extend(commands.skipped)
        if include_skills:
            skills = select_compatible(plugin.skills, [s.result for s in analysis.skills], include_all)
            plan.skills.extend(skills.selected)
            plan.skipped_skills.extend(skills.skipped)

    return plan
