"""Public API for droidport.

High-level functions that fetch, analyze and convert artifacts and return
complete, structured results. Callers should use these functions instead of
importing from _internal.
"""

import json
import logging
import os
from pathlib import Path
from typing import AbstractSet, Dict, List, Optional, Sequence, Union

from droidport.codes import ArtifactKind, Origin
from droidport.contracts import AnalysisResult, ConversionResult, NormalizeResult, PluginAnalysis
from droidport.kernel.analyzer import Analyzer, FetchFn
from droidport.kernel.artifacts import Artifact, PluginArtifacts, SkillArtifact, SkillFile
from droidport.kernel.catalog import DEFAULT_CATALOG, ToolCatalog
from droidport.kernel.convert_agent import convert_agent
from droidport.kernel.convert_command import convert_command
from droidport.kernel.convert_skill import convert_skill
from droidport.kernel.normalizer import normalize_text
from droidport.kernel.selection import SelectionPlan, plan_selection
from droidport._internal.io.catalog import load_catalog_from_path
from droidport._internal.io.fetch import fetch_content
from droidport._internal.reporting.report import format_analysis_report

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike, Path]

# Plugin manifest location inside a local plugin directory
PLUGIN_MANIFEST = Path(".claude-plugin") / "plugin.json"


def _normalize_path(path: PathLike) -> Path:
    """Normalize path input to Path object."""
    return Path(path) if not isinstance(path, Path) else path


def load_catalog(catalog: Union[ToolCatalog, PathLike, None] = None) -> ToolCatalog:
    """Return a catalog: the default, a given instance, or one loaded from JSON."""
    if catalog is None:
        return DEFAULT_CATALOG
    if isinstance(catalog, ToolCatalog):
        return catalog
    return load_catalog_from_path(_normalize_path(catalog))


def infer_kind(path: PathLike) -> ArtifactKind:
    """Directories are skills; files under a commands/ directory are commands; the rest are agents."""
    p = _normalize_path(path)
    if p.is_dir():
        return ArtifactKind.SKILL
    if "commands" in p.parts:
        return ArtifactKind.COMMAND
    return ArtifactKind.AGENT


# -- local artifact loading ------------------------------------------------


def skill_from_dir(skill_dir: PathLike) -> SkillArtifact:
    """Describe a local skill directory (every file, relative paths sorted)."""
    root = _normalize_path(skill_dir)
    if not root.is_dir():
        raise FileNotFoundError(f"Skill directory not found: {root}")
    files = [
        SkillFile(relative_path=p.relative_to(root).as_posix(), src=str(p), origin=Origin.LOCAL)
        for p in sorted(root.rglob("*"))
        if p.is_file()
    ]
    return SkillArtifact(name=root.name, src_dir=str(root), origin=Origin.LOCAL, files=files)


def _markdown_artifacts(directory: Path, kind: ArtifactKind) -> List[Artifact]:
    if not directory.is_dir():
        return []
    return [
        Artifact(name=p.stem, src=str(p), origin=Origin.LOCAL, kind=kind)
        for p in sorted(directory.glob("*.md"))
        if p.is_file()
    ]


def load_plugin_dir(plugin_dir: PathLike) -> PluginArtifacts:
    """Collect agents/, commands/ and skills/ of a local plugin directory.

    Name and description come from .claude-plugin/plugin.json when present,
    otherwise the directory name is used.
    """
    root = _normalize_path(plugin_dir)
    if not root.is_dir():
        raise FileNotFoundError(f"Plugin directory not found: {root}")

    name = root.name
    description = ""
    manifest = root / PLUGIN_MANIFEST
    if manifest.is_file():
        with open(manifest, "r", encoding="utf-8") as f:
            data = json.load(f)
        name = data.get("name") or name
        description = data.get("description") or ""

    skills_dir = root / "skills"
    skills = (
        [skill_from_dir(p) for p in sorted(skills_dir.iterdir()) if p.is_dir()]
        if skills_dir.is_dir()
        else []
    )

    return PluginArtifacts(
        name=name,
        description=description,
        agents=_markdown_artifacts(root / "agents", ArtifactKind.AGENT),
        commands=_markdown_artifacts(root / "commands", ArtifactKind.COMMAND),
        skills=skills,
    )


# -- analysis --------------------------------------------------------------


def analyze_artifact(
    artifact: Union[Artifact, SkillArtifact],
    catalog: Union[ToolCatalog, PathLike, None] = None,
    fetch: FetchFn = fetch_content,
) -> AnalysisResult:
    """Analyze one agent, command or skill. Never raises on fetch failure."""
    analyzer = Analyzer(load_catalog(catalog))
    if isinstance(artifact, SkillArtifact):
        return analyzer.analyze_skill(artifact, fetch)
    return analyzer.analyze(artifact, fetch)


def analyze_path(
    path: PathLike,
    kind: Optional[ArtifactKind] = None,
    catalog: Union[ToolCatalog, PathLike, None] = None,
) -> AnalysisResult:
    """Analyze a local agent file, command file or skill directory."""
    p = _normalize_path(path)
    if not p.exists():
        raise FileNotFoundError(f"Path not found: {p}")
    kind = ArtifactKind(kind) if kind else infer_kind(p)
    if kind == ArtifactKind.SKILL:
        return analyze_artifact(skill_from_dir(p), catalog)
    return analyze_artifact(Artifact(name=p.stem, src=str(p), kind=kind), catalog)


def analyze_plugins(
    plugins: Sequence[PluginArtifacts],
    catalog: Union[ToolCatalog, PathLike, None] = None,
    fetch: FetchFn = fetch_content,
) -> List[PluginAnalysis]:
    """Analyze a batch of plugins sequentially, in input order."""
    analyzer = Analyzer(load_catalog(catalog))
    analyses = []
    for plugin in plugins:
        logger.info("Analyzing plugin: %s", plugin.name)
        analyses.append(analyzer.analyze_plugin(plugin, fetch))
    return analyses


def report(analyses: Sequence[PluginAnalysis]) -> str:
    """Render the human-readable batch report."""
    return format_analysis_report(analyses)


def select(
    plugins: Sequence[PluginArtifacts],
    analyses: Sequence[PluginAnalysis],
    include_all: bool = False,
    include_agents: bool = True,
    include_commands: bool = True,
    include_skills: bool = True,
) -> SelectionPlan:
    """Pick the artifacts to hand to an installer."""
    return plan_selection(
        plugins,
        analyses,
        include_all=include_all,
        include_agents=include_agents,
        include_commands=include_commands,
        include_skills=include_skills,
    )


# -- conversion ------------------------------------------------------------


def convert_text(
    text: str,
    kind: ArtifactKind,
    name: Optional[str] = None,
    catalog: Union[ToolCatalog, PathLike, None] = None,
    normalize: Optional[bool] = None,
    available_droids: Optional[AbstractSet[str]] = None,
    available_skills: Optional[AbstractSet[str]] = None,
) -> ConversionResult:
    """Dispatch to the converter for `kind`.

    normalize defaults per kind: on for commands, off for agents and skills.
    """
    tool_catalog = load_catalog(catalog)
    kind = ArtifactKind(kind)
    if kind == ArtifactKind.AGENT:
        return convert_agent(
            text,
            fallback_name=name,
            catalog=tool_catalog,
            normalize=bool(normalize),
            available_droids=available_droids,
            available_skills=available_skills,
        )
    if kind == ArtifactKind.COMMAND:
        return convert_command(
            text,
            catalog=tool_catalog,
            normalize=True if normalize is None else normalize,
            available_droids=available_droids,
            available_skills=available_skills,
        )
    return convert_skill(
        text,
        fallback_name=name,
        catalog=tool_catalog,
        normalize=bool(normalize),
        available_droids=available_droids,
        available_skills=available_skills,
    )


def convert_artifact(
    artifact: Union[Artifact, SkillArtifact],
    catalog: Union[ToolCatalog, PathLike, None] = None,
    normalize: Optional[bool] = None,
    available_droids: Optional[AbstractSet[str]] = None,
    available_skills: Optional[AbstractSet[str]] = None,
    fetch: FetchFn = fetch_content,
) -> ConversionResult:
    """Fetch and convert one artifact. For skills only the main file is converted.

    Raises:
        FetchError: content could not be retrieved.
        ValueError: a skill has no SKILL.md.
    """
    if isinstance(artifact, SkillArtifact):
        main = artifact.main_file()
        if main is None:
            raise ValueError(f"Skill {artifact.name} has no SKILL.md")
        text = main.content if main.content is not None else fetch(main.src, main.origin)
        kind = ArtifactKind.SKILL
    else:
        text = artifact.content if artifact.content is not None else fetch(artifact.src, artifact.origin)
        kind = artifact.kind
    return convert_text(
        text,
        kind,
        name=artifact.name,
        catalog=catalog,
        normalize=normalize,
        available_droids=available_droids,
        available_skills=available_skills,
    )


def convert_path(
    path: PathLike,
    kind: Optional[ArtifactKind] = None,
    catalog: Union[ToolCatalog, PathLike, None] = None,
    normalize: Optional[bool] = None,
    available_droids: Optional[AbstractSet[str]] = None,
    available_skills: Optional[AbstractSet[str]] = None,
) -> ConversionResult:
    """Convert a local agent file, command file or skill directory."""
    p = _normalize_path(path)
    if not p.exists():
        raise FileNotFoundError(f"Path not found: {p}")
    kind = ArtifactKind(kind) if kind else infer_kind(p)
    if kind == ArtifactKind.SKILL:
        artifact: Union[Artifact, SkillArtifact] = skill_from_dir(p)
    else:
        artifact = Artifact(name=p.stem, src=str(p), kind=kind)
    return convert_artifact(
        artifact,
        catalog=catalog,
        normalize=normalize,
        available_droids=available_droids,
        available_skills=available_skills,
    )


def normalize(
    text: str,
    kind: str = "generic",
    add_marker: bool = True,
    available_droids: Optional[AbstractSet[str]] = None,
    available_skills: Optional[AbstractSet[str]] = None,
) -> NormalizeResult:
    """Rewrite legacy patterns in text (see kernel.normalizer.normalize_text)."""
    return normalize_text(
        text,
        kind=kind,
        add_marker=add_marker,
        available_droids=available_droids,
        available_skills=available_skills,
    )


def summary_counts(analyses: Sequence[PluginAnalysis]) -> Dict[str, int]:
    """Totals across plugins, keyed like PluginSummary fields."""
    totals: Dict[str, int] = {}
    for analysis in analyses:
        for key, value in analysis.summary.model_dump().items():
            if key == "overall_score":
                continue
            totals[key] = totals.get(key, 0) + value
    return totals
