"""droidport: port Claude Code plugins (agents, commands, skills) to Factory droids."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("droidport")
except PackageNotFoundError:
    __version__ = "dev"

# Public API exports
# Note: batch helpers (analyze_plugins, select, report) stay in droidport.api
from droidport.api import analyze_artifact, analyze_path, convert_artifact, convert_path, normalize
from droidport.codes import ArtifactKind, Origin, ToolClass
from droidport.contracts import AnalysisResult, ConversionResult, NormalizeResult, PluginAnalysis
from droidport.kernel.analyzer import Analyzer
from droidport.kernel.catalog import DEFAULT_CATALOG, ToolCatalog

__all__ = [
    "__version__",
    "analyze_artifact",
    "analyze_path",
    "convert_artifact",
    "convert_path",
    "normalize",
    "Analyzer",
    "AnalysisResult",
    "ConversionResult",
    "NormalizeResult",
    "PluginAnalysis",
    "ArtifactKind",
    "Origin",
    "ToolClass",
    "ToolCatalog",
    "DEFAULT_CATALOG",
]
