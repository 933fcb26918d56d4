"""Tests for the human-readable batch report."""

from droidport.api import analyze_plugins, load_plugin_dir
from droidport.contracts import AnalysisResult, ItemAnalysis, PluginAnalysis, PluginSummary
from droidport._internal.reporting.report import format_analysis_report


def test_report_for_local_plugin(plugin_dir):
    analyses = analyze_plugins([load_plugin_dir(plugin_dir)])
    report = format_analysis_report(analyses)
    lines = report.splitlines()

    assert "Factory AI Compatibility Analysis" in lines[1]
    assert "┌─ demo ⚠ (75% compatible)" in lines
    assert "│  Demo plugin" in lines
    assert "│  Agents:   1/2 compatible" in lines
    assert "│  Commands: 1/1 compatible" in lines
    assert "│  Skills:   1/1 compatible" in lines
    assert "│  ⚠ Incompatible agents (will be skipped):" in lines
    assert "│    - notebook: Tool 'NotebookEdit' has no Factory equivalent" in lines
    assert lines[-3] == "Summary:"
    assert lines[-2] == "  Will import: 1 agents, 1 commands, 1 skills"
    assert lines[-1] == "  Will skip:   1 agents, 0 commands, 0 skills"


def test_report_icons_and_mcps():
    """Score thresholds pick the icon; required MCP servers are listed."""
    mcp_result = AnalysisResult(compatible=True, score=95, required_mcps=["github"])
    good = PluginAnalysis(
        name="good",
        agents=[ItemAnalysis(name="a", src="a.md", result=mcp_result)],
        summary=PluginSummary(total_agents=1, compatible_agents=1, overall_score=100),
    )
    bad = PluginAnalysis(
        name="bad",
        agents=[ItemAnalysis(name="b", src="b.md", result=AnalysisResult(compatible=False, score=80))],
        summary=PluginSummary(total_agents=1, compatible_agents=0, overall_score=0),
    )
    report = format_analysis_report([good, bad])
    assert "┌─ good ✓ (100% compatible)" in report
    assert "│  (no description)" in report
    assert "│  ℹ Requires MCP servers: github" in report
    assert "┌─ bad ✗ (0% compatible)" in report
    # No issues recorded: generic reason
    assert "│    - b: incompatible tools" in report


def test_report_empty_batch():
    report = format_analysis_report([])
    assert report.endswith("  Will skip:   0 agents, 0 commands, 0 skills")
