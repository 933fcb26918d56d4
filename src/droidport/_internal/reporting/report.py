"""Render the batch compatibility report (internal)."""

from typing import List, Sequence

from droidport.contracts import PluginAnalysis


RULE = "═" * 62


def _status_icon(score: int) -> str:
    if score >= 80:
        return "✓"
    if score >= 50:
        return "⚠"
    return "✗"


def _incompatible_section(lines: List[str], label: str, items, fallback: str) -> None:
    bad = [item for item in items if not item.result.compatible]
    if not bad:
        return
    lines.append("│")
    lines.append(f"│  ⚠ Incompatible {label} (will be skipped):")
    for item in bad:
        first = item.result.issues[0] if item.result.issues else fallback
        lines.append(f"│    - {item.name}: {first}")


def format_analysis_report(analyses: Sequence[PluginAnalysis], title: str = "Factory AI Compatibility Analysis") -> str:
    """Human-readable report over already-computed plugin analyses."""
    lines: List[str] = []
    lines.append(f"╔{RULE}╗")
    lines.append(f"║{title.center(62)}║")
    lines.append(f"╚{RULE}╝")
    lines.append("")

    for plugin in analyses:
        summary = plugin.summary
        lines.append(f"┌─ {plugin.name} {_status_icon(summary.overall_score)} ({summary.overall_score}% compatible)")
        lines.append(f"│  {plugin.description or '(no description)'}")
        lines.append("│")
        lines.append(f"│  Agents:   {summary.compatible_agents}/{summary.total_agents} compatible")
        lines.append(f"│  Commands: {summary.compatible_commands}/{summary.total_commands} compatible")
        lines.append(f"│  Skills:   {summary.compatible_skills}/{summary.total_skills} compatible")

        mcps = plugin.required_mcps()
        if mcps:
            lines.append("│")
            lines.append(f"│  ℹ Requires MCP servers: {', '.join(mcps)}")

        _incompatible_section(lines, "agents", plugin.agents, "incompatible tools")
        _incompatible_section(lines, "commands", plugin.commands, "incompatible tools")
        _incompatible_section(lines, "skills", plugin.skills, "incompatible")

        lines.append("└" + "─" * 61)
        lines.append("")

    total_agents = sum(p.summary.total_agents for p in analyses)
    compat_agents = sum(p.summary.compatible_agents for p in analyses)
    total_commands = sum(p.summary.total_commands for p in analyses)
    compat_commands = sum(p.summary.compatible_commands for p in analyses)
    total_skills = sum(p.summary.total_skills for p in analyses)
    compat_skills = sum(p.summary.compatible_skills for p in analyses)

    lines.append("Summary:")
    lines.append(f"  Will import: {compat_agents} agents, {compat_commands} commands, {compat_skills} skills")
    lines.append(
        f"  Will skip:   {total_agents - compat_agents} agents, "
        f"{total_commands - compat_commands} commands, {total_skills - compat_skills} skills"
    )
    return "\n".join(lines)
