"""Tests for compatibility analysis and scoring."""

import pytest

from droidport.codes import ArtifactKind, Origin
from droidport.kernel.analyzer import (
    MISSING_DESCRIPTION,
    MISSING_NAME,
    MISSING_SKILL_FILE,
    NAME_STYLE,
    UNPARSED_METADATA,
    Analyzer,
    compute_score,
)
from droidport.kernel.artifacts import Artifact, PluginArtifacts, SkillArtifact, SkillFile


@pytest.fixture
def analyzer():
    return Analyzer()


def test_compute_score_clamps():
    assert compute_score(0, 0) == 100
    assert compute_score(1, 2) == 70
    assert compute_score(6, 0) == 0
    assert compute_score(0, 30) == 0


def test_score_monotonic_in_findings():
    """Adding an issue or a warning never raises the score."""
    for issues in range(7):
        for warnings in range(25):
            assert compute_score(issues + 1, warnings) <= compute_score(issues, warnings)
            assert compute_score(issues, warnings + 1) <= compute_score(issues, warnings)


def test_agent_soft_unmapped_only_is_compatible(analyzer):
    """Bash/WebFetch/AskUserQuestion without a description: compatible, two warnings."""
    text = "---\nname: helper\ntools: Bash, WebFetch, AskUserQuestion\n---\nHelp out.\n"
    result = analyzer.analyze_agent_text(text)

    assert result.compatible is True
    assert result.issues == []
    assert result.mapped_tools == ["Execute", "FetchUrl"]
    assert result.unmapped_tools == ["AskUserQuestion"]
    assert result.warnings == [
        "AskUserQuestion not available - agent will use conversation flow for clarification",
        MISSING_DESCRIPTION,
    ]
    assert result.suggestions == [
        "Consider adding 'Ask clarifying questions before proceeding' to the prompt"
    ]
    assert result.score == 90


def test_agent_hard_unmapped_is_incompatible(analyzer):
    text = "---\nname: nb\ndescription: Notebook editing\ntools: [NotebookEdit, Read]\n---\n"
    result = analyzer.analyze_agent_text(text)
    assert result.compatible is False
    assert result.issues == ["Tool 'NotebookEdit' has no Factory equivalent"]
    assert result.suggestions == ["Consider removing or replacing: NotebookEdit"]
    assert result.score == 80


def test_agent_name_falls_back_to_artifact_name(analyzer):
    """A missing name field is fine when the caller knows the file name."""
    text = "---\ndescription: d\n---\nbody"
    assert MISSING_NAME in analyzer.analyze_agent_text(text).issues
    assert analyzer.analyze_agent_text(text, fallback_name="helper").issues == []


def test_agent_name_style_warning(analyzer):
    result = analyzer.analyze_agent_text("---\nname: My Agent\ndescription: d\n---\n")
    assert NAME_STYLE in result.warnings


def test_body_checks_warn_without_blocking(analyzer):
    """Runtime references and legacy patterns only add warnings and suggestions."""
    body = "Run /claude review.\nagent reviewer\nskill pdf\nSee .claude/settings.json\n@Claude ping\n"
    result = analyzer.analyze_agent_text(f"---\nname: x\ndescription: d\n---\n{body}")
    assert result.compatible is True
    assert result.issues == []
    assert "Contains Claude-specific reference: /claude\\s+" in result.warnings
    assert "Contains Claude-specific reference: @claude" in result.warnings
    assert any("'agent <name>'" in w for w in result.warnings)
    assert any("'skill <name>'" in w for w in result.warnings)
    assert any(".claude/" in w for w in result.warnings)
    assert len(result.suggestions) == 3
    assert result.score == 100 - 5 * len(result.warnings)


def test_dotted_claude_path_is_not_flagged(analyzer):
    """Only a standalone .claude/ directory reference matches."""
    warnings, _ = analyzer.check_body("see foo.claude/bar")
    assert warnings == []
    warnings, _ = analyzer.check_body("see .claude/bar")
    assert len(warnings) == 1


def test_mid_line_agent_word_is_not_an_invocation(analyzer):
    warnings, suggestions = analyzer.check_body("The agent reviewer helps.")
    assert warnings == []
    assert suggestions == []


def test_capitalized_invocation_lines_warn(analyzer):
    """The analyzer flags every line the normalizer would rewrite."""
    warnings, suggestions = analyzer.check_body("Agent reviewer\nSKILL pdf\n")
    assert any("'agent <name>'" in w for w in warnings)
    assert any("'skill <name>'" in w for w in warnings)
    assert len(suggestions) == 2


def test_unparseable_metadata_is_a_warning(analyzer):
    """Malformed YAML is reported and the body still gets analyzed."""
    result = analyzer.analyze_agent_text("---\nname: x\ndescription: a: b: c\n---\nagent foo\n", fallback_name="x")
    assert UNPARSED_METADATA in result.warnings
    assert any("'agent <name>'" in w for w in result.warnings)


def test_command_uses_allowed_tools(analyzer, command_text):
    result = analyzer.analyze_command_text(command_text)
    assert result.compatible is True
    assert result.mapped_tools == ["Execute", "Read"]
    # Commands do not need a description
    assert MISSING_DESCRIPTION not in result.warnings
    assert any("'agent <name>'" in w for w in result.warnings)


def test_command_without_metadata(analyzer):
    result = analyzer.analyze_command_text("Just do it.\n")
    assert result.compatible is True
    assert result.score == 100


def test_skill_text_checks(analyzer, skill_text):
    result = analyzer.analyze_skill_text(skill_text)
    assert result.compatible is True
    assert result.mapped_tools == ["Read", "Create"]
    assert result.score == 100

    result = analyzer.analyze_skill_text("---\nallowed-tools: Read\n---\n")
    assert result.issues == [MISSING_NAME]
    assert result.warnings == [MISSING_DESCRIPTION]


def test_skill_without_main_file(analyzer):
    """No SKILL.md means a zero score and no fetch at all."""
    calls = []

    def fetch(src, origin):
        calls.append(src)
        return ""

    skill = SkillArtifact(
        name="broken",
        src_dir="skills/broken",
        files=[SkillFile(relative_path="README.md", src="skills/broken/README.md")],
    )
    result = analyzer.analyze_skill(skill, fetch)
    assert result.compatible is False
    assert result.score == 0
    assert result.issues == [MISSING_SKILL_FILE]
    assert result.mapped_tools == []
    assert calls == []


def test_skill_main_file_any_case(analyzer, skill_text):
    skill = SkillArtifact(
        name="pdf-tools",
        src_dir="skills/pdf-tools",
        files=[SkillFile(relative_path="skill.MDX", src="x", content=skill_text)],
    )
    assert analyzer.analyze_skill(skill).compatible is True


def test_fetch_failure_is_contained(analyzer):
    """A fetch error becomes a zero-score result instead of an exception."""
    def fetch(src, origin):
        raise OSError("HTTP 404 for https://example.invalid/a.md")

    agent = Artifact(name="a", src="https://example.invalid/a.md", origin=Origin.REMOTE)
    result = analyzer.analyze_agent(agent, fetch)
    assert result.compatible is False
    assert result.score == 0
    assert result.issues == ["Failed to fetch content: HTTP 404 for https://example.invalid/a.md"]


def test_fetch_receives_origin(analyzer, agent_text):
    seen = []

    def fetch(src, origin):
        seen.append((src, origin))
        return agent_text

    analyzer.analyze(Artifact(name="a", src="u", origin=Origin.REMOTE, kind=ArtifactKind.COMMAND), fetch)
    assert seen == [("u", Origin.REMOTE)]


def test_analyze_rejects_skill_kind(analyzer):
    with pytest.raises(ValueError):
        analyzer.analyze(Artifact(name="s", src="x", kind=ArtifactKind.SKILL, content=""))


def test_analyze_plugin_summary(analyzer, agent_text, command_text, skill_text):
    """Overall score is the rounded share of compatible items."""
    plugin = PluginArtifacts(
        name="demo",
        agents=[
            Artifact(name="helper", src="a.md", content=agent_text),
            Artifact(name="nb", src="b.md", content="---\nname: nb\ntools: NotebookEdit\n---\n"),
            Artifact(name="gone", src="c.md"),
        ],
        commands=[Artifact(name="review", src="r.md", kind=ArtifactKind.COMMAND, content=command_text)],
        skills=[
            SkillArtifact(
                name="pdf-tools",
                src_dir="skills/pdf-tools",
                files=[SkillFile(relative_path="SKILL.md", src="s", content=skill_text)],
            )
        ],
    )

    def fetch(src, origin):
        raise FileNotFoundError(src)

    analysis = analyzer.analyze_plugin(plugin, fetch)
    summary = analysis.summary
    assert (summary.total_agents, summary.compatible_agents) == (3, 1)
    assert (summary.total_commands, summary.compatible_commands) == (1, 1)
    assert (summary.total_skills, summary.compatible_skills) == (1, 1)
    assert summary.overall_score == 60
    assert [a.name for a in analysis.agents] == ["helper", "nb", "gone"]


def test_empty_plugin_scores_100(analyzer):
    assert analyzer.analyze_plugin(PluginArtifacts(name="empty")).summary.overall_score == 100


def test_overall_score_rounds_half_up(analyzer):
    """1 of 8 compatible is 12.5%, reported as 13."""
    ok = Artifact(name="ok", src="x", content="---\nname: ok\n---\n")
    bad = Artifact(name="bad", src="y", content="---\nname: bad\ntools: Nope\n---\n")
    plugin = PluginArtifacts(name="p", agents=[ok] + [bad] * 7)
    assert analyzer.analyze_plugin(plugin).summary.overall_score == 13
