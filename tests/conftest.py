"""Pytest configuration for tests.

No sys.path hacks - tests should import from installed droidport package.
"""

import pytest


AGENT_TEXT = """---
name: helper
tools: Bash, WebFetch, AskUserQuestion
---
Help the user with shell tasks.
"""

COMMAND_TEXT = """---
description: Review the current diff
argument-hint: "[path]"
allowed-tools: Bash(git diff:*), Read
---
Review the changes.

agent reviewer --strict
"""

SKILL_TEXT = """---
name: pdf-tools
description: Work with PDF files
allowed-tools: Read, Write
---
# PDF tools

Use the bundled scripts.
"""


@pytest.fixture
def agent_text():
    return AGENT_TEXT


@pytest.fixture
def command_text():
    return COMMAND_TEXT


@pytest.fixture
def skill_text():
    return SKILL_TEXT


@pytest.fixture
def plugin_dir(tmp_path):
    """A local plugin with one agent of each compatibility, one command and one skill."""
    root = tmp_path / "demo-plugin"
    (root / ".claude-plugin").mkdir(parents=True)
    (root / ".claude-plugin" / "plugin.json").write_text(
        '{"name": "demo", "description": "Demo plugin"}', encoding="utf-8"
    )
    (root / "agents").mkdir()
    (root / "agents" / "helper.md").write_text(AGENT_TEXT, encoding="utf-8")
    (root / "agents" / "notebook.md").write_text(
        "---\nname: notebook\ndescription: Edits notebooks\ntools: NotebookEdit\n---\nEdit cells.\n",
        encoding="utf-8",
    )
    (root / "commands").mkdir()
    (root / "commands" / "review.md").write_text(COMMAND_TEXT, encoding="utf-8")
    (root / "skills" / "pdf-tools").mkdir(parents=True)
    (root / "skills" / "pdf-tools" / "SKILL.md").write_text(SKILL_TEXT, encoding="utf-8")
    (root / "skills" / "pdf-tools" / "extract.py").write_text("print('x')\n", encoding="utf-8")
    return root
