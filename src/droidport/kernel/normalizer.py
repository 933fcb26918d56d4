"""Rewrite source-runtime body conventions into destination phrasing.

Rewrites, applied in order:
1. AskUserQuestion tool references -> "ask the user"
2. line-leading `agent <name> ...` -> Task tool delegation to <name>
3. line-leading `skill <name> ...` -> Skill tool invocation of <name>

Everything else is left byte-for-byte intact. The rewritten forms never match
the source patterns again, so normalizing twice changes nothing further; the
optional marker comment is only added once.
"""

import re
from typing import AbstractSet, List, Optional

from droidport.contracts import NormalizeResult


MARKER_PREFIX = "<!-- Factory Import Normalizer"

NOTE_ASK_USER = "replaced ask-user tool references"
NOTE_AGENTS = "converted agent invocations"
NOTE_SKILLS = "converted skill invocations"

_ASK_IMPERATIVE = re.compile(r"\b(?:Use|Invoke)\s+`?AskUserQuestion`?(?![\w`])", re.IGNORECASE)
_ASK_QUOTED = re.compile(r"`AskUserQuestion`")
_ASK_BARE = re.compile(r"\bAskUserQuestion\b")

# Line-local: indent, name and rest never cross a newline
_AGENT_LINE = re.compile(r"^([\t ]*)agent[\t ]+([^\s]+)([^\n]*)$", re.MULTILINE | re.IGNORECASE)
_SKILL_LINE = re.compile(r"^([\t ]*)skill[\t ]+([^\s]+)([^\n]*)$", re.MULTILINE | re.IGNORECASE)
_DROID_NAME = re.compile(r"^[a-z0-9_-]+$")
_MARKER = re.compile(r"^<!--\s*Factory Import Normalizer\b", re.MULTILINE)


def _uniq(items: List[str]) -> List[str]:
    return list(dict.fromkeys(items))


def _strip_quotes(name: str) -> str:
    return name.strip().strip("'\"")


def has_marker(text: str) -> bool:
    return _MARKER.search(text) is not None


def marker_line(kind: str, notes: List[str]) -> str:
    details = f": {'; '.join(notes)}" if notes else ""
    return f"{MARKER_PREFIX} ({kind}){details} -->\n\n"


def normalize_text(
    text: str,
    kind: str = "generic",
    add_marker: bool = True,
    available_droids: Optional[AbstractSet[str]] = None,
    available_skills: Optional[AbstractSet[str]] = None,
) -> NormalizeResult:
    """Rewrite legacy patterns in `text`.

    Args:
        text: Body text (or a whole file) to rewrite.
        kind: "command", "droid", "skill" or "generic"; only used in the marker.
        add_marker: Prepend a one-line marker comment when anything changed.
        available_droids: Delegation targets known to exist.
        available_skills: Skills known to exist.

    Returns:
        NormalizeResult with the rewritten text and the referenced /
        unresolved droid and skill names (deduplicated, first-seen order).
    """
    original = text or ""
    notes: List[str] = []
    referenced_droids: List[str] = []
    unresolved_droids: List[str] = []
    referenced_skills: List[str] = []
    unresolved_skills: List[str] = []

    out = original
    if _ASK_BARE.search(out):
        out = _ASK_IMPERATIVE.sub("Ask the user", out)
        out = _ASK_QUOTED.sub("ask the user", out)
        out = _ASK_BARE.sub("ask the user", out)
        notes.append(NOTE_ASK_USER)

    def _agent(m: "re.Match[str]") -> str:
        indent, raw_name, rest = m.group(1), m.group(2), m.group(3)
        name = _strip_quotes(raw_name)
        referenced_droids.append(name)
        line = f"{indent}Use Task tool with subagent_type `{name}`"
        if available_droids is not None and name in available_droids:
            return f"{line}{rest}"
        unresolved_droids.append(name)
        if _DROID_NAME.match(name):
            return f"{line} (if available){rest}"
        return f"{line} (legacy name; may not exist){rest}"

    def _skill(m: "re.Match[str]") -> str:
        indent, raw_name, rest = m.group(1), m.group(2), m.group(3)
        name = _strip_quotes(raw_name)
        referenced_skills.append(name)
        line = f"{indent}Use Skill tool: `{name}`"
        if available_skills is not None and name in available_skills:
            return f"{line}{rest}"
        unresolved_skills.append(name)
        return f"{line} (if available){rest}"

    out, agent_count = _AGENT_LINE.subn(_agent, out)
    if agent_count:
        notes.append(NOTE_AGENTS)
    out, skill_count = _SKILL_LINE.subn(_skill, out)
    if skill_count:
        notes.append(NOTE_SKILLS)

    changed = out != original
    notes = _uniq(notes) if changed else []
    if changed and add_marker and not has_marker(out):
        out = marker_line(kind, notes) + out

    return NormalizeResult(
        text=out,
        changed=changed,
        notes=notes,
        referenced_droids=_uniq(referenced_droids),
        unresolved_droids=_uniq(unresolved_droids),
        referenced_skills=_uniq(referenced_skills),
        unresolved_skills=_uniq(unresolved_skills),
    )
