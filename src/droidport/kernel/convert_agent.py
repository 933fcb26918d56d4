"""Convert a Claude Code agent definition into a Factory droid.

Output metadata, in order:
    name, description (single-line prose), model: inherit, tools (mapped)

Malformed metadata is salvaged (name/description/tools line scan) rather
than rejected: agent files are frequently hand-written with descriptions
YAML cannot parse.
"""

import re
from typing import AbstractSet, Any, List, Optional

from droidport.contracts import ConversionResult
from .catalog import DEFAULT_CATALOG, ToolCatalog
from .frontmatter import split_frontmatter
from .normalizer import normalize_text
from .tools import ToolResolver
from .yaml_emit import emit_list, emit_scalar, is_plain_safe


def unique_tokens(value: Any) -> Optional[List[str]]:
    """Tools value -> deduplicated token list, or None when empty."""
    if not value and value != 0:
        return None
    if isinstance(value, (list, tuple)):
        parts = [str(v) for v in value]
    else:
        parts = [p.strip() for p in str(value).split(",") if p.strip()]
    deduped = list(dict.fromkeys(parts))
    return deduped or None


def sanitize_description(value: Any) -> Optional[str]:
    """Collapse a free-form description into single-line prose.

    Literal escape sequences, HTML line breaks/paragraph tags and newlines
    become spaces; `Label: text` role markers become `Label - text` so the
    value never looks like nested metadata.
    """
    if not isinstance(value, str):
        return None
    s = re.sub(r"\\[nrt]", " ", value, flags=re.IGNORECASE)
    s = re.sub(r"<br\s*/?>", " ", s, flags=re.IGNORECASE)
    s = re.sub(r"</?:?p\b[^>]*>", " ", s, flags=re.IGNORECASE)
    s = re.sub(r"\s*\n\s*", " ", s)
    s = re.sub(r"\s+", " ", s).strip()
    s = re.sub(r"([A-Za-z0-9])\s*:\s+(?!/)", r"\1 - ", s)
    return s or None


def _emit_description(description: str) -> str:
    candidate = description.replace("#", "\uff03") if "#" in description else description
    if is_plain_safe(candidate):
        return f"description: {candidate}"
    return emit_scalar("description", description)


def convert_agent(
    text: str,
    fallback_name: Optional[str] = None,
    catalog: ToolCatalog = DEFAULT_CATALOG,
    normalize: bool = False,
    available_droids: Optional[AbstractSet[str]] = None,
    available_skills: Optional[AbstractSet[str]] = None,
) -> ConversionResult:
    """Rewrite an agent file into droid form."""
    block = split_frontmatter(text or "")
    data = block.data

    name = str(data.get("name") or fallback_name or "")
    description = sanitize_description(data.get("description"))
    tokens = unique_tokens(data.get("tools"))
    tools = ToolResolver(catalog).map_tools(tokens) if tokens else []

    lines = ["---", emit_scalar("name", name)]
    if description:
        lines.append(_emit_description(description))
    lines.append("model: inherit")
    if tools:
        lines.extend(emit_list("tools", tools))
    lines.append("---")

    body = (block.body or "").lstrip("\r\n")
    normalized = None
    if normalize:
        normalized = normalize_text(
            body,
            kind="droid",
            add_marker=False,
            available_droids=available_droids,
            available_skills=available_skills,
        )
        body = normalized.text

    return ConversionResult(
        text="\n".join(lines) + "\n\n" + body,
        normalized=normalized,
        fallback=block.salvaged,
    )
