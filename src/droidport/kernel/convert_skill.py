"""Convert a SKILL.md main file. Supporting files are copied unchanged."""

from typing import AbstractSet, List, Optional

from droidport.contracts import ConversionResult
from .catalog import DEFAULT_CATALOG, ToolCatalog
from .frontmatter import FrontmatterError, parse_frontmatter, parse_tool_list
from .normalizer import normalize_text
from .tools import ToolResolver
from .yaml_emit import emit_block, emit_list, emit_scalar, sanitize_value


SKILL_KEYS = ("name", "description", "allowed-tools")
BLOCK_DESCRIPTION_LENGTH = 100


def convert_skill(
    text: str,
    fallback_name: Optional[str] = None,
    catalog: ToolCatalog = DEFAULT_CATALOG,
    normalize: bool = False,
    available_droids: Optional[AbstractSet[str]] = None,
    available_skills: Optional[AbstractSet[str]] = None,
) -> ConversionResult:
    """Rewrite SKILL.md metadata; the body is kept (optionally normalized).

    Unparseable metadata returns the input unchanged (fallback=True).
    """
    try:
        block = parse_frontmatter(text or "")
    except FrontmatterError:
        return ConversionResult(text=text, fallback=True)

    data = {k: v for k, v in block.data.items() if k in SKILL_KEYS}
    lines: List[str] = ["---"]

    name = sanitize_value(data.get("name")) or fallback_name
    if name:
        lines.append(emit_scalar("name", name))

    if data.get("description"):
        description = data["description"]
        if not isinstance(description, str):
            description = str(description)
        # Long or multi-line descriptions keep their shape as a literal block
        if "\n" in description or len(description) > BLOCK_DESCRIPTION_LENGTH:
            lines.extend(emit_block("description", description))
        else:
            value = sanitize_value(description)
            if value:
                lines.append(emit_scalar("description", value))

    if data.get("allowed-tools"):
        tools = ToolResolver(catalog).map_tools(parse_tool_list(data["allowed-tools"]))
        if tools:
            lines.extend(emit_list("allowed-tools", tools))

    lines.append("---")

    body = (block.body or "").lstrip("\r\n") if block.has_block else (block.body or "")
    normalized = None
    if normalize:
        normalized = normalize_text(
            body,
            kind="skill",
            add_marker=False,
            available_droids=available_droids,
            available_skills=available_skills,
        )
        body = normalized.text

    return ConversionResult(text="\n".join(lines) + "\n\n" + body, normalized=normalized)
