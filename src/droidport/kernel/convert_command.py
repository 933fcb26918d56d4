"""Convert a Claude Code slash command into a Factory command."""

from typing import AbstractSet, Any, Dict, List, Optional

from droidport.contracts import ConversionResult
from .catalog import DEFAULT_CATALOG, ToolCatalog
from .frontmatter import FrontmatterError, parse_frontmatter, parse_tool_list
from .normalizer import normalize_text
from .tools import ToolResolver
from .yaml_emit import emit_list, emit_scalar, sanitize_value


# Emission order
COMMAND_KEYS = ("description", "argument-hint", "allowed-tools")


def convert_command(
    text: str,
    catalog: ToolCatalog = DEFAULT_CATALOG,
    normalize: bool = True,
    available_droids: Optional[AbstractSet[str]] = None,
    available_skills: Optional[AbstractSet[str]] = None,
) -> ConversionResult:
    """Rewrite a command file.

    Unparseable metadata returns the input unchanged (fallback=True):
    conversion never emits corrupted output.
    """
    try:
        block = parse_frontmatter(text or "")
    except FrontmatterError:
        return ConversionResult(text=text, fallback=True)

    filtered: Dict[str, Any] = {k: v for k, v in block.data.items() if k in COMMAND_KEYS}

    body = (block.body or "").lstrip("\r\n") if block.has_block else (block.body or "")
    normalized = None
    if normalize:
        normalized = normalize_text(
            body,
            kind="command",
            add_marker=False,
            available_droids=available_droids,
            available_skills=available_skills,
        )
        body = normalized.text

    if not filtered:
        # Nothing to keep: the body alone is the command
        return ConversionResult(text=body if body.strip() else text, normalized=normalized)

    lines: List[str] = ["---"]
    for key in ("description", "argument-hint"):
        value = sanitize_value(filtered.get(key))
        if value:
            lines.append(emit_scalar(key, value))

    if filtered.get("allowed-tools"):
        tools = ToolResolver(catalog).map_tools(parse_tool_list(filtered["allowed-tools"]))
        if tools:
            lines.extend(emit_list("allowed-tools", tools))

    lines.append("---")
    return ConversionResult(text="\n".join(lines) + "\n\n" + body, normalized=normalized)
