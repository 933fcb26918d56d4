"""Split an artifact into its leading YAML metadata block and free-text body.

Two paths, deliberately kept apart:
- parse_frontmatter: strict structured parse (PyYAML safe_load)
- salvage_frontmatter: line-oriented `key: value` recovery for informally
  authored blocks that YAML rejects

split_frontmatter chains them and never raises.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

import yaml


DELIMITER = "---"
SALVAGE_KEYS = ("name", "description", "tools")

_SALVAGE_LINE = re.compile(r"^([A-Za-z0-9_\-]+):\s*(.*)$")
_EXAMPLE_BLOCK = re.compile(r"<example>[\s\S]*?</example>", re.IGNORECASE)


class FrontmatterError(ValueError):
    """Metadata block present but not parseable as a YAML mapping."""


@dataclass
class MetadataBlock:
    """Metadata mapping plus remaining body text."""
    data: Dict[str, Any] = field(default_factory=dict)
    body: str = ""
    has_block: bool = False  # A delimited block was found at the head
    salvaged: bool = False  # Data came from the line-scan fallback


def _is_delimiter(line: str) -> bool:
    return line.rstrip("\r") == DELIMITER


def _locate_block(text: str) -> Tuple[Optional[List[str]], Optional[int]]:
    """Return (lines, closing_index) for a text that opens with a delimiter.

    lines is None when the text has no opening delimiter; closing_index is
    None when the opening delimiter is never closed.
    """
    lines = text.split("\n")
    if not lines or not _is_delimiter(lines[0]):
        return None, None
    for i in range(1, len(lines)):
        if _is_delimiter(lines[i]):
            return lines, i
    return lines, None


def _strip_bom(text: str) -> str:
    return text[1:] if text.startswith("\ufeff") else text


def parse_frontmatter(text: str) -> MetadataBlock:
    """Strictly parse the leading metadata block.

    Raises:
        FrontmatterError: block opened but never closed, YAML error, or the
            block is not a mapping.
    """
    text = _strip_bom(text or "")
    lines, close = _locate_block(text)
    if lines is None:
        return MetadataBlock(data={}, body=text, has_block=False)
    if close is None:
        raise FrontmatterError("Metadata block is not closed")

    raw = "\n".join(line.rstrip("\r") for line in lines[1:close]) + "\n"
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise FrontmatterError(f"Invalid YAML metadata: {e}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontmatterError(f"Metadata must be a mapping, got {type(data).__name__}")

    body = "\n".join(lines[close + 1:])
    return MetadataBlock(data={str(k): v for k, v in data.items()}, body=body, has_block=True)


def salvage_frontmatter(text: str, keys: Iterable[str] = SALVAGE_KEYS) -> MetadataBlock:
    """Recover what we can from a malformed metadata block.

    Only `key: value` lines for the requested keys are kept (first value
    wins). `<example>` snippets anywhere in the block are appended to the
    description on a single line. Without a closing delimiter the whole
    text is treated as body.
    """
    text = _strip_bom(text or "")
    lines, close = _locate_block(text)
    if lines is None or close is None:
        return MetadataBlock(data={}, body=text, has_block=False, salvaged=True)

    wanted = set(keys)
    data: Dict[str, Any] = {}
    block_lines = [line.rstrip("\r") for line in lines[1:close]]
    for line in block_lines:
        m = _SALVAGE_LINE.match(line.strip())
        if not m:
            continue
        key = m.group(1).lower()
        if key in wanted and not data.get(key):
            data[key] = m.group(2)

    examples = _EXAMPLE_BLOCK.findall("\n".join(block_lines))
    if examples:
        inline = re.sub(r"\s+", " ", " ".join(examples)).strip()
        if data.get("description"):
            data["description"] = f"{data['description']} {inline}"
        else:
            data["description"] = inline

    body = "\n".join(lines[close + 1:])
    return MetadataBlock(data=data, body=body, has_block=True, salvaged=True)


def split_frontmatter(text: str, salvage_keys: Iterable[str] = SALVAGE_KEYS) -> MetadataBlock:
    """Parse metadata, falling back to the salvage scan. Never raises."""
    try:
        return parse_frontmatter(text)
    except FrontmatterError:
        return salvage_frontmatter(text, salvage_keys)


def parse_tool_list(value: Any) -> List[str]:
    """Normalize a tools field: YAML list or comma-separated string."""
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    if isinstance(value, str):
        return [t.strip() for t in value.split(",") if t.strip()]
    return []
