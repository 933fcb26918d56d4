"""Emit metadata lines in the destination dialect.

Values are written plain when that is unambiguous and double-quoted
otherwise. A plain candidate must also read back through PyYAML as the
identical string, so `true`, `42` or `key: value` never change type or
shape on the next split.
"""

import re
from typing import Any, Iterable, List, Optional

import yaml


_RESERVED_LEADING = re.compile(r"^[-?:,\[\]{}#&*!|>'\"%@`]")


def is_plain_safe(value: str) -> bool:
    """True when `value` can be emitted as an unquoted scalar."""
    if not value:
        return True
    if "\r" in value or "\n" in value:
        return False
    if value[0].isspace() or value[-1].isspace():
        return False
    if _RESERVED_LEADING.match(value):
        return False
    if "#" in value:
        return False
    try:
        loaded = yaml.safe_load(f"k: {value}")
    except yaml.YAMLError:
        return False
    return isinstance(loaded, dict) and loaded.get("k") == value


_ESCAPES = {
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\x85": "\\N",
    "\u2028": "\\L",
    "\u2029": "\\P",
}

# Characters a YAML reader rejects or folds when they appear raw
_UNPRINTABLE = re.compile("[\x00-\x1f\x7f-\x9f\u2028\u2029\ufffe\uffff]")


def _escape_char(match) -> str:
    char = match.group(0)
    if char in _ESCAPES:
        return _ESCAPES[char]
    code = ord(char)
    return f"\\x{code:02x}" if code <= 0xFF else f"\\u{code:04x}"


def quote(value: str) -> str:
    """Double-quote with backslash, quote and control-character escaping."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{_UNPRINTABLE.sub(_escape_char, escaped)}"'


def emit_scalar(key: str, value: str) -> str:
    if value == "":
        return f'{key}: ""'
    if is_plain_safe(value):
        return f"{key}: {value}"
    return f"{key}: {quote(value)}"


def emit_list(key: str, items: Iterable[str]) -> List[str]:
    """Block sequence; each item goes through the scalar rules."""
    lines = [f"{key}:"]
    for item in items:
        lines.append(f"  - {item if is_plain_safe(item) and item else quote(item)}")
    return lines


def emit_block(key: str, value: str) -> List[str]:
    """Literal block scalar, chomping chosen so `value` round-trips."""
    if value.endswith("\n\n"):
        indicator = "|+"
    elif value.endswith("\n"):
        indicator = "|"
    else:
        indicator = "|-"
    content = value[:-1] if value.endswith("\n") else value
    first = next((line for line in content.split("\n") if line), "")
    if first[:1] == " ":
        indicator = indicator[0] + "2" + indicator[1:]

    lines = [f"{key}: {indicator}"]
    for line in content.split("\n"):
        lines.append(f"  {line}" if line else "")
    return lines


def sanitize_value(value: Any) -> Optional[str]:
    """Single-line form of a string value; None for non-strings and blanks."""
    if not isinstance(value, str):
        return None
    s = re.sub(r"\\[nrt]", " ", value, flags=re.IGNORECASE)
    s = re.sub(r"\s*\n\s*", " ", s)
    s = re.sub(r"\s+", " ", s).strip()
    return s or None
