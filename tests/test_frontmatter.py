"""Tests for metadata splitting: strict parse, salvage scan, tool lists."""

import pytest

from droidport.kernel.frontmatter import (
    FrontmatterError,
    parse_frontmatter,
    parse_tool_list,
    salvage_frontmatter,
    split_frontmatter,
)


def test_parse_splits_mapping_and_body():
    """A well-formed block yields its mapping and the text after the closing line."""
    block = parse_frontmatter("---\nname: a\ndescription: b\n---\nbody line\n")
    assert block.has_block is True
    assert block.salvaged is False
    assert block.data == {"name": "a", "description": "b"}
    assert block.body == "body line\n"


def test_parse_without_block_returns_whole_text_as_body():
    """Text that does not open with a delimiter has no metadata."""
    block = parse_frontmatter("just a body\n---\n")
    assert block.has_block is False
    assert block.data == {}
    assert block.body == "just a body\n---\n"


def test_parse_tolerates_crlf_and_bom():
    """Windows line endings and a leading BOM do not hide the block."""
    block = parse_frontmatter("\ufeff---\r\nname: a\r\n---\r\nbody\r\n")
    assert block.data == {"name": "a"}
    assert block.body == "body\r\n"


def test_parse_empty_block_is_empty_mapping():
    """An empty block is valid and yields no keys."""
    block = parse_frontmatter("---\n---\nbody")
    assert block.has_block is True
    assert block.data == {}
    assert block.body == "body"


def test_parse_unclosed_block_raises():
    """An opening delimiter without a closing one is malformed."""
    with pytest.raises(FrontmatterError, match="not closed"):
        parse_frontmatter("---\nname: a\nbody")


def test_parse_invalid_yaml_raises():
    """YAML errors surface as FrontmatterError (a ValueError)."""
    with pytest.raises(FrontmatterError):
        parse_frontmatter("---\ndescription: Use when: asked: twice\n---\n")
    assert issubclass(FrontmatterError, ValueError)


def test_parse_non_mapping_raises():
    """A block holding a list is not metadata."""
    with pytest.raises(FrontmatterError, match="mapping"):
        parse_frontmatter("---\n- a\n- b\n---\n")


def test_salvage_recovers_known_keys():
    """Line scan keeps name/description/tools and ignores the rest."""
    text = (
        "---\n"
        "name: reviewer\n"
        "description: Use when: the user asks: review\n"
        "color: blue\n"
        "tools: Read, Grep\n"
        "---\n"
        "Body\n"
    )
    block = salvage_frontmatter(text)
    assert block.salvaged is True
    assert block.data == {
        "name": "reviewer",
        "description": "Use when: the user asks: review",
        "tools": "Read, Grep",
    }
    assert block.body == "Body\n"


def test_salvage_first_value_wins():
    """Repeated keys keep the first non-empty value."""
    block = salvage_frontmatter("---\nname: first\nname: second\n---\n")
    assert block.data["name"] == "first"


def test_salvage_appends_examples_to_description():
    """<example> snippets in the block are collapsed onto the description."""
    text = (
        "---\n"
        "name: helper\n"
        "description: Helps out\n"
        "<example>\n"
        "user: hi\n"
        "</example>\n"
        "---\n"
    )
    block = salvage_frontmatter(text)
    assert block.data["description"] == "Helps out <example> user: hi </example>"


def test_salvage_unclosed_block_is_all_body():
    """Without a closing delimiter nothing is recovered."""
    block = salvage_frontmatter("---\nname: x\n")
    assert block.data == {}
    assert block.has_block is False
    assert block.body == "---\nname: x\n"


def test_split_falls_back_to_salvage():
    """split_frontmatter never raises on malformed YAML."""
    block = split_frontmatter("---\nname: a\ndescription: x: y: z\n---\nbody")
    assert block.salvaged is True
    assert block.data["name"] == "a"


def test_split_prefers_strict_parse():
    block = split_frontmatter("---\nname: a\n---\n")
    assert block.salvaged is False


def test_parse_tool_list_forms():
    """Lists and comma-separated strings both normalize to token lists."""
    assert parse_tool_list(["Read", "Grep"]) == ["Read", "Grep"]
    assert parse_tool_list("Read, Grep ,") == ["Read", "Grep"]
    assert parse_tool_list(None) == []
    assert parse_tool_list("") == []
    assert parse_tool_list(42) == []
