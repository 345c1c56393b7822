"""Test front-matter splitting and parsing."""
import pytest
from agentcmd.commands.frontmatter import parse_frontmatter, split_frontmatter
from agentcmd.exceptions import FrontmatterError


def test_split_without_frontmatter():
    """Text without a leading delimiter is all body."""
    raw, body = split_frontmatter("\nJust a prompt.\n")

    assert raw is None
    assert body == "Just a prompt."


def test_split_with_frontmatter():
    """Front-matter and body are separated."""
    raw, body = split_frontmatter("---\ndescription: Fix\n---\n\nFix $ARGUMENTS\n")

    assert raw == "description: Fix"
    assert body == "Fix $ARGUMENTS"


def test_split_keeps_later_rules_in_body():
    """Only the first closing delimiter ends the block."""
    raw, body = split_frontmatter("---\ndescription: x\n---\nA\n---\nB\n")

    assert raw == "description: x"
    assert body == "A\n---\nB"


def test_split_crlf_and_bom():
    """CRLF line endings and a BOM are accepted."""
    raw, body = split_frontmatter("\ufeff---\r\ndescription: x\r\n---  \r\nBody\r\n")

    assert raw == "description: x"
    assert body == "Body"


def test_split_delimiter_must_be_first_line():
    """A delimiter after other text does not open a block."""
    raw, body = split_frontmatter("Intro\n---\ndescription: x\n---\n")

    assert raw is None
    assert body.startswith("Intro")


def test_split_unterminated_raises():
    """Opening delimiter without closing one is an error."""
    with pytest.raises(FrontmatterError) as exc_info:
        split_frontmatter("---\ndescription: x\nbody")

    assert exc_info.value.line == 1


def test_parse_frontmatter_keys_kept_hyphenated():
    """Keys are returned as written."""
    data, body = parse_frontmatter(
        "---\nallowed-tools: Read\ndescription: Read things\n"
        "argument-hint: \"<path>\"\n---\nRead $ARGUMENTS"
    )

    assert data == {
        "allowed-tools": "Read",
        "description": "Read things",
        "argument-hint": "<path>",
    }
    assert body == "Read $ARGUMENTS"


def test_parse_frontmatter_empty_block():
    """An empty block gives an empty mapping."""
    data, body = parse_frontmatter("---\n---\nBody")

    assert data == {}
    assert body == "Body"


def test_parse_frontmatter_malformed_lenient():
    """Malformed YAML is ignored in lenient mode."""
    data, body = parse_frontmatter("---\ndescription: [oops\n---\nBody")

    assert data == {}
    assert body == "Body"


def test_parse_frontmatter_malformed_strict(tmp_path):
    """Malformed YAML raises in strict mode, with path and line."""
    path = tmp_path / "bad.md"
    text = "---\ndescription: ok\nbad: key: here\n---\nBody"

    with pytest.raises(FrontmatterError) as exc_info:
        parse_frontmatter(text, strict=True, path=path)

    assert exc_info.value.path == path
    assert exc_info.value.line is not None
    assert exc_info.value.line >= 2
    assert str(exc_info.value).startswith(str(path))


def test_parse_frontmatter_non_mapping_strict():
    """A YAML list is not valid front-matter."""
    with pytest.raises(FrontmatterError):
        parse_frontmatter("---\n- a\n- b\n---\nBody", strict=True)


def test_parse_frontmatter_unterminated_lenient():
    """Unterminated block is treated as plain text in lenient mode."""
    data, body = parse_frontmatter("---\ndescription: x\nBody")

    assert data == {}
    assert body == "---\ndescription: x\nBody"


def test_split_keeps_unicode_line_separators_in_body():
    """Only newlines delimit lines; form feeds and separators stay in the body."""
    raw, body = split_frontmatter("---\ndescription: x\n---\nA\x0cB\u2028C\x1cD")

    assert raw == "description: x"
    assert body == "A\x0cB\u2028C\x1cD"


def test_split_ignores_separator_before_delimiter():
    """A delimiter after a Unicode line separator does not close the block."""
    raw, body = split_frontmatter("---\ndescription: x\u2028---\nkey: y\n---\nBody")

    assert raw == "description: x\u2028---\nkey: y"
    assert body == "Body"
