"""Test allowed-tools pattern parsing and matching."""
import pytest
from agentcmd.commands.models import ToolPattern
from agentcmd.commands.tools import (
    is_tool_allowed,
    parse_allowed_tools,
    parse_tool_pattern,
    split_tool_list,
)
from agentcmd.exceptions import ToolPatternError


def test_parse_bare_tool():
    """Bare names have no specifier."""
    assert parse_tool_pattern(" Read ") == ToolPattern("Read")


def test_parse_tool_with_specifier():
    """Specifier is the text inside the parentheses."""
    assert parse_tool_pattern("Task(subagent_type:*)") == ToolPattern(
        "Task", "subagent_type:*"
    )
    assert parse_tool_pattern("Bash(git add:*)") == ToolPattern("Bash", "git add:*")


def test_parse_nested_parentheses():
    """Nested parentheses stay inside the specifier."""
    pattern = parse_tool_pattern("Bash(echo (hi))")

    assert pattern.specifier == "echo (hi)"


def test_parse_mcp_tool_name():
    """MCP tool names are valid."""
    assert parse_tool_pattern("mcp__github__create_issue").tool == (
        "mcp__github__create_issue"
    )


@pytest.mark.parametrize(
    "text",
    ["", "Bash(git", "(git:*)", "Bash(x) y", "bad name!", "Read)"],
)
def test_parse_invalid_patterns(text):
    """Malformed patterns raise ToolPatternError."""
    with pytest.raises(ToolPatternError):
        parse_tool_pattern(text)


def test_pattern_str():
    """str() renders the pattern as written."""
    assert str(ToolPattern("Read")) == "Read"
    assert str(ToolPattern("Bash", "git:*")) == "Bash(git:*)"


def test_split_tool_list_respects_parentheses():
    """Commas inside parentheses do not split."""
    assert split_tool_list("Bash(git add:*), Task(a, b),, Read") == [
        "Bash(git add:*)",
        "Task(a, b)",
        "Read",
    ]


def test_parse_allowed_tools_string():
    """Comma-separated string gives one pattern per entry."""
    patterns = parse_allowed_tools("Bash(git add:*), Bash(git commit:*), Read")

    assert patterns == [
        ToolPattern("Bash", "git add:*"),
        ToolPattern("Bash", "git commit:*"),
        ToolPattern("Read"),
    ]


def test_parse_allowed_tools_list():
    """YAML lists are accepted."""
    assert parse_allowed_tools(["Read", "Grep", " "]) == [
        ToolPattern("Read"),
        ToolPattern("Grep"),
    ]


def test_parse_allowed_tools_empty():
    """None and blank values mean no tools."""
    assert parse_allowed_tools(None) == []
    assert parse_allowed_tools("") == []


def test_parse_allowed_tools_bad_types():
    """Non-string entries are rejected."""
    with pytest.raises(ToolPatternError):
        parse_allowed_tools(42)
    with pytest.raises(ToolPatternError):
        parse_allowed_tools(["Read", 3])


def test_bare_pattern_matches_any_use():
    """A bare tool allows every use of that tool."""
    pattern = ToolPattern("Read")

    assert pattern.matches("Read") is True
    assert pattern.matches("Read", "/etc/hosts") is True
    assert pattern.matches("Write") is False


def test_prefix_pattern():
    """':*' specifiers match the command and its arguments."""
    pattern = ToolPattern("Bash", "git:*")

    assert pattern.matches("Bash", "git") is True
    assert pattern.matches("Bash", "git status") is True
    assert pattern.matches("Bash", "gitk") is False
    assert pattern.matches("Bash") is False


def test_task_subagent_pattern():
    """Task(subagent_type:*) covers any sub-agent type."""
    pattern = ToolPattern("Task", "subagent_type:*")

    assert pattern.matches("Task", "subagent_type:scrum_master") is True
    assert pattern.matches("Task", "other:thing") is False


def test_glob_and_exact_patterns():
    """Other wildcards glob; plain specifiers match exactly."""
    assert ToolPattern("Bash", "npm *").matches("Bash", "npm install") is True
    assert ToolPattern("Bash", "npm test").matches("Bash", "npm test") is True
    assert ToolPattern("Bash", "npm test").matches("Bash", "npm test -w") is False


def test_is_tool_allowed():
    """Any matching pattern allows; no patterns allow nothing."""
    patterns = parse_allowed_tools("Bash(git:*), Read")

    assert is_tool_allowed(patterns, "Read") is True
    assert is_tool_allowed(patterns, "Bash", "git log") is True
    assert is_tool_allowed(patterns, "Bash", "rm -rf /") is False
    assert is_tool_allowed([], "Read") is False
