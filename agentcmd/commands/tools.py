"""Parse and match allowed-tools patterns."""
import re
from typing import Any, Iterable

from agentcmd.exceptions import ToolPatternError

from .models import ToolPattern

TOOL_NAME_RE = re.compile(r"^[A-Za-z_][\w.\-]*$")


def parse_tool_pattern(text: str) -> ToolPattern:
    """Parse ``Name`` or ``Name(specifier)`` into a ToolPattern.

    Raises:
        ToolPatternError: Empty name, bad name or unbalanced parentheses.
    """
    text = text.strip()
    if not text:
        raise ToolPatternError("Empty tool pattern")

    open_idx = text.find("(")
    if open_idx == -1:
        if ")" in text:
            raise ToolPatternError(f"Unbalanced parentheses in {text!r}")
        name, specifier = text, None
    else:
        name = text[:open_idx].strip()
        depth = 0
        close_idx = -1
        for i in range(open_idx, len(text)):
            if text[i] == "(":
                depth += 1
            elif text[i] == ")":
                depth -= 1
                if depth == 0:
                    close_idx = i
                    break
        if close_idx == -1:
            raise ToolPatternError(f"Unbalanced parentheses in {text!r}")
        if text[close_idx + 1:].strip():
            raise ToolPatternError(f"Unexpected text after ')' in {text!r}")
        specifier = text[open_idx + 1:close_idx].strip()

    if not name:
        raise ToolPatternError(f"Missing tool name in {text!r}")
    if not TOOL_NAME_RE.match(name):
        raise ToolPatternError(f"Invalid tool name {name!r}")

    return ToolPattern(tool=name, specifier=specifier)


def split_tool_list(value: str) -> list[str]:
    """Split a comma-separated tool list, ignoring commas inside parentheses."""
    items = []
    current = []
    depth = 0

    for char in value:
        if char == "(":
            depth += 1
        elif char == ")":
            depth = max(depth - 1, 0)
        if char == "," and depth == 0:
            items.append("".join(current))
            current = []
            continue
        current.append(char)
    items.append("".join(current))

    return [item.strip() for item in items if item.strip()]


def parse_allowed_tools(value: Any) -> list[ToolPattern]:
    """Parse an allowed-tools front-matter value.

    Accepts a comma-separated string or a YAML list of strings.
    """
    if value is None:
        return []
    if isinstance(value, str):
        entries = split_tool_list(value)
    elif isinstance(value, list):
        entries = []
        for item in value:
            if not isinstance(item, str):
                raise ToolPatternError(f"Tool entry must be a string, got {item!r}")
            if item.strip():
                entries.append(item)
    else:
        raise ToolPatternError(
            f"allowed-tools must be a string or list, got {type(value).__name__}"
        )

    return [parse_tool_pattern(entry) for entry in entries]


def is_tool_allowed(
    patterns: Iterable[ToolPattern], tool: str, argument: str | None = None
) -> bool:
    """Check if any pattern permits the tool invocation."""
    return any(pattern.matches(tool, argument) for pattern in patterns)
