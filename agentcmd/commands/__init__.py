"""Agent command files: parsing, discovery, validation and rendering."""
from .models import CommandFile, Invocation, RenderedCommand, ToolPattern
from .frontmatter import parse_frontmatter, split_frontmatter
from .tools import is_tool_allowed, parse_allowed_tools, parse_tool_pattern
from .discovery import parse_command_file, scan_commands
from .validation import load_valid_command, validate_command, validate_directory
from .registry import CommandRegistry

__all__ = [
    "CommandFile",
    "Invocation",
    "RenderedCommand",
    "ToolPattern",
    "parse_frontmatter",
    "split_frontmatter",
    "is_tool_allowed",
    "parse_allowed_tools",
    "parse_tool_pattern",
    "parse_command_file",
    "scan_commands",
    "load_valid_command",
    "validate_command",
    "validate_directory",
    "CommandRegistry",
]
