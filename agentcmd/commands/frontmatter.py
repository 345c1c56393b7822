"""Split and parse YAML front-matter blocks."""
import logging
import re
from typing import Any

import yaml

from agentcmd.exceptions import FrontmatterError

logger = logging.getLogger(__name__)

# Delimiter lines are "---" plus optional trailing spaces or tabs
OPEN_RE = re.compile(r"\A---[ \t]*(?:\r?\n|\Z)")
CLOSE_RE = re.compile(r"^---[ \t]*(?:\r?\n|\Z)", re.MULTILINE)


def split_frontmatter(text: str) -> tuple[str | None, str]:
    """Separate the front-matter block from the body.

    Args:
        text: Full file contents.

    Returns:
        Tuple of (raw front-matter or None, stripped body).

    Raises:
        FrontmatterError: Opening delimiter without a closing one.
    """
    if text.startswith("\ufeff"):
        text = text[1:]

    opening = OPEN_RE.match(text)
    if not opening:
        return None, text.strip()

    closing = CLOSE_RE.search(text, opening.end())
    if closing:
        raw = text[opening.end():closing.start()].rstrip("\r\n")
        return raw, text[closing.end():].strip()

    raise FrontmatterError("Front-matter block is not terminated", line=1)


def load_frontmatter(raw: str) -> dict[str, Any]:
    """Load a raw front-matter block into a mapping.

    Line numbers in errors are relative to the file, counting the opening
    delimiter as line 1.
    """
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        line = None
        mark = getattr(e, "problem_mark", None)
        if mark is not None:
            line = mark.line + 2
        problem = getattr(e, "problem", None) or str(e)
        raise FrontmatterError(f"Invalid YAML in front-matter: {problem}", line=line) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise FrontmatterError(
            f"Front-matter must be a mapping, got {type(data).__name__}", line=2
        )
    return data


def parse_frontmatter(
    text: str, strict: bool = False, path=None
) -> tuple[dict[str, Any], str]:
    """Parse front-matter and body from command file text.

    Args:
        text: Full file contents.
        strict: Raise on malformed front-matter instead of ignoring it.
        path: Optional file path, used in error messages.

    Returns:
        Tuple of (front-matter mapping, body).
    """
    try:
        raw, body = split_frontmatter(text)
    except FrontmatterError as e:
        if strict:
            e.path = path
            raise
        logger.warning(f"Ignoring unterminated front-matter in {path or '<text>'}")
        return {}, text.lstrip("\ufeff").strip()

    if raw is None:
        return {}, body

    try:
        return load_frontmatter(raw), body
    except FrontmatterError as e:
        if strict:
            e.path = path
            raise
        logger.warning(f"Ignoring malformed front-matter in {path or '<text>'}: {e}")
        return {}, body
