"""Discover and parse agent command files."""
import logging
import re
from pathlib import Path
from typing import Any

from agentcmd.config.settings import Config
from agentcmd.exceptions import AgentCmdError, FrontmatterError, ToolPatternError

from .frontmatter import parse_frontmatter
from .models import CommandFile
from .tools import parse_allowed_tools

logger = logging.getLogger(__name__)

PLACEHOLDER_RE = re.compile(r"\$ARGUMENTS|\$[1-9]")

DEFAULT_MAX_DESCRIPTION = 256


def has_placeholders(prompt: str) -> bool:
    """Check if prompt contains $ARGUMENTS or $1..$9."""
    return bool(PLACEHOLDER_RE.search(prompt))


def coerce_text(value: Any) -> str | None:
    """Coerce a scalar front-matter value to text.

    YAML reads an unquoted hint like ``[file]`` as a list, so lists are joined
    back into ``[file]`` form.
    """
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(f"[{item}]" for item in value)
    if isinstance(value, dict):
        raise AgentCmdError(f"Expected text, got mapping: {value!r}")
    return str(value)


def as_name_list(value: Any, key: str = "aliases") -> list[str]:
    """Coerce a comma-separated string or list of names to a list.

    Raises:
        AgentCmdError: Value is neither a string nor a list of scalars.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [v.strip() for v in value.split(",") if v.strip()]
    if not isinstance(value, list):
        raise AgentCmdError(
            f"'{key}' must be a string or list, got {type(value).__name__}"
        )
    if any(isinstance(v, (list, dict)) for v in value):
        raise AgentCmdError(f"'{key}' entries must be plain names")
    return [str(v).strip() for v in value if str(v).strip()]


def parse_command_file(
    path: Path,
    source: str = "personal",
    namespace: str | None = None,
    strict: bool = False,
    max_description_length: int = DEFAULT_MAX_DESCRIPTION,
) -> CommandFile:
    """Parse a .md command file into a CommandFile.

    Args:
        path: Path to the .md file.
        source: Where command came from ("plugin", "personal", "project", "extra").
        namespace: Optional prefix, joined to the stem with ":".
        strict: Raise on malformed front-matter or tool patterns.
        max_description_length: Descriptions are truncated to this length.

    Returns:
        Parsed CommandFile.
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise FrontmatterError(f"File is not valid UTF-8: {e.reason}", path=path) from e

    name = f"{namespace}:{path.stem}" if namespace else path.stem

    frontmatter, prompt = parse_frontmatter(content, strict=strict, path=path)

    # Get description from frontmatter or first line of prompt
    description = coerce_text(frontmatter.get("description")) or ""
    description = " ".join(description.split())
    if not description:
        first_line = next(
            (line.strip() for line in prompt.splitlines() if line.strip()), ""
        )
        description = first_line.lstrip("# ").strip() or name

    if len(description) > max_description_length:
        description = description[: max_description_length - 3] + "..."

    try:
        allowed_tools = parse_allowed_tools(frontmatter.get("allowed-tools"))
    except ToolPatternError as e:
        if strict:
            raise
        logger.warning(f"Dropping allowed-tools in {path}: {e}")
        allowed_tools = []

    model = frontmatter.get("model")
    category = frontmatter.get("category")

    return CommandFile(
        name=name,
        description=description,
        prompt=prompt,
        needs_args=has_placeholders(prompt),
        source=source,
        argument_hint=coerce_text(frontmatter.get("argument-hint")),
        allowed_tools=allowed_tools,
        model=str(model) if model is not None else None,
        aliases=[a.lstrip("/") for a in as_name_list(frontmatter.get("aliases"))],
        category=str(category) if category is not None else None,
        path=path,
        frontmatter=frontmatter,
    )


def _scan_dir(
    directory: Path,
    source: str,
    commands: dict[str, CommandFile],
    max_description_length: int,
) -> None:
    """Parse every .md file under directory, namespacing by subdirectory."""
    if not directory.is_dir():
        return

    for md_file in sorted(directory.rglob("*.md")):
        try:
            # e.g. frontend/component.md -> frontend:component
            parents = md_file.relative_to(directory).parts[:-1]
            namespace = ":".join(parents) if parents else None
            cmd = parse_command_file(
                md_file,
                source=source,
                namespace=namespace,
                max_description_length=max_description_length,
            )
            commands[cmd.name] = cmd
        except (OSError, AgentCmdError) as e:
            logger.warning(f"Failed to parse {md_file}: {e}")


def scan_commands(
    project_path: str | None = None, config: Config | None = None
) -> list[CommandFile]:
    """Scan plugin, personal, project and extra directories for commands.

    Loading order (later overrides earlier):
    1. Plugin commands from ~/.claude/plugins/**/commands/
    2. Personal commands from ~/.claude/commands/
    3. Project commands from {project}/.claude/commands/
    4. Extra directories listed in config

    Args:
        project_path: Optional project directory path.
        config: Optional configuration; defaults are used when omitted.

    Returns:
        List of discovered commands sorted by name.
    """
    commands: dict[str, CommandFile] = {}

    if config is not None:
        plugins_dir = Path(config.commands.plugins_dir)
        personal_dir = Path(config.commands.personal_dir)
        extra_dirs = [Path(d) for d in config.commands.extra_dirs]
        project_path = project_path or config.commands.project_path
        max_len = config.validation.max_description_length
    else:
        plugins_dir = Path.home() / ".claude" / "plugins"
        personal_dir = Path.home() / ".claude" / "commands"
        extra_dirs = []
        max_len = DEFAULT_MAX_DESCRIPTION

    # 1. Scan plugin commands (lowest priority)
    if plugins_dir.is_dir():
        for md_file in sorted(plugins_dir.glob("**/commands/*.md")):
            try:
                # e.g. cache/superpowers/commands/brainstorm.md -> superpowers:brainstorm
                parts = md_file.relative_to(plugins_dir).parts
                cmd_idx = len(parts) - 2
                namespace = parts[cmd_idx - 1] if cmd_idx > 0 else None
                cmd = parse_command_file(
                    md_file,
                    source="plugin",
                    namespace=namespace,
                    max_description_length=max_len,
                )
                commands[cmd.name] = cmd
            except (OSError, AgentCmdError) as e:
                logger.warning(f"Failed to parse {md_file}: {e}")

    # 2. Scan personal commands (override plugins)
    _scan_dir(personal_dir, "personal", commands, max_len)

    # 3. Scan project commands (override personal)
    if project_path:
        project_dir = Path(project_path) / ".claude" / "commands"
        _scan_dir(project_dir, "project", commands, max_len)

    # 4. Extra directories (highest priority)
    for extra_dir in extra_dirs:
        _scan_dir(extra_dir, "extra", commands, max_len)

    logger.info(f"Discovered {len(commands)} commands")
    return sorted(commands.values(), key=lambda c: c.name)
