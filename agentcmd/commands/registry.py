"""Command registry for storing, resolving and rendering commands."""
import difflib
import logging
import re
import shlex

from agentcmd.config.settings import Config
from agentcmd.exceptions import AgentCmdError, CommandNotFoundError

from .discovery import has_placeholders, scan_commands
from .models import CommandFile, Invocation, RenderedCommand

logger = logging.getLogger(__name__)

SUBSTITUTION_RE = re.compile(r"\$(ARGUMENTS|[1-9])")
INVOCATION_RE = re.compile(r"/(\S+)\s*(.*)\Z", re.DOTALL)


def split_words(text: str) -> list[str]:
    """Split arguments shell-style, falling back to whitespace on bad quoting."""
    try:
        return shlex.split(text)
    except ValueError:
        return text.split()


def parse_options(words: list[str]) -> dict[str, str | bool]:
    """Collect ``--flag value`` and bare ``--flag`` options."""
    options: dict[str, str | bool] = {}
    i = 0
    while i < len(words):
        word = words[i]
        if word.startswith("--") and len(word) > 2:
            key = word[2:]
            if i + 1 < len(words) and not words[i + 1].startswith("--"):
                options[key] = words[i + 1]
                i += 1
            else:
                options[key] = True
        i += 1
    return options


class CommandRegistry:
    """Stores and resolves agent commands."""

    # Commands owned by the agent runtime itself (cannot be overridden)
    BUILTIN_COMMANDS = [
        ("help", "Show help"),
        ("clear", "Clear conversation history"),
        ("compact", "Compact conversation"),
        ("config", "Open settings"),
        ("cost", "Show usage costs"),
        ("init", "Initialize project instructions"),
        ("login", "Sign in"),
        ("logout", "Sign out"),
        ("mcp", "Manage MCP servers"),
        ("memory", "Edit memory files"),
        ("model", "Select model"),
        ("permissions", "View or update permissions"),
        ("review", "Request code review"),
        ("status", "Show status"),
    ]

    def __init__(self, reserved: list[str] | None = None):
        self._commands: dict[str, CommandFile] = {}
        self._aliases: dict[str, str] = {}
        self._reserved = set(reserved or [])

    @property
    def builtin_names(self) -> set[str]:
        """Get set of built-in and reserved command names."""
        return {name for name, _ in self.BUILTIN_COMMANDS} | self._reserved

    @property
    def commands(self) -> list[CommandFile]:
        """Get all registered commands sorted by name."""
        return sorted(self._commands.values(), key=lambda c: c.name)

    @property
    def aliases(self) -> dict[str, str]:
        """Alias -> command name mapping."""
        return dict(self._aliases)

    def add(self, cmd: CommandFile) -> bool:
        """Register a command and its aliases.

        Returns:
            False if the name conflicts with a built-in and was skipped.
        """
        if cmd.name in self.builtin_names:
            logger.warning(f"Skipping command '{cmd.name}' - conflicts with built-in")
            return False

        self._commands[cmd.name] = cmd
        # A real command name always beats an alias
        self._aliases.pop(cmd.name, None)

        for alias in cmd.aliases:
            if alias in self._commands or alias in self.builtin_names:
                logger.warning(
                    f"Ignoring alias '{alias}' of '{cmd.name}' - name already taken"
                )
            elif alias in self._aliases and self._aliases[alias] != cmd.name:
                logger.warning(
                    f"Ignoring alias '{alias}' of '{cmd.name}' - "
                    f"already an alias of '{self._aliases[alias]}'"
                )
            else:
                self._aliases[alias] = cmd.name
        return True

    def refresh(self, project_path: str | None = None, config: Config | None = None) -> int:
        """Rescan command directories.

        Args:
            project_path: Optional project directory.
            config: Optional configuration with directories and reserved names.

        Returns:
            Number of commands loaded.
        """
        if config is not None:
            self._reserved |= set(config.commands.reserved_names)

        discovered = scan_commands(project_path, config=config)

        self._commands.clear()
        self._aliases.clear()
        for cmd in discovered:
            self.add(cmd)

        logger.info(
            f"Loaded {len(self._commands)} commands, {len(self._aliases)} aliases"
        )
        return len(self._commands)

    def get(self, name: str) -> CommandFile | None:
        """Get command by name or alias; a leading '/' is accepted."""
        name = name.lstrip("/")
        if name in self._commands:
            return self._commands[name]
        target = self._aliases.get(name)
        if target is not None:
            return self._commands.get(target)
        return None

    def require(self, name: str) -> CommandFile:
        """Get command by name or alias, raising if unknown."""
        cmd = self.get(name)
        if cmd is None:
            name = name.lstrip("/")
            raise CommandNotFoundError(name, self.suggest(name))
        return cmd

    def suggest(self, name: str, limit: int = 3) -> list[str]:
        """Suggest known names similar to an unknown one."""
        name = name.lstrip("/")
        if not name:
            return []

        candidates = sorted(set(self._commands) | set(self._aliases))
        suggestions = [c for c in candidates if name in c or c in name]
        suggestions += difflib.get_close_matches(name, candidates, n=limit, cutoff=0.6)

        # Remove duplicates, keep order
        return list(dict.fromkeys(suggestions))[:limit]

    def by_category(self) -> dict[str, list[CommandFile]]:
        """Group commands by category, then namespace, then 'general'."""
        groups: dict[str, list[CommandFile]] = {}
        for cmd in self.commands:
            key = cmd.category or cmd.namespace or "general"
            groups.setdefault(key, []).append(cmd)
        return dict(sorted(groups.items()))

    def parse_invocation(self, line: str) -> Invocation:
        """Parse ``/name arguments`` into an Invocation.

        Raises:
            AgentCmdError: The line is not a slash command.
        """
        match = INVOCATION_RE.match(line.lstrip())
        if not match:
            raise AgentCmdError(f"Not a command invocation: {line!r}")

        name, arguments = match.group(1), match.group(2)
        words = split_words(arguments)
        return Invocation(
            name=name,
            arguments=arguments,
            positional=words,
            options=parse_options(words),
        )

    def substitute_args(self, cmd: CommandFile, args: str) -> str:
        """Substitute arguments into command prompt.

        Handles both $ARGUMENTS (all args, verbatim) and $1..$9 (positional).
        Substitution is a single pass, so placeholders inside args are left
        alone. If no placeholders exist and args are provided, appends them.

        Args:
            cmd: The command to substitute into.
            args: User-provided arguments string.

        Returns:
            Prompt with arguments substituted.
        """
        prompt = cmd.prompt

        if not has_placeholders(prompt):
            if args:
                return f"{prompt}\n\nARGUMENTS: {args}"
            return prompt

        parts = split_words(args)

        def replace(match: re.Match) -> str:
            token = match.group(1)
            if token == "ARGUMENTS":
                return args
            index = int(token) - 1
            return parts[index] if index < len(parts) else ""

        return SUBSTITUTION_RE.sub(replace, prompt)

    def render(self, line: str) -> RenderedCommand:
        """Parse an invocation line and render the command prompt."""
        invocation = self.parse_invocation(line)
        cmd = self.require(invocation.name)
        prompt = self.substitute_args(cmd, invocation.arguments)
        return RenderedCommand(command=cmd, invocation=invocation, prompt=prompt)
