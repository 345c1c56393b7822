"""Data models for agent command files."""
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class ToolPattern:
    """One allowed-tools entry, e.g. ``Read`` or ``Bash(git:*)``."""

    tool: str
    specifier: str | None = None

    def __str__(self) -> str:
        if self.specifier is None:
            return self.tool
        return f"{self.tool}({self.specifier})"

    def matches(self, tool: str, argument: str | None = None) -> bool:
        """Check whether a tool invocation is covered by this pattern."""
        if tool != self.tool:
            return False
        if self.specifier is None:
            return True
        if argument is None:
            return False

        if self.specifier.endswith(":*"):
            # Prefix rule: "git:*" covers "git", "git status" and "git:x"
            prefix = self.specifier[:-2]
            if argument == prefix:
                return True
            return argument.startswith(prefix + " ") or argument.startswith(
                prefix + ":"
            )

        if "*" in self.specifier:
            return fnmatchcase(argument, self.specifier)

        return argument == self.specifier


@dataclass
class CommandFile:
    """Represents an agent command from a commands/*.md file."""

    name: str
    description: str
    prompt: str
    needs_args: bool = False
    source: str = "personal"
    argument_hint: str | None = None
    allowed_tools: list[ToolPattern] = field(default_factory=list)
    model: str | None = None
    aliases: list[str] = field(default_factory=list)
    category: str | None = None
    path: Path | None = None
    frontmatter: dict[str, Any] = field(default_factory=dict)

    @property
    def display_name(self) -> str:
        return f"/{self.name}"

    @property
    def namespace(self) -> str | None:
        """Namespace prefix of the name, if any."""
        if ":" not in self.name:
            return None
        return self.name.rsplit(":", 1)[0]


@dataclass
class Invocation:
    """A parsed ``/name arguments`` line."""

    name: str
    arguments: str = ""
    positional: list[str] = field(default_factory=list)
    options: dict[str, str | bool] = field(default_factory=dict)


@dataclass
class RenderedCommand:
    """A command body with arguments substituted."""

    command: CommandFile
    invocation: Invocation
    prompt: str


@dataclass
class ValidationIssue:
    """Single problem found while validating a command file."""

    code: str
    message: str
    severity: str = "error"
    path: Path | None = None
    line: int | None = None

    def __str__(self) -> str:
        location = str(self.path) if self.path else "<command>"
        if self.line is not None:
            location = f"{location}:{self.line}"
        return f"{location}: {self.severity}: {self.message} [{self.code}]"


@dataclass
class ValidationReport:
    """All issues found in one command file."""

    path: Path | None
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == "error"]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == "warning"]

    @property
    def ok(self) -> bool:
        return not self.errors

    def add(self, code: str, message: str, severity: str = "error", line=None) -> None:
        self.issues.append(
            ValidationIssue(
                code=code,
                message=message,
                severity=severity,
                path=self.path,
                line=line,
            )
        )
