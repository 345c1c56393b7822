"""Custom exceptions for agentcmd."""


class AgentCmdError(Exception):
    """Base exception for agentcmd."""

    pass


class ConfigError(AgentCmdError):
    """Configuration file could not be loaded."""

    pass


class FrontmatterError(AgentCmdError):
    """Malformed front-matter block."""

    def __init__(self, message: str, path=None, line: int | None = None):
        super().__init__(message)
        self.path = path
        self.line = line

    def __str__(self) -> str:
        message = super().__str__()
        if self.path is not None and self.line is not None:
            return f"{self.path}:{self.line}: {message}"
        if self.path is not None:
            return f"{self.path}: {message}"
        return message


class ToolPatternError(AgentCmdError):
    """An allowed-tools entry could not be parsed."""

    pass


class CommandNotFoundError(AgentCmdError):
    """No command with the requested name or alias."""

    def __init__(self, name: str, suggestions: list[str] | None = None):
        self.name = name
        self.suggestions = suggestions or []
        message = f"Unknown command: /{name}"
        if self.suggestions:
            message += ". Did you mean: " + ", ".join(
                f"/{s}" for s in self.suggestions
            )
        super().__init__(message)


class CommandValidationError(AgentCmdError):
    """Command file failed validation."""

    def __init__(self, message: str, issues=None):
        super().__init__(message)
        self.issues = list(issues or [])
