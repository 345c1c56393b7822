"""Plain-text formatting for command listings and reports."""
from agentcmd.commands.models import CommandFile, ValidationReport


def truncate_text(text: str, max_len: int = 80) -> str:
    """Truncate text with ellipsis if too long."""
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def format_command_line(cmd: CommandFile, width: int = 28) -> str:
    """One listing line: name, hint and description."""
    label = cmd.display_name
    if cmd.argument_hint:
        label = f"{label} {cmd.argument_hint}"
    return f"  {label:<{width}} {truncate_text(cmd.description)}"


def format_command_list(groups: dict[str, list[CommandFile]]) -> str:
    """Format commands grouped by category."""
    if not groups:
        return "No commands found."

    lines = []
    for category, commands in groups.items():
        lines.append(f"{category.upper()}")
        lines.extend(format_command_line(cmd) for cmd in commands)
        lines.append("")
    return "\n".join(lines).rstrip()


def format_command_detail(cmd: CommandFile) -> str:
    """Format full metadata and body of one command."""
    lines = [
        cmd.display_name,
        f"  description:   {cmd.description}",
        f"  argument-hint: {cmd.argument_hint or '-'}",
        f"  source:        {cmd.source}",
    ]
    if cmd.path:
        lines.append(f"  path:          {cmd.path}")
    if cmd.model:
        lines.append(f"  model:         {cmd.model}")
    if cmd.aliases:
        lines.append("  aliases:       " + ", ".join(f"/{a}" for a in cmd.aliases))
    tools = ", ".join(str(t) for t in cmd.allowed_tools) or "-"
    lines.append(f"  allowed-tools: {tools}")
    lines.append("")
    lines.append(cmd.prompt)
    return "\n".join(lines)


def format_report(reports: list[ValidationReport]) -> str:
    """Format validation reports with a summary line."""
    lines = []
    errors = warnings = 0
    for report in reports:
        for issue in report.issues:
            lines.append(str(issue))
        errors += len(report.errors)
        warnings += len(report.warnings)

    lines.append(
        f"{len(reports)} file(s) checked, {errors} error(s), {warnings} warning(s)"
    )
    return "\n".join(lines)
