"""Validate command files against the front-matter schema."""
import logging
from pathlib import Path
from typing import Any

from agentcmd.config.settings import ValidationConfig
from agentcmd.exceptions import (
    AgentCmdError,
    CommandValidationError,
    FrontmatterError,
    ToolPatternError,
)

from .discovery import as_name_list, has_placeholders, parse_command_file
from .frontmatter import load_frontmatter, split_frontmatter
from .models import CommandFile, ValidationReport
from .tools import parse_allowed_tools

logger = logging.getLogger(__name__)

KNOWN_KEYS = {
    "allowed-tools",
    "description",
    "argument-hint",
    "model",
    "disable-model-invocation",
    "aliases",
    "category",
    "name",
}

SINGLE_LINE_KEYS = ("description", "argument-hint")


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict)):
        return not value
    return False


def _check_text_value(report: ValidationReport, key: str, value: Any) -> str | None:
    if isinstance(value, dict):
        report.add("invalid-type", f"'{key}' must be text, got a mapping")
        return None
    if isinstance(value, list):
        return " ".join(f"[{item}]" for item in value)
    text = str(value)
    if "\n" in text.strip():
        report.add("multiline-value", f"'{key}' must be a single line")
    return text


def validate_text(
    text: str, rules: ValidationConfig | None = None, path: Path | None = None
) -> ValidationReport:
    """Validate command file contents."""
    rules = rules or ValidationConfig()
    report = ValidationReport(path=path)

    try:
        raw, body = split_frontmatter(text)
    except FrontmatterError as e:
        report.add("frontmatter-malformed", str(e), line=e.line)
        return report

    frontmatter: dict[str, Any] = {}
    if raw is None:
        report.add("frontmatter-missing", "No front-matter block")
    else:
        try:
            frontmatter = load_frontmatter(raw)
        except FrontmatterError as e:
            report.add("frontmatter-malformed", str(e), line=e.line)
            return report

    for key in rules.required_keys:
        if raw is not None and _is_blank(frontmatter.get(key)):
            report.add("missing-key", f"Missing required key '{key}'")

    for key in SINGLE_LINE_KEYS:
        if key in frontmatter and frontmatter[key] is not None:
            value = _check_text_value(report, key, frontmatter[key])
            if (
                key == "description"
                and value is not None
                and len(value) > rules.max_description_length
            ):
                report.add(
                    "description-too-long",
                    f"Description is {len(value)} characters, "
                    f"limit is {rules.max_description_length}",
                    severity="warning",
                )

    try:
        parse_allowed_tools(frontmatter.get("allowed-tools"))
    except ToolPatternError as e:
        report.add("invalid-tool-pattern", str(e))

    try:
        as_name_list(frontmatter.get("aliases"))
    except AgentCmdError as e:
        report.add("invalid-type", str(e))

    for key in sorted(set(frontmatter) - KNOWN_KEYS, key=str):
        report.add("unknown-key", f"Unknown front-matter key '{key}'", severity="warning")

    if not body.strip():
        report.add("empty-body", "Command body is empty")
    elif rules.require_arguments_placeholder:
        if "$ARGUMENTS" not in body:
            report.add("missing-placeholder", "Body does not contain $ARGUMENTS")
    elif frontmatter.get("argument-hint") and not has_placeholders(body):
        report.add(
            "hint-without-placeholder",
            "argument-hint is set but the body has no argument placeholder",
            severity="warning",
        )

    return report


def validate_command(
    path: Path | str, rules: ValidationConfig | None = None
) -> ValidationReport:
    """Validate one command file.

    Args:
        path: Path to the .md file.
        rules: Validation rules; defaults require the three standard keys
            and a $ARGUMENTS placeholder.

    Returns:
        ValidationReport listing every issue found.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        report = ValidationReport(path=path)
        report.add("read-error", f"Cannot read file: {e}")
        return report

    report = validate_text(text, rules, path=path)
    if report.issues:
        logger.debug(f"{path}: {len(report.errors)} errors, {len(report.warnings)} warnings")
    return report


def validate_directory(
    directory: Path | str, rules: ValidationConfig | None = None
) -> list[ValidationReport]:
    """Validate every .md file under directory, sorted by path."""
    directory = Path(directory)
    return [validate_command(p, rules) for p in sorted(directory.rglob("*.md"))]


def load_valid_command(
    path: Path | str,
    source: str = "personal",
    namespace: str | None = None,
    rules: ValidationConfig | None = None,
) -> CommandFile:
    """Parse a command file, refusing files that fail validation.

    Raises:
        CommandValidationError: The file has validation errors.
    """
    rules = rules or ValidationConfig()
    report = validate_command(path, rules)
    if not report.ok:
        raise CommandValidationError(
            f"{path}: {len(report.errors)} validation error(s): "
            + "; ".join(issue.message for issue in report.errors),
            issues=report.issues,
        )
    return parse_command_file(
        Path(path),
        source=source,
        namespace=namespace,
        strict=True,
        max_description_length=rules.max_description_length,
    )
