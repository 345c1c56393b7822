"""agentcmd entry point.

Registered as a console script:
    agentcmd = "agentcmd.main:main"

Subcommands:
    agentcmd list [--category C]         - list discovered commands
    agentcmd show NAME                   - show one command
    agentcmd validate [PATH ...]         - validate command files
    agentcmd render "/name args"         - print the substituted prompt
    agentcmd check-tool NAME TOOL [ARG]  - test a tool against allowed-tools
    agentcmd history [--limit N]         - show recorded usage
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from agentcmd.commands import (
    CommandRegistry,
    is_tool_allowed,
    validate_command,
    validate_directory,
)
from agentcmd.config.settings import Config, load_config
from agentcmd.exceptions import AgentCmdError, CommandNotFoundError
from agentcmd.storage.database import close_database, get_session, init_database
from agentcmd.storage.repository import UsageRepository
from agentcmd.utils.formatting import (
    format_command_detail,
    format_command_list,
    format_report,
)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def setup_logging(config: Config, verbosity: int = 0) -> None:
    """Configure root logging from config and -v flags."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = getattr(logging, config.logging.level, logging.WARNING)
    logging.basicConfig(format=LOG_FORMAT, level=level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agentcmd",
        description="Inspect, validate and render agent command files",
    )
    parser.add_argument("--config", help="Path to config.yaml")
    parser.add_argument("--project", help="Project directory with .claude/commands")
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="More logging (-vv for debug)"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List discovered commands")
    list_parser.add_argument("--category", help="Only show one category")
    list_parser.set_defaults(func=cmd_list)

    show_parser = subparsers.add_parser("show", help="Show one command")
    show_parser.add_argument("name")
    show_parser.set_defaults(func=cmd_show)

    validate_parser = subparsers.add_parser("validate", help="Validate command files")
    validate_parser.add_argument("paths", nargs="*", help="Files or directories")
    validate_parser.add_argument(
        "--no-placeholder",
        action="store_true",
        help="Do not require $ARGUMENTS in the body",
    )
    validate_parser.add_argument(
        "--strict-warnings",
        action="store_true",
        help="Treat warnings as failures",
    )
    validate_parser.set_defaults(func=cmd_validate)

    render_parser = subparsers.add_parser("render", help="Render a command prompt")
    render_parser.add_argument("line", help='Invocation, e.g. "/fix-bug login fails"')
    render_parser.add_argument(
        "--record", action="store_true", help="Record the invocation in the usage log"
    )
    render_parser.set_defaults(func=cmd_render)

    tool_parser = subparsers.add_parser(
        "check-tool", help="Check a tool invocation against allowed-tools"
    )
    tool_parser.add_argument("name")
    tool_parser.add_argument("tool")
    tool_parser.add_argument("argument", nargs="?")
    tool_parser.set_defaults(func=cmd_check_tool)

    history_parser = subparsers.add_parser("history", help="Show recorded usage")
    history_parser.add_argument("--limit", type=int, default=20)
    history_parser.set_defaults(func=cmd_history)

    return parser


def _load_registry(config: Config, project: str | None) -> CommandRegistry:
    registry = CommandRegistry()
    registry.refresh(project_path=project, config=config)
    return registry


def cmd_list(args: argparse.Namespace, config: Config) -> int:
    registry = _load_registry(config, args.project)
    groups = registry.by_category()
    if args.category:
        if args.category not in groups:
            print(f"Unknown category: {args.category}", file=sys.stderr)
            print("Available categories: " + ", ".join(groups), file=sys.stderr)
            return 1
        groups = {args.category: groups[args.category]}
    print(format_command_list(groups))
    return 0


def cmd_show(args: argparse.Namespace, config: Config) -> int:
    registry = _load_registry(config, args.project)
    print(format_command_detail(registry.require(args.name)))
    return 0


def _default_validate_paths(config: Config, project: str | None) -> list[Path]:
    paths = [Path(config.commands.personal_dir)]
    project = project or config.commands.project_path
    if project:
        paths.append(Path(project) / ".claude" / "commands")
    paths.extend(Path(d) for d in config.commands.extra_dirs)
    return [p for p in paths if p.is_dir()]


def cmd_validate(args: argparse.Namespace, config: Config) -> int:
    rules = config.validation
    if args.no_placeholder:
        rules.require_arguments_placeholder = False

    paths = [Path(p) for p in args.paths] or _default_validate_paths(config, args.project)
    reports = []
    for path in paths:
        if path.is_dir():
            reports.extend(validate_directory(path, rules))
        else:
            reports.append(validate_command(path, rules))

    print(format_report(reports))

    failed = any(not r.ok for r in reports)
    if args.strict_warnings:
        failed = failed or any(r.warnings for r in reports)
    return 1 if failed else 0


async def _record(config: Config, **kwargs) -> None:
    await init_database(config.database.path)
    try:
        async with get_session() as db:
            await UsageRepository(db).record(**kwargs)
    finally:
        await close_database()


def cmd_render(args: argparse.Namespace, config: Config) -> int:
    registry = _load_registry(config, args.project)
    try:
        rendered = registry.render(args.line)
    except CommandNotFoundError as e:
        if args.record:
            invocation = registry.parse_invocation(args.line)
            asyncio.run(
                _record(
                    config,
                    command=e.name,
                    arguments=invocation.arguments,
                    valid=False,
                    error=str(e),
                )
            )
        raise

    if args.record:
        asyncio.run(
            _record(
                config,
                command=rendered.command.name,
                arguments=rendered.invocation.arguments,
                source=rendered.command.source,
            )
        )
    print(rendered.prompt)
    return 0


def cmd_check_tool(args: argparse.Namespace, config: Config) -> int:
    registry = _load_registry(config, args.project)
    cmd = registry.require(args.name)
    allowed = is_tool_allowed(cmd.allowed_tools, args.tool, args.argument)
    label = args.tool if args.argument is None else f"{args.tool}({args.argument})"
    print(f"{label}: {'allowed' if allowed else 'denied'} for {cmd.display_name}")
    return 0 if allowed else 1


async def _history(config: Config, limit: int) -> str:
    await init_database(config.database.path)
    try:
        async with get_session() as db:
            repo = UsageRepository(db)
            rows = await repo.recent(limit)
            counts = await repo.counts()
    finally:
        await close_database()

    if not rows:
        return "No recorded usage."

    lines = []
    for row in rows:
        status = "ok" if row.valid else "invalid"
        lines.append(
            f"{row.timestamp:%Y-%m-%d %H:%M:%S}  /{row.command} {row.arguments}".rstrip()
            + f"  [{status}]"
        )
    lines.append("")
    lines.extend(f"{n:>5}  /{command}" for command, n in counts)
    return "\n".join(lines)


def cmd_history(args: argparse.Namespace, config: Config) -> int:
    print(asyncio.run(_history(config, args.limit)))
    return 0


def run(argv: list[str] | None = None) -> int:
    """Parse arguments and dispatch; returns the exit status."""
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
        setup_logging(config, args.verbose)
        return args.func(args, config)
    except AgentCmdError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


def main() -> None:
    """Main entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
