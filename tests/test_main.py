"""Test the agentcmd command-line interface."""
import pytest
from agentcmd.main import build_parser, run

FIX_BUG = """---
allowed-tools: Bash(git:*), Read
description: Fix a specific bug
argument-hint: [bug description]
aliases: [fix]
---
Fix this bug: $ARGUMENTS
"""

SPRINT = """---
allowed-tools: Task(subagent_type:*)
description: Conduct sprint planning
argument-hint: [sprint goal]
category: sprint
---
Plan the sprint.
"""


@pytest.fixture
def workspace(tmp_path):
    """Config file plus a personal command directory."""
    commands = tmp_path / "commands"
    commands.mkdir()
    (commands / "fix-bug.md").write_text(FIX_BUG)
    (commands / "sprint-planning.md").write_text(SPRINT)

    config_path = tmp_path / "config.yaml"
    config_path.write_text(f"""
commands:
  personal_dir: {commands}
  plugins_dir: {tmp_path / "plugins"}
database:
  path: {tmp_path / "usage.db"}
""")
    return tmp_path, ["--config", str(config_path)]


def test_parser_requires_subcommand():
    """A subcommand is mandatory."""
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_list(workspace, capsys):
    """list prints commands grouped by category."""
    _, base = workspace

    assert run(base + ["list"]) == 0

    out = capsys.readouterr().out
    assert "GENERAL" in out
    assert "SPRINT" in out
    assert "/fix-bug [bug description]" in out
    assert "Conduct sprint planning" in out


def test_list_unknown_category(workspace, capsys):
    """Unknown categories fail with the available ones."""
    _, base = workspace

    assert run(base + ["list", "--category", "nope"]) == 1
    assert "Available categories: general, sprint" in capsys.readouterr().err


def test_show(workspace, capsys):
    """show prints metadata and body, resolving aliases."""
    _, base = workspace

    assert run(base + ["show", "/fix"]) == 0

    out = capsys.readouterr().out
    assert out.startswith("/fix-bug")
    assert "allowed-tools: Bash(git:*), Read" in out
    assert "Fix this bug: $ARGUMENTS" in out


def test_show_unknown(workspace, capsys):
    """Unknown command exits 1 with suggestions on stderr."""
    _, base = workspace

    assert run(base + ["show", "fix-bgu"]) == 1
    assert "Did you mean" in capsys.readouterr().err


def test_validate_default_dirs(workspace, capsys):
    """Without paths, discovered directories are validated."""
    _, base = workspace

    assert run(base + ["validate"]) == 1

    out = capsys.readouterr().out
    assert "missing-placeholder" in out
    assert "2 file(s) checked, 1 error(s), 0 warning(s)" in out


def test_validate_no_placeholder(workspace, capsys):
    """--no-placeholder relaxes the $ARGUMENTS rule."""
    _, base = workspace

    assert run(base + ["validate", "--no-placeholder"]) == 0
    assert "0 error(s)" in capsys.readouterr().out


def test_validate_strict_warnings(workspace, capsys):
    """--strict-warnings fails on warnings."""
    tmp_path, base = workspace
    path = tmp_path / "warn.md"
    path.write_text(FIX_BUG.replace("aliases: [fix]", "temperature: 1"))

    assert run(base + ["validate", str(path)]) == 0
    assert run(base + ["validate", "--strict-warnings", str(path)]) == 1


def test_render(workspace, capsys):
    """render prints the substituted prompt."""
    _, base = workspace

    assert run(base + ["render", "/fix-bug login  fails"]) == 0
    assert capsys.readouterr().out.strip() == "Fix this bug: login  fails"


def test_render_unknown(workspace, capsys):
    """Unknown invocations exit 1."""
    _, base = workspace

    assert run(base + ["render", "/deploy now"]) == 1
    assert "Unknown command: /deploy" in capsys.readouterr().err


def test_render_not_a_command(workspace, capsys):
    """Text without a slash is rejected."""
    _, base = workspace

    assert run(base + ["render", "fix-bug now"]) == 1
    assert "Not a command invocation" in capsys.readouterr().err


def test_render_record_and_history(workspace, capsys):
    """Recorded invocations show up in history."""
    _, base = workspace

    assert run(base + ["render", "--record", "/fix login fails"]) == 0
    assert run(base + ["render", "--record", "/fxi-bug oops"]) == 1
    capsys.readouterr()

    assert run(base + ["history"]) == 0

    out = capsys.readouterr().out
    assert "/fix-bug login fails  [ok]" in out
    assert "/fxi-bug oops  [invalid]" in out
    assert "    1  /fix-bug" in out


def test_history_empty(workspace, capsys):
    """History without records says so."""
    _, base = workspace

    assert run(base + ["history"]) == 0
    assert "No recorded usage." in capsys.readouterr().out


def test_check_tool(workspace, capsys):
    """check-tool exits 0 when allowed and 1 when denied."""
    _, base = workspace

    assert run(base + ["check-tool", "fix-bug", "Bash", "git status"]) == 0
    assert "allowed" in capsys.readouterr().out

    assert run(base + ["check-tool", "fix-bug", "Bash", "rm -rf /"]) == 1
    assert "denied" in capsys.readouterr().out

    assert run(base + ["check-tool", "sprint-planning", "Task", "subagent_type:planner"]) == 0
