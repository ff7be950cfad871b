from __future__ import annotations

import logging
from pathlib import Path

import click
import questionary
from click_default_group import DefaultGroup

from .config import SwarmConfig
from .discovery import discover_sessions, resolve_session
from .exceptions import ConfigurationError, LogFileNotFoundError, SessionNotFoundError
from .formatters import format_session_choice, format_sessions, render_sessions_table
from .paths import ensure_directory, generate
from .tail import follow, read_last_lines, require_log

DEFAULT_TAIL_LINES = 100


@click.group(cls=DefaultGroup, default="tail", default_if_no_args=True)
@click.option(
    "--home",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Swarm home override (default: $CLAUDE_SWARM_HOME or ~/.claude-swarm)",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, home: Path | None, verbose: bool) -> None:
    """Find claude-swarm sessions and follow their logs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = SwarmConfig.from_environ(home=home)


@cli.command()
@click.argument("session_id", required=False)
@click.option(
    "-n",
    "--lines",
    default=DEFAULT_TAIL_LINES,
    type=click.IntRange(min=0),
    show_default=True,
    help="Lines to show",
)
@click.option("--no-follow", is_flag=True, help="Print the last lines and exit")
@click.option("--pick", is_flag=True, help="Choose the session interactively")
@click.pass_obj
def tail(
    config: SwarmConfig,
    session_id: str | None,
    lines: int,
    no_follow: bool,
    pick: bool,
) -> None:
    """Follow a session log (most recent session if no ID is given)."""
    if pick:
        session_dir = _pick_session(config)
        if session_dir is None:
            click.echo("No session selected.")
            return
    else:
        session_dir = _resolve_or_exit(config, session_id)

    try:
        log = require_log(session_dir)
    except LogFileNotFoundError as exc:
        click.echo(f"Error: Log file not found: {exc.log_path}")
        raise SystemExit(1)

    if no_follow:
        for line in read_last_lines(log, lines):
            click.echo(line)
        return

    returncode = follow(log, lines)
    if returncode:
        raise SystemExit(returncode)


@cli.command(name="list")
@click.option("--project", default=None, help="Project folder name or working directory")
@click.option(
    "--limit",
    default=20,
    type=click.IntRange(min=0),
    show_default=True,
    help="Max sessions to show",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    show_default=True,
)
@click.pass_obj
def list_sessions(
    config: SwarmConfig,
    project: str | None,
    limit: int,
    output_format: str,
) -> None:
    """List sessions, newest first."""
    sessions = discover_sessions(home=config.home, project=project)[:limit]

    formatted = format_sessions(sessions, output_format)
    if formatted is not None:
        click.echo(formatted)
        return

    if not sessions:
        click.echo(f"No sessions found under {config.sessions_dir}")
        return
    render_sessions_table(sessions)


@cli.command()
@click.argument("session_id", required=False)
@click.pass_obj
def path(config: SwarmConfig, session_id: str | None) -> None:
    """Print a session directory (most recent session if no ID is given)."""
    click.echo(str(_resolve_or_exit(config, session_id)))


@cli.command()
@click.option(
    "--dir",
    "working_dir",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Working directory the session belongs to (default: current directory)",
)
@click.option("--timestamp", default=None, help="Timestamp directory name (YYYYMMDD_HHMMSS)")
@click.pass_obj
def create(config: SwarmConfig, working_dir: Path | None, timestamp: str | None) -> None:
    """Create a session directory and print its path."""
    session_path = generate(working_dir=working_dir, timestamp=timestamp, home=config.home)
    ensure_directory(session_path, home=config.home)
    click.echo(str(session_path))


@cli.command()
@click.pass_obj
def current(config: SwarmConfig) -> None:
    """Print the session directory of the enclosing swarm process."""
    try:
        click.echo(str(config.require_session_path()))
    except ConfigurationError as exc:
        click.echo(f"Error: {exc}")
        raise SystemExit(1)


def _resolve_or_exit(config: SwarmConfig, session_id: str | None) -> Path:
    try:
        return resolve_session(session_id, home=config.home)
    except SessionNotFoundError:
        if session_id is not None:
            click.echo(f"Error: Session not found: {session_id}")
        else:
            click.echo("Error: Session not found (no sessions with a config.yml)")
        raise SystemExit(1)


def _pick_session(config: SwarmConfig) -> Path | None:
    sessions = discover_sessions(home=config.home)
    if not sessions:
        click.echo("Error: Session not found (no sessions with a config.yml)")
        raise SystemExit(1)

    choices = [
        questionary.Choice(title=format_session_choice(info), value=info.path)
        for info in sessions[:50]
    ]
    return questionary.select("Select a session to tail:", choices=choices).ask()
