from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.table import Table

from .discovery import SessionInfo


def sessions_to_dicts(sessions: list[SessionInfo]) -> list[dict[str, Any]]:
    return [
        {
            "session_id": info.session_id,
            "project_folder": info.project_folder,
            "path": str(info.path),
            "started_at": info.started_at.isoformat() if info.started_at else None,
            "has_log": info.has_log,
            "active": info.active,
        }
        for info in sessions
    ]


def format_sessions(sessions: list[SessionInfo], output_format: str) -> str | None:
    if output_format == "json":
        return json.dumps(sessions_to_dicts(sessions), ensure_ascii=True)
    return None


def render_sessions_table(sessions: list[SessionInfo]) -> None:
    console = Console()
    table = Table(title="Swarm Sessions")
    table.add_column("Session", style="cyan")
    table.add_column("Project", style="magenta")
    table.add_column("Started", style="white")
    table.add_column("Log", style="green")
    table.add_column("Active", style="yellow")

    for info in sessions:
        started = info.started_at.strftime("%Y-%m-%d %H:%M:%S") if info.started_at else "?"
        table.add_row(
            info.session_id,
            info.project_folder,
            started,
            "yes" if info.has_log else "no",
            "*" if info.active else "",
        )
    console.print(table)


def format_session_choice(info: SessionInfo) -> str:
    started = info.started_at.strftime("%Y-%m-%d %H:%M") if info.started_at else "unknown"
    marker = " (running)" if info.active else ""
    return f"{info.session_id}  {started}  {info.project_folder}{marker}"
