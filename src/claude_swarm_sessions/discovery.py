"""
Resolve session IDs to session directories.

Lookup by ID tries ``<home>/run/<id>`` first. The orchestrator maintains those
symlinks for running sessions, and they are trusted without further checks.
Otherwise every ``<home>/sessions/*/*`` directory is scanned for an exact name
match.

"Most recent" only considers directories that contain a ``config.yml``. Recency
comes from the timestamp directory name, never from file mtimes.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from .config import RUN_DIR, SESSIONS_DIR, resolve_swarm_home
from .exceptions import SessionNotFoundError
from .paths import TIMESTAMP_FORMAT, project_folder_name

__all__ = [
    "SessionInfo",
    "discover_sessions",
    "find_by_id",
    "find_most_recent",
    "resolve_session",
]

logger = logging.getLogger(__name__)

CONFIG_FILE = "config.yml"
LOG_FILE = "session.log"


@dataclass
class SessionInfo:
    """A session directory found under swarm home."""

    session_id: str
    path: Path
    project_folder: str
    started_at: datetime | None
    has_log: bool
    active: bool = False


def find_by_id(session_id: str, home: Path | None = None) -> Path | None:
    if not session_id or "/" in session_id or "\\" in session_id:
        return None

    root = resolve_swarm_home(home)
    run_symlink = root / RUN_DIR / session_id
    if run_symlink.is_symlink():
        target = Path(os.readlink(run_symlink))
        if not target.is_absolute():
            target = run_symlink.parent / target
        logger.debug("Resolved %s through run symlink -> %s", session_id, target)
        return target

    sessions_dir = root / SESSIONS_DIR
    candidates = _candidate_dirs(sessions_dir) if sessions_dir.is_dir() else []
    for path in candidates:
        if path.name == session_id:
            logger.debug("Resolved %s by scanning sessions -> %s", session_id, path)
            return path

    logger.debug("No session directory named %s under %s", session_id, root)
    return None


def find_most_recent(home: Path | None = None) -> Path | None:
    sessions_dir = resolve_swarm_home(home) / SESSIONS_DIR
    if not sessions_dir.is_dir():
        return None

    candidates = _session_dirs(sessions_dir)
    if not candidates:
        return None

    # Names are fixed-width timestamps, so string order is chronological.
    most_recent = max(candidates, key=lambda path: (path.name, str(path)))
    logger.debug("Most recent of %d sessions: %s", len(candidates), most_recent)
    return most_recent


def resolve_session(session_id: str | None = None, home: Path | None = None) -> Path:
    """Return the directory for ``session_id``, or the most recent session if omitted."""
    if session_id is not None:
        found = find_by_id(session_id, home=home)
    else:
        found = find_most_recent(home=home)
    if found is None:
        raise SessionNotFoundError(session_id)
    return found


def discover_sessions(
    home: Path | None = None,
    project: str | None = None,
) -> list[SessionInfo]:
    """List sessions newest first, optionally limited to one project folder.

    ``project`` may be an encoded folder name (``home+u+proj``) or a working
    directory path, which is encoded first.
    """
    root = resolve_swarm_home(home)
    sessions_dir = root / SESSIONS_DIR
    if not sessions_dir.is_dir():
        return []

    project_folder = None
    if project:
        project_folder = project_folder_name(project) if _is_path_like(project) else project

    active = _active_targets(root / RUN_DIR)
    sessions: list[SessionInfo] = []
    for session_dir in _session_dirs(sessions_dir):
        if project_folder is not None and session_dir.parent.name != project_folder:
            continue
        sessions.append(
            SessionInfo(
                session_id=session_dir.name,
                path=session_dir,
                project_folder=session_dir.parent.name,
                started_at=_parse_timestamp(session_dir.name),
                has_log=(session_dir / LOG_FILE).exists(),
                active=session_dir.resolve() in active,
            )
        )

    sessions.sort(key=lambda info: (info.session_id, str(info.path)), reverse=True)
    return sessions


def _session_dirs(sessions_dir: Path) -> list[Path]:
    seen: set[Path] = set()
    session_dirs: list[Path] = []
    for session_dir in _candidate_dirs(sessions_dir):
        if not (session_dir / CONFIG_FILE).is_file():
            continue
        if session_dir in seen:
            continue
        seen.add(session_dir)
        session_dirs.append(session_dir)
    return session_dirs


def _candidate_dirs(sessions_dir: Path) -> list[Path]:
    """Every directory two levels below ``sessions_dir``, sorted.

    Unreadable directories raise OSError instead of being skipped.
    """
    candidates: list[Path] = []
    for project in sorted(sessions_dir.iterdir()):
        if not project.is_dir():
            continue
        for entry in sorted(project.iterdir()):
            if entry.is_dir():
                candidates.append(entry)
    return candidates


def _active_targets(run_dir: Path) -> set[Path]:
    if not run_dir.is_dir():
        return set()
    targets: set[Path] = set()
    for link in run_dir.iterdir():
        if link.is_symlink():
            targets.add(link.resolve())
    return targets


def _parse_timestamp(name: str) -> datetime | None:
    try:
        return datetime.strptime(name, TIMESTAMP_FORMAT)
    except ValueError:
        return None


def _is_path_like(value: str) -> bool:
    return value.startswith(("/", "\\", ".", "~")) or "/" in value or "\\" in value
