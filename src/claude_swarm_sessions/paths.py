"""
Session path layout for claude-swarm.

Sessions live at ``<swarm home>/sessions/<project folder>/<timestamp>``, where
the project folder is the working directory flattened into one path component
by replacing separators with ``+``:

    /home/u/proj      -> home+u+proj
    C:\\Users\\x       -> C+Users+x

WARNING: the encoding is lossy. ``/a+b`` and ``/a/b`` share a project folder.
"""

from __future__ import annotations

import logging
import os
import re
from datetime import datetime
from pathlib import Path
from typing import Mapping

from .config import ENV_SESSION_PATH, GITIGNORE, SESSIONS_DIR, resolve_swarm_home
from .exceptions import ConfigurationError

__all__ = [
    "TIMESTAMP_FORMAT",
    "ensure_directory",
    "from_env",
    "generate",
    "new_timestamp",
    "project_folder_name",
]

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
PROJECT_SEPARATOR = "+"

_DRIVE_PREFIX = re.compile(r"^([A-Za-z]):")
_LEADING_SEPARATOR = re.compile(r"^[/\\]")
_SEPARATORS = re.compile(r"[/\\]")


def new_timestamp(now: datetime | None = None) -> str:
    """Format ``now`` (default: local time) as a sortable session directory name."""
    return (now or datetime.now()).strftime(TIMESTAMP_FORMAT)


def project_folder_name(working_dir: str | os.PathLike[str] | None = None) -> str:
    """
    Encode a working directory as a single, separator-free folder name.

    Paths that already look absolute are used verbatim so drive-letter paths
    are not expanded a second time.

    Examples:
        >>> project_folder_name("/a/b/c")
        'a+b+c'

        >>> project_folder_name("C:\\\\Users\\\\x")
        'C+Users+x'
    """
    path = os.fspath(working_dir) if working_dir is not None else os.getcwd()
    if not _looks_absolute(path):
        path = os.path.abspath(os.path.expanduser(path))

    path = _DRIVE_PREFIX.sub(r"\1", path, count=1)
    path = _LEADING_SEPARATOR.sub("", path, count=1)
    return _SEPARATORS.sub(PROJECT_SEPARATOR, path)


def _looks_absolute(path: str) -> bool:
    return path.startswith(("/", "\\")) or _DRIVE_PREFIX.match(path) is not None


def generate(
    working_dir: str | os.PathLike[str] | None = None,
    timestamp: str | None = None,
    home: Path | None = None,
) -> Path:
    """Return the session directory for ``working_dir`` started at ``timestamp``."""
    project_name = project_folder_name(working_dir)
    return resolve_swarm_home(home) / SESSIONS_DIR / project_name / (timestamp or new_timestamp())


def ensure_directory(session_path: Path, home: Path | None = None) -> None:
    """Create ``session_path`` and seed swarm home with a catch-all .gitignore."""
    session_path.mkdir(parents=True, exist_ok=True)

    root = resolve_swarm_home(home)
    root.mkdir(parents=True, exist_ok=True)
    gitignore_path = root / GITIGNORE
    if gitignore_path.exists():
        return
    try:
        with gitignore_path.open("x") as f:
            f.write("*\n")
    except FileExistsError:
        # Another process created it between the check and the open.
        return
    logger.debug("Wrote %s", gitignore_path)


def from_env(environ: Mapping[str, str] | None = None) -> Path:
    """Return the session directory of the enclosing swarm process."""
    env = os.environ if environ is None else environ
    value = env.get(ENV_SESSION_PATH)
    if not value:
        raise ConfigurationError(ENV_SESSION_PATH)
    return Path(value)
