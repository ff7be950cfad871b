from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ENV_SWARM_HOME = "CLAUDE_SWARM_HOME"
ENV_SESSION_PATH = "CLAUDE_SWARM_SESSION_PATH"
DEFAULT_SWARM_HOME = Path("~/.claude-swarm")

SESSIONS_DIR = "sessions"
RUN_DIR = "run"
GITIGNORE = ".gitignore"


def swarm_home(environ: Mapping[str, str] | None = None) -> Path:
    """Return the root directory that holds every session."""
    env = os.environ if environ is None else environ
    env_value = env.get(ENV_SWARM_HOME)
    if env_value:
        return _absolute(Path(env_value))
    return _absolute(DEFAULT_SWARM_HOME)


def resolve_swarm_home(home: Path | None = None) -> Path:
    if home is not None:
        return _absolute(home)
    return swarm_home()


def _absolute(path: Path) -> Path:
    return Path(os.path.abspath(path.expanduser()))


@dataclass(frozen=True)
class SwarmConfig:
    """Process-wide settings, resolved once and passed down explicitly."""

    home: Path
    session_path: Path | None = None

    @classmethod
    def from_environ(
        cls,
        environ: Mapping[str, str] | None = None,
        home: Path | None = None,
    ) -> SwarmConfig:
        env = os.environ if environ is None else environ
        resolved_home = _absolute(home) if home is not None else swarm_home(env)
        session_value = env.get(ENV_SESSION_PATH)
        session_path = Path(session_value) if session_value else None
        logger.debug("Resolved swarm home %s (session path: %s)", resolved_home, session_path)
        return cls(home=resolved_home, session_path=session_path)

    @property
    def sessions_dir(self) -> Path:
        return self.home / SESSIONS_DIR

    def require_session_path(self) -> Path:
        if self.session_path is None:
            raise ConfigurationError(ENV_SESSION_PATH)
        return self.session_path
