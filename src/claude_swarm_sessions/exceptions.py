"""
Exceptions for claude-swarm-sessions.

Exception Hierarchy:
    SwarmSessionError (base)
    ├── ConfigurationError (required environment value missing)
    ├── SessionNotFoundError (ID or "most recent" did not resolve)
    └── LogFileNotFoundError (session directory has no session.log)
"""

from __future__ import annotations

from pathlib import Path


class SwarmSessionError(Exception):
    """Base exception for all claude-swarm-sessions errors."""


class ConfigurationError(SwarmSessionError):
    """Raised when a required environment variable is not set."""

    def __init__(self, variable: str) -> None:
        self.variable = variable
        super().__init__(f"{variable} not set")


class SessionNotFoundError(SwarmSessionError):
    """Raised when a session cannot be resolved."""

    def __init__(self, session_id: str | None = None) -> None:
        self.session_id = session_id
        if session_id:
            super().__init__(f"Session not found: {session_id}")
        else:
            super().__init__("Session not found")


class LogFileNotFoundError(SwarmSessionError):
    def __init__(self, log_path: Path) -> None:
        self.log_path = log_path
        super().__init__(f"Log file not found: {log_path}")
