# ABOUTME: Pytest configuration and shared fixtures.
# ABOUTME: Builds a temporary swarm home with two sessions under one project.

from pathlib import Path

import pytest

OLD_SESSION_ID = "20220101_120000"
NEW_SESSION_ID = "20220202_120000"


def _make_session(project_dir: Path, name: str, *, config: bool = True, log: str | None = None) -> Path:
    session_dir = project_dir / name
    session_dir.mkdir(parents=True)
    if config:
        (session_dir / "config.yml").write_text("test config")
    (session_dir / "main.mcp.json").write_text("{}")
    if log is not None:
        (session_dir / "session.log").write_text(log)
    return session_dir


@pytest.fixture
def make_session():
    """Factory that lays out a session directory under a project folder."""
    return _make_session


@pytest.fixture
def swarm_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point CLAUDE_SWARM_HOME at an empty temporary directory."""
    home = tmp_path / "swarm-home"
    home.mkdir()
    monkeypatch.setenv("CLAUDE_SWARM_HOME", str(home))
    monkeypatch.delenv("CLAUDE_SWARM_SESSION_PATH", raising=False)
    return home


@pytest.fixture
def project_dir(swarm_home: Path) -> Path:
    project = swarm_home / "sessions" / "test+project"
    project.mkdir(parents=True)
    return project


@pytest.fixture
def old_session(project_dir: Path) -> Path:
    return _make_session(project_dir, OLD_SESSION_ID, log="old session log\n")


@pytest.fixture
def new_session(project_dir: Path) -> Path:
    return _make_session(project_dir, NEW_SESSION_ID, log="new session log\n")
