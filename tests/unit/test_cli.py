from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from claude_swarm_sessions import cli as cli_module
from claude_swarm_sessions import tail as tail_module
from claude_swarm_sessions.cli import cli


@pytest.fixture
def tail_calls(monkeypatch) -> list[list[str]]:
    calls: list[list[str]] = []

    class RecordingPopen:
        def __init__(self, command: list[str]) -> None:
            calls.append(command)

        def wait(self) -> int:
            return 0

    monkeypatch.setattr(tail_module.shutil, "which", lambda name: f"/usr/bin/{name}")
    monkeypatch.setattr(tail_module.subprocess, "Popen", RecordingPopen)
    return calls


def test_tail_with_session_id(old_session: Path, new_session: Path, tail_calls) -> None:
    result = CliRunner().invoke(cli, ["tail", old_session.name, "--lines", "10"])

    assert result.exit_code == 0
    assert tail_calls == [["tail", "-f", "-n", "10", str(old_session / "session.log")]]


def test_tail_with_most_recent_session(old_session: Path, new_session: Path, tail_calls) -> None:
    result = CliRunner().invoke(cli, ["tail", "-n", "5"])

    assert result.exit_code == 0
    assert tail_calls == [["tail", "-f", "-n", "5", str(new_session / "session.log")]]


def test_tail_is_default_command(old_session: Path, new_session: Path, tail_calls) -> None:
    result = CliRunner().invoke(cli, [])

    assert result.exit_code == 0
    assert tail_calls == [["tail", "-f", "-n", "100", str(new_session / "session.log")]]


def test_tail_with_nonexistent_session(old_session: Path, tail_calls) -> None:
    result = CliRunner().invoke(cli, ["tail", "nonexistent"])

    assert result.exit_code == 1
    assert "Session not found" in result.output
    assert tail_calls == []


def test_tail_with_no_sessions(swarm_home: Path, tail_calls) -> None:
    result = CliRunner().invoke(cli, ["tail"])

    assert result.exit_code == 1
    assert "Session not found" in result.output


def test_tail_with_no_log_file(project_dir: Path, make_session, tail_calls) -> None:
    make_session(project_dir, "no_log")

    result = CliRunner().invoke(cli, ["tail", "no_log"])

    assert result.exit_code == 1
    assert "Log file not found" in result.output
    assert tail_calls == []


def test_tail_no_follow(old_session: Path, tail_calls) -> None:
    (old_session / "session.log").write_text("a\nb\nc\n")

    result = CliRunner().invoke(cli, ["tail", old_session.name, "-n", "2", "--no-follow"])

    assert result.exit_code == 0
    assert result.output == "b\nc\n"
    assert tail_calls == []


def test_tail_home_option(tmp_path: Path, make_session, swarm_home: Path, tail_calls) -> None:
    other_home = tmp_path / "other-home"
    session = make_session(other_home / "sessions" / "p", "20240101_000000", log="x\n")

    result = CliRunner().invoke(cli, ["--home", str(other_home), "tail"])

    assert result.exit_code == 0
    assert tail_calls == [["tail", "-f", "-n", "100", str(session / "session.log")]]


def test_tail_pick(old_session: Path, new_session: Path, tail_calls, monkeypatch) -> None:
    class Prompt:
        def __init__(self, choices) -> None:
            self.choices = choices

        def ask(self):
            return self.choices[-1].value

    monkeypatch.setattr(
        cli_module.questionary, "select", lambda message, choices: Prompt(choices)
    )

    result = CliRunner().invoke(cli, ["tail", "--pick"])

    assert result.exit_code == 0
    assert tail_calls == [["tail", "-f", "-n", "100", str(old_session / "session.log")]]


def test_path_command(old_session: Path, new_session: Path) -> None:
    runner = CliRunner()

    assert runner.invoke(cli, ["path"]).output.strip() == str(new_session)
    assert runner.invoke(cli, ["path", old_session.name]).output.strip() == str(old_session)


def test_list_json(old_session: Path, new_session: Path) -> None:
    result = CliRunner().invoke(cli, ["list", "--format", "json"])

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert [item["session_id"] for item in payload] == [new_session.name, old_session.name]
    assert payload[0]["project_folder"] == "test+project"
    assert payload[0]["started_at"] == "2022-02-02T12:00:00"


def test_list_table(old_session: Path) -> None:
    result = CliRunner().invoke(cli, ["list"])

    assert result.exit_code == 0
    assert old_session.name in result.output


def test_list_empty(swarm_home: Path) -> None:
    result = CliRunner().invoke(cli, ["list"])

    assert result.exit_code == 0
    assert "No sessions found" in result.output


def test_create(swarm_home: Path) -> None:
    result = CliRunner().invoke(
        cli, ["create", "--dir", "/home/u/proj", "--timestamp", "20240101_000000"]
    )

    expected = swarm_home / "sessions" / "home+u+proj" / "20240101_000000"
    assert result.exit_code == 0
    assert result.output.strip() == str(expected)
    assert expected.is_dir()
    assert (swarm_home / ".gitignore").read_text() == "*\n"


def test_current(swarm_home: Path) -> None:
    runner = CliRunner()

    missing = runner.invoke(cli, ["current"])
    assert missing.exit_code == 1
    assert "CLAUDE_SWARM_SESSION_PATH not set" in missing.output

    found = runner.invoke(cli, ["current"], env={"CLAUDE_SWARM_SESSION_PATH": "/tmp/s"})
    assert found.exit_code == 0
    assert found.output.strip() == "/tmp/s"


def test_tail_empty_id_is_not_found(old_session: Path, new_session: Path, tail_calls) -> None:
    result = CliRunner().invoke(cli, ["tail", ""])

    assert result.exit_code == 1
    assert "Session not found" in result.output
    assert tail_calls == []


@pytest.mark.parametrize(
    "args",
    [["tail", "-n", "-1"], ["list", "--limit", "-1"]],
)
def test_negative_counts_rejected(old_session: Path, tail_calls, args: list[str]) -> None:
    result = CliRunner().invoke(cli, args)

    assert result.exit_code == 2
    assert tail_calls == []
