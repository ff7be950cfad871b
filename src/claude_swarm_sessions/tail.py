"""Stream a session's log file."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
import time
from pathlib import Path
from typing import BinaryIO, TextIO

from .discovery import LOG_FILE
from .exceptions import LogFileNotFoundError

__all__ = ["follow", "log_path", "read_last_lines", "require_log", "tail_command"]

logger = logging.getLogger(__name__)

TAIL_EXECUTABLE = "tail"


def log_path(session_dir: Path) -> Path:
    return session_dir / LOG_FILE


def require_log(session_dir: Path) -> Path:
    path = log_path(session_dir)
    if not path.exists():
        raise LogFileNotFoundError(path)
    return path


def tail_command(log: Path, lines: int) -> list[str]:
    return [TAIL_EXECUTABLE, "-f", "-n", str(lines), str(log)]


def follow(
    log: Path,
    lines: int,
    *,
    out: TextIO | None = None,
    poll_interval: float = 0.5,
) -> int:
    """Print the last ``lines`` lines of ``log`` and keep printing new ones.

    Runs ``tail -f`` as a child process when available and falls back to an
    in-process loop otherwise. Ctrl+C stops either one and returns 0.
    """
    if shutil.which(TAIL_EXECUTABLE) is None:
        logger.debug("%s not on PATH, following %s in-process", TAIL_EXECUTABLE, log)
        return _follow_in_process(log, lines, out=out or sys.stdout, poll_interval=poll_interval)

    command = tail_command(log, lines)
    logger.debug("Running %s", " ".join(command))
    process = subprocess.Popen(command)
    try:
        return process.wait()
    except KeyboardInterrupt:
        process.terminate()
        process.wait()
        return 0


def read_last_lines(log: Path, lines: int) -> list[str]:
    """Read the last ``lines`` lines of ``log``."""
    with open(log, "rb") as f:
        return _last_lines(f, f.seek(0, os.SEEK_END), lines)


def _last_lines(f: BinaryIO, end: int, lines: int) -> list[str]:
    """Return the last ``lines`` lines of the first ``end`` bytes of ``f``."""
    if lines <= 0:
        return []
    # Seek back in chunks until enough newlines are buffered
    chunk_size = 8192
    data = b""
    position = end
    while position > 0 and data.count(b"\n") <= lines:
        step = min(chunk_size, position)
        position -= step
        f.seek(position)
        data = f.read(step) + data
    text = data.decode("utf-8", errors="replace")
    return text.splitlines()[-lines:]


def _follow_in_process(log: Path, lines: int, *, out: TextIO, poll_interval: float) -> int:
    try:
        with open(log, "rb") as fh:
            # Everything past ``size`` is printed by the follow loop below.
            size = fh.seek(0, os.SEEK_END)
            for line in _last_lines(fh, size, lines):
                out.write(line + "\n")
            out.flush()

            fh.seek(size)
            while True:
                chunk = fh.readline()
                if not chunk:
                    time.sleep(poll_interval)
                    continue
                out.write(chunk.decode("utf-8", errors="replace"))
                out.flush()
    except KeyboardInterrupt:
        return 0
