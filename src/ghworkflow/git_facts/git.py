# git.py
# Small, focused wrapper around the Git CLI.
# The generator only needs git to find where `.github/workflows/` lives.

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Optional


def _git(args: list[str], cwd: Optional[str] = None) -> str:
    """
    Execute a git command and return its stdout as a clean string.

    Args:
        args: List of git arguments (e.g. ["rev-parse", "--show-toplevel"])
        cwd: Optional working directory in which to run the git command.

    Returns:
        Stdout from the git command with surrounding whitespace removed.

    Raises:
        subprocess.CalledProcessError: git exited non-zero (e.g. not a repo)
        FileNotFoundError: git is not installed
    """
    out = subprocess.check_output(
        ["git", *args],
        cwd=cwd,
        text=True,
        stderr=subprocess.DEVNULL,
    )
    return out.strip()


def repo_root(cwd: Optional[str] = None) -> Path:
    """
    Return the absolute path to the root of the current Git repository.

    This uses git itself as the source of truth rather than guessing based
    on filesystem layout.
    """
    # `git rev-parse --show-toplevel` prints the repo root directory
    # regardless of where the command is run from inside the repo.
    return Path(_git(["rev-parse", "--show-toplevel"], cwd=cwd))
