"""Git and terminal output utilities.

Provides simple wrappers around subprocess calls for git operations, plus
output formatting helpers.
"""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path


def git(*args: str, cwd: Path | None = None, check: bool = True) -> str:
    """Run a git command and return stdout.

    Args:
        *args: Arguments to pass to git (e.g., "status", "--short").
        cwd: Directory to run in. Defaults to the current directory.
        check: If True (default), raise on non-zero exit. Set to False
               for commands that may legitimately fail (e.g., tag lookup).

    Returns:
        Stripped stdout from the git command.
    """
    result = subprocess.run(
        ["git", *args], cwd=cwd, capture_output=True, text=True, check=check
    )
    return result.stdout.strip()


def add(path: Path | str, cwd: Path) -> None:
    """Stage a file or directory, including deletions under it."""
    git("add", "--all", "--", str(path), cwd=cwd)


def commit(message: str, cwd: Path) -> None:
    """Commit whatever is staged.

    The first line of ``message`` becomes the subject; the rest is passed
    as a separate paragraph.
    """
    subject, _, body = message.partition("\n")
    args = ["commit", "-m", subject]
    if body.strip():
        args.extend(["-m", body.strip("\n")])
    git(*args, cwd=cwd)


def tag(name: str, cwd: Path) -> None:
    """Create a lightweight tag at HEAD."""
    git("tag", name, cwd=cwd)


def step(msg: str) -> None:
    """Print a visually distinct step header.

    Used to separate major phases of a command in terminal output.
    """
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")


def warn(msg: str) -> None:
    """Print a warning to stderr without stopping."""
    print(f"WARNING: {msg}", file=sys.stderr)


def fatal(msg: str) -> None:
    """Print an error message and exit with code 1.

    Use for unrecoverable errors that should halt the command.
    """
    print(f"ERROR: {msg}", file=sys.stderr)
    sys.exit(1)
