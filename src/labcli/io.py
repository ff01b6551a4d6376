"""Plain stdout/stderr output for command results and fatal errors.

Command results (URLs, todo lines) go through ``say`` so they stay
pipe-friendly; progress and diagnostics go through ``labcli.log``.
"""

from __future__ import annotations

import sys


def say(message: str) -> None:
    """Print a command result to stdout.

    Example:
        >>> say("https://gitlab.com/group/project/-/pipelines/1")
        https://gitlab.com/group/project/-/pipelines/1
    """
    print(message)


def die(message: str, code: int = 1, *, hint: str | None = None) -> None:
    """Report a fatal error on stderr and exit with ``code``."""
    print(f"error: {message}", file=sys.stderr)
    if hint:
        print(f"hint: {hint}", file=sys.stderr)
    sys.exit(code)
