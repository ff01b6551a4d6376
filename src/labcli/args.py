"""Positional argument parsing shared by lab commands.

Commands accept an optional leading git remote followed by a merge request
number or branch name. The remote is mapped to the GitLab project path behind
its URL so API calls can address the project directly.
"""

from __future__ import annotations

import csv
from dataclasses import dataclass
from typing import Protocol, Sequence

from .models import MergeRequestRef
from .services.errors import ValidationFailedError


class RemoteGit(Protocol):
    def is_remote(self, name: str) -> bool: ...

    def path_for_remote(self, name: str) -> str: ...

    def current_branch(self) -> str | None: ...


@dataclass(frozen=True)
class RemoteTarget:
    """A git remote and the GitLab project path behind it."""

    remote: str
    project: str


@dataclass(frozen=True)
class MergeRequestSelector:
    """Target remote plus either a merge request number or a source branch."""

    target: RemoteTarget
    mr_id: int | None = None
    branch: str | None = None

    @property
    def ref(self) -> MergeRequestRef | None:
        """The remote and number pair, when a number was given."""
        if self.mr_id is None:
            return None
        return MergeRequestRef(remote_name=self.target.remote, mr_id=self.mr_id)


@dataclass(frozen=True)
class BranchSelector:
    target: RemoteTarget
    branch: str


def parse_id(value: str) -> int | None:
    """Return ``value`` as a merge request number, or ``None`` if not numeric.

    Example:
        >>> parse_id("10")
        10
        >>> parse_id("feature") is None
        True
    """
    text = value.strip().lstrip("!")
    if not (text.isascii() and text.isdigit()):
        return None
    number = int(text)
    if number <= 0:
        raise ValidationFailedError(f"invalid merge request id: {value}")
    return number


def resolve_remote(git: RemoteGit, remote: str) -> RemoteTarget:
    """Map ``remote`` to the project path behind its URL."""
    return RemoteTarget(remote=remote, project=git.path_for_remote(remote))


def _require_remote(git: RemoteGit, name: str) -> None:
    if not git.is_remote(name):
        raise ValidationFailedError(f"{name} is not a valid remote")


def _current_branch(git: RemoteGit) -> str:
    branch = git.current_branch()
    if not branch:
        raise ValidationFailedError(
            "cannot determine the current branch",
            recovery_hint="check out a branch or pass one explicitly",
        )
    return branch


def _check_arity(args: Sequence[str], *, minimum: int, maximum: int = 2) -> None:
    if not minimum <= len(args) <= maximum:
        raise ValidationFailedError(
            f"expected between {minimum} and {maximum} arguments, got {len(args)}"
        )


def parse_remote_and_mr(
    args: Sequence[str],
    *,
    git: RemoteGit,
    default_remote: str,
    minimum: int = 0,
) -> MergeRequestSelector:
    """Parse ``[remote] [<id or branch>]``.

    With two arguments the first must be a configured remote. A single
    argument is a merge request number, a remote (selecting the merge request
    of the current branch), or a source branch name. No arguments select the
    merge request of the current branch on the default remote.
    """
    _check_arity(args, minimum=minimum)
    if len(args) == 2:
        _require_remote(git, args[0])
        remote, selector = args[0], args[1]
    elif len(args) == 1:
        selector = args[0]
        if parse_id(selector) is None and git.is_remote(selector):
            remote, selector = selector, ""
        else:
            remote = default_remote
    else:
        remote, selector = default_remote, ""

    target = resolve_remote(git, remote)
    if not selector:
        return MergeRequestSelector(target=target, branch=_current_branch(git))
    mr_id = parse_id(selector)
    if mr_id is not None:
        return MergeRequestSelector(target=target, mr_id=mr_id)
    return MergeRequestSelector(target=target, branch=selector)


def parse_remote_and_id(
    args: Sequence[str], *, git: RemoteGit, default_remote: str
) -> MergeRequestSelector:
    """Parse ``[remote] <id or branch>``: one or two arguments."""
    return parse_remote_and_mr(args, git=git, default_remote=default_remote, minimum=1)


def parse_remote_and_branch(
    args: Sequence[str], *, git: RemoteGit, default_remote: str
) -> BranchSelector:
    """Parse ``[remote] [branch]``; a missing branch means the current one."""
    _check_arity(args, minimum=0)
    if len(args) == 2:
        _require_remote(git, args[0])
        remote, branch = args[0], args[1]
    elif len(args) == 1:
        if git.is_remote(args[0]):
            remote, branch = args[0], ""
        else:
            remote, branch = default_remote, args[0]
    else:
        remote, branch = default_remote, ""
    return BranchSelector(
        target=resolve_remote(git, remote),
        branch=branch or _current_branch(git),
    )


def _split_pairs(values: Sequence[str]) -> list[str]:
    pairs: list[str] = []
    for value in values:
        for row in csv.reader([value]):
            pairs.extend(row)
    return pairs


def parse_ci_variables(values: Sequence[str]) -> dict[str, str]:
    """Parse ``key=value`` pipeline variables.

    Each value may hold several comma-separated pairs; quote a pair to keep a
    comma in its value.

    Example:
        >>> parse_ci_variables(["foo=bar", "url=a=b"])
        {'foo': 'bar', 'url': 'a=b'}
        >>> parse_ci_variables(['a=1,b=2', '"c=x,y"'])
        {'a': '1', 'b': '2', 'c': 'x,y'}
    """
    variables: dict[str, str] = {}
    for value in _split_pairs(values):
        key, sep, rest = value.partition("=")
        if not sep:
            raise ValidationFailedError(
                f'Invalid Variable: "{value}", Variables must be in the format key=value'
            )
        variables[key] = rest
    return variables
