"""Git helper functions used by the lab CLI."""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, TypeVar
from urllib.parse import urlparse

from . import exec as exec_util
from . import log
from .models import LocalRemoteSet, Remote
from .services.errors import DependencyMissingError, UpstreamError

ParsedT = TypeVar("ParsedT")


def strip_git_suffix(path: str) -> str:
    """Remove a trailing ``.git`` suffix from a path string.

    Args:
        path: Git URL or path.

    Returns:
        Path without a trailing ``.git``.

    Example:
        >>> strip_git_suffix("example/repo.git")
        'example/repo'
    """
    normalized = path.strip().rstrip("/")
    if normalized.lower().endswith(".git"):
        return normalized[: -len(".git")]
    return normalized


def git_command(args: list[str], *, git_path: str | None = None) -> list[str]:
    """Build a git command using an optional executable path."""
    resolved = git_path.strip() if isinstance(git_path, str) else ""
    if not resolved:
        resolved = "git"
    return [resolved, *args]


def normalize_origin_url(value: str) -> str:
    """Normalize a Git remote URL to a ``host/path`` identifier.

    Supports SSH SCP-style URLs and HTTP(S)/SSH/git URLs. Returns an empty
    string for anything else (local paths, ``file://`` URLs).

    Args:
        value: Raw remote URL string.

    Returns:
        Normalized ``host/path`` string or ``""``.

    Example:
        >>> normalize_origin_url("git@gitlab.com:group/repo.git")
        'gitlab.com/group/repo'
    """
    raw = value.strip()
    if not raw:
        return ""

    scp_match = re.match(r"^(?P<user>[^@/]+)@(?P<host>[^:/]+):(?P<path>.+)$", raw)
    if scp_match:
        host = scp_match.group("host").lower()
        path = strip_git_suffix(scp_match.group("path").lstrip("/"))
        return f"{host}/{path}"

    if "://" in raw:
        parsed = urlparse(raw)
        scheme = (parsed.scheme or "").lower()
        host = (parsed.hostname or "").lower()
        path = strip_git_suffix((parsed.path or "").lstrip("/"))
        if scheme in {"http", "https", "ssh", "git"} and host and path:
            return f"{host}/{path}"
    return ""


def path_with_namespace(url: str) -> str | None:
    """Return the ``group/project`` path a remote URL points at.

    Example:
        >>> path_with_namespace("https://gitlab.com/group/sub/repo.git")
        'group/sub/repo'
        >>> path_with_namespace("/srv/repos/local") is None
        True
    """
    normalized = normalize_origin_url(url)
    if "/" not in normalized:
        return None
    path = normalized.split("/", 1)[1]
    return path or None


def _run(
    args: list[str],
    *,
    repo_dir: Path,
    git_path: str | None,
    context: str,
    parser: Callable[[exec_util.CommandResult], ParsedT] = exec_util.parse_nothing,
) -> ParsedT:
    spec = exec_util.CommandSpec(
        request=exec_util.CommandRequest(
            argv=tuple(git_command(["-C", str(repo_dir), *args], git_path=git_path)),
        ),
        parser=parser,
        context=context,
    )
    log.trace(spec.request.display)
    try:
        return exec_util.run_typed(spec)
    except exec_util.CommandExecutionError as exc:
        if exc.result is None:
            raise DependencyMissingError(
                str(exc),
                recovery_hint="install git or set git_path in the lab config",
            ) from exc
        detail = f"failed to {context}"
        if exc.result.output:
            detail = f"{detail}: {exc.result.output}"
        raise UpstreamError(detail) from exc


def git_remotes(repo_dir: Path, *, git_path: str | None = None) -> LocalRemoteSet:
    """Return configured remotes in ``git remote`` listing order."""
    names = _run(
        ["remote"],
        repo_dir=repo_dir,
        git_path=git_path,
        context="list remotes",
        parser=exec_util.parse_stdout_lines,
    )
    remotes: list[Remote] = []
    for name in names:
        url = git_remote_url(repo_dir, name, git_path=git_path)
        remotes.append(Remote(name=name, url=url or ""))
    return tuple(remotes)


def git_remote_url(
    repo_dir: Path, name: str, *, git_path: str | None = None
) -> str | None:
    """Return the fetch URL for ``name``, or ``None`` when it has none."""
    request = exec_util.CommandRequest(
        argv=tuple(
            git_command(
                ["-C", str(repo_dir), "remote", "get-url", name], git_path=git_path
            )
        ),
    )
    result = exec_util.run_with_runner(request)
    if result is None:
        raise DependencyMissingError("missing required command: git")
    if not result.ok:
        return None
    return exec_util.parse_stdout_text(result) or None


def git_is_remote(repo_dir: Path, name: str, *, git_path: str | None = None) -> bool:
    return any(
        remote.name == name for remote in git_remotes(repo_dir, git_path=git_path)
    )


def git_remote_add(
    repo_dir: Path, name: str, url: str, *, git_path: str | None = None
) -> None:
    """Add remote ``name`` pointing at ``url`` and fetch it."""
    _run(
        ["remote", "add", name, url],
        repo_dir=repo_dir,
        git_path=git_path,
        context=f"add remote {name}",
    )
    log.info(f"Updating {name}")
    _run(["fetch", name], repo_dir=repo_dir, git_path=git_path, context=f"fetch {name}")
    log.info(f"new remote: {name}")


def git_branch_exists(repo_dir: Path, branch: str, *, git_path: str | None = None) -> bool:
    request = exec_util.CommandRequest(
        argv=tuple(
            git_command(
                [
                    "-C",
                    str(repo_dir),
                    "show-ref",
                    "--verify",
                    "--quiet",
                    f"refs/heads/{branch}",
                ],
                git_path=git_path,
            )
        ),
    )
    result = exec_util.run_with_runner(request)
    if result is None:
        raise DependencyMissingError("missing required command: git")
    return result.ok


def git_delete_branch(repo_dir: Path, branch: str, *, git_path: str | None = None) -> None:
    _run(
        ["branch", "-D", branch],
        repo_dir=repo_dir,
        git_path=git_path,
        context=f"delete branch {branch}",
    )


def git_fetch(
    repo_dir: Path, remote: str, refspec: str, *, git_path: str | None = None
) -> None:
    _run(
        ["fetch", remote, refspec],
        repo_dir=repo_dir,
        git_path=git_path,
        context=f"fetch {refspec} from {remote}",
    )


def git_checkout(repo_dir: Path, branch: str, *, git_path: str | None = None) -> None:
    _run(
        ["checkout", branch],
        repo_dir=repo_dir,
        git_path=git_path,
        context=f"checkout {branch}",
    )


def git_set_upstream(
    repo_dir: Path, branch: str, tracking_ref: str, *, git_path: str | None = None
) -> None:
    _run(
        ["branch", f"--set-upstream-to={tracking_ref}", branch],
        repo_dir=repo_dir,
        git_path=git_path,
        context=f"set upstream of {branch} to {tracking_ref}",
    )


def git_current_branch(repo_dir: Path, *, git_path: str | None = None) -> str | None:
    """Return the checked-out branch name, or ``None`` on a detached HEAD."""
    branch = _run(
        ["rev-parse", "--abbrev-ref", "HEAD"],
        repo_dir=repo_dir,
        git_path=git_path,
        context="resolve the current branch",
        parser=exec_util.parse_stdout_text,
    )
    if not branch or branch == "HEAD":
        return None
    return branch


@dataclass(frozen=True)
class GitCli:
    """Git executor bound to one repository directory."""

    repo_dir: Path = field(default_factory=Path.cwd)
    git_path: str = "git"

    def list_remotes(self) -> LocalRemoteSet:
        return git_remotes(self.repo_dir, git_path=self.git_path)

    def is_remote(self, name: str) -> bool:
        return git_is_remote(self.repo_dir, name, git_path=self.git_path)

    def path_for_remote(self, name: str) -> str:
        """Return the ``group/project`` path behind remote ``name``."""
        url = git_remote_url(self.repo_dir, name, git_path=self.git_path)
        if not url:
            raise UpstreamError(f"remote {name} has no URL")
        path = path_with_namespace(url)
        if path is None:
            raise UpstreamError(f"cannot determine project path from remote {name}: {url}")
        return path

    def add_remote(self, name: str, url: str, base_path: Path | None = None) -> None:
        git_remote_add(base_path or self.repo_dir, name, url, git_path=self.git_path)

    def branch_exists(self, name: str) -> bool:
        return git_branch_exists(self.repo_dir, name, git_path=self.git_path)

    def delete_branch(self, name: str) -> None:
        git_delete_branch(self.repo_dir, name, git_path=self.git_path)

    def fetch(self, remote: str, refspec: str) -> None:
        git_fetch(self.repo_dir, remote, refspec, git_path=self.git_path)

    def checkout(self, branch: str) -> None:
        git_checkout(self.repo_dir, branch, git_path=self.git_path)

    def set_upstream(self, branch: str, tracking_ref: str) -> None:
        git_set_upstream(self.repo_dir, branch, tracking_ref, git_path=self.git_path)

    def current_branch(self) -> str | None:
        return git_current_branch(self.repo_dir, git_path=self.git_path)
