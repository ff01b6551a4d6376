"""Pydantic models for GitLab records, git remotes, and lab configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    PositiveInt,
    ValidationInfo,
    field_validator,
)

TODO_TYPE_VALUES = ("all", "mr", "issue")
TodoType = Literal["all", "mr", "issue"]


class MergeRequestRef(BaseModel):
    """Merge request identity parsed from command-line arguments.

    Attributes:
        remote_name: Git remote the MR number was given against.
        mr_id: Per-project merge request number (IID).

    Example:
        >>> MergeRequestRef(remote_name="origin", mr_id=10)
        MergeRequestRef(...)
    """

    model_config = ConfigDict(frozen=True)

    remote_name: str
    mr_id: PositiveInt


class MergeRequestRecord(BaseModel):
    """Read-only view of a GitLab merge request.

    Attributes:
        iid: Per-project merge request number.
        source_branch: Branch the MR was opened from.
        source_project_id: Project holding the source branch (forks differ).
        author_username: Username of the MR author.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    iid: int
    source_branch: str
    source_project_id: int
    author_username: str
    title: str = ""
    state: str = ""
    draft: bool = False
    web_url: str = ""


class ProjectRecord(BaseModel):
    """Read-only view of a GitLab project."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    path_with_namespace: str
    ssh_url_to_repo: str = ""
    http_url_to_repo: str = ""
    web_url: str = ""

    def url_to_repo(self, *, https: bool = False) -> str:
        """Return the clone URL for the requested protocol."""
        return self.http_url_to_repo if https else self.ssh_url_to_repo


class PipelineRecord(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    ref: str = ""
    status: str = ""
    web_url: str = ""


class TodoRecord(BaseModel):
    """Read-only view of a GitLab todo item."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    target_type: str
    target_url: str
    action_name: str
    project_id: int | None = None
    author_name: str = ""
    author_username: str = ""


class IssueRecord(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    iid: int
    title: str = ""
    state: str = ""


class Remote(BaseModel):
    """A configured git remote.

    Example:
        >>> Remote(name="origin", url="git@gitlab.com:group/project.git").name
        'origin'
    """

    model_config = ConfigDict(frozen=True)

    name: str
    url: str


LocalRemoteSet = tuple[Remote, ...]


class CheckoutOptions(BaseModel):
    """Per-invocation options for ``lab mr checkout``.

    Attributes:
        branch: Local branch name override; defaults to the MR source branch.
        remote: Tracking remote override; only used with ``track``.
        track: Resolve a tracking remote and set the branch upstream.
        force: Delete an existing local branch of the same name.
        https: Use the HTTPS clone URL when a new remote is added.
    """

    model_config = ConfigDict(frozen=True)

    branch: str = ""
    remote: str = ""
    track: bool = False
    force: bool = False
    https: bool = False

    @field_validator("branch", "remote", mode="before")
    @classmethod
    def normalize_name(cls, value: object) -> object:
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip()
        return value


@dataclass
class CheckoutPlan:
    """Working state built up while checking out one merge request."""

    local_branch: str
    target_remote: str
    tracking_remote: str | None = None
    tracking_ref: str | None = None


class LabConfig(BaseModel):
    """Resolved lab configuration.

    Attributes:
        host: GitLab base URL.
        token: Personal access token used for API calls.
        user: Username of the token owner; used to render ``you`` in todos.
        default_remote: Remote used when none is given on the command line.
        git_path: Git executable path.

    Example:
        >>> LabConfig(host="https://gitlab.example.com/").host
        'https://gitlab.example.com'
    """

    model_config = ConfigDict(extra="ignore")

    host: str = "https://gitlab.com"
    token: str = ""
    user: str = ""
    default_remote: str = "origin"
    git_path: str = "git"

    @field_validator("host", mode="before")
    @classmethod
    def normalize_host(cls, value: object) -> object:
        if value is None:
            return "https://gitlab.com"
        if isinstance(value, str):
            normalized = value.strip().rstrip("/")
            return normalized or "https://gitlab.com"
        return value

    @field_validator("default_remote", "git_path", mode="before")
    @classmethod
    def normalize_required_name(cls, value: object, info: ValidationInfo) -> object:
        fallback = "origin" if info.field_name == "default_remote" else "git"
        if value is None:
            return fallback
        if isinstance(value, str):
            return value.strip() or fallback
        return value
