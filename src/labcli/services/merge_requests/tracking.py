"""Resolve (or provision) the local remote that tracks a merge request's source."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from ... import log
from ...models import LocalRemoteSet, MergeRequestRecord
from ..base import BaseService
from ..errors import ServiceFailure
from .ports import GitBackend, MergeRequestApi


class ResolveTrackingRemoteRequest(BaseModel):
    """Input contract for tracking remote resolution.

    Attributes:
        merge_request: The merge request whose source should be tracked.
        remote: Explicit remote name; skips discovery when non-empty.
        https: Use the HTTPS clone URL when a remote has to be added.
        base_path: Repository directory a new remote is added in.
    """

    model_config = ConfigDict(frozen=True)

    merge_request: MergeRequestRecord
    remote: str = ""
    https: bool = False
    base_path: Path | None = None


@dataclass(frozen=True)
class TrackingRemote:
    """Outcome payload for tracking remote resolution.

    Args:
        remote: Local remote name pointing at the source project.
        tracking_ref: ``remote/source_branch`` used as the branch upstream.
        added: Whether the remote was created by this resolution.
    """

    remote: str
    tracking_ref: str
    added: bool = False


def tracking_ref_for(remote: str, source_branch: str) -> str:
    """Return the upstream ref for ``source_branch`` on ``remote``.

    Example:
        >>> tracking_ref_for("alice", "feature")
        'alice/feature'
    """
    return f"{remote}/{source_branch}"


def match_remote(
    remotes: LocalRemoteSet,
    project_path: str,
    path_for_remote: Callable[[str], str],
) -> str | None:
    """Return the first remote whose project path equals ``project_path``.

    Remotes whose path cannot be determined are skipped.
    """
    for remote in remotes:
        try:
            path = path_for_remote(remote.name)
        except ServiceFailure as exc:
            log.debug(f"skipping remote {remote.name}: {exc}")
            continue
        if path == project_path:
            return remote.name
    return None


class ResolveTrackingRemoteService(
    BaseService[ResolveTrackingRemoteRequest, TrackingRemote]
):
    """Find a local remote for the MR source project, adding one if needed."""

    def __init__(self, *, api: MergeRequestApi, git: GitBackend) -> None:
        self._api = api
        self._git = git

    def _run(self, request: ResolveTrackingRemoteRequest) -> TrackingRemote:
        merge_request = request.merge_request
        if request.remote:
            return TrackingRemote(
                remote=request.remote,
                tracking_ref=tracking_ref_for(request.remote, merge_request.source_branch),
            )

        project = self._api.get_project(merge_request.source_project_id)
        remotes = self._git.list_remotes()
        name = match_remote(remotes, project.path_with_namespace, self._git.path_for_remote)
        if name is not None:
            log.debug(f"tracking remote {name} matches {project.path_with_namespace}")
            return TrackingRemote(
                remote=name,
                tracking_ref=tracking_ref_for(name, merge_request.source_branch),
            )

        name = merge_request.author_username
        url = project.url_to_repo(https=request.https)
        self._git.add_remote(name, url, request.base_path)
        return TrackingRemote(
            remote=name,
            tracking_ref=tracking_ref_for(name, merge_request.source_branch),
            added=True,
        )
