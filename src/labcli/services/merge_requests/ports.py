"""Typed ports used by merge request services."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from ...models import LocalRemoteSet, MergeRequestRecord, ProjectRecord

ProjectRef = int | str


class MergeRequestApi(Protocol):
    """GitLab operations required to resolve merge requests and projects."""

    def find_project(self, identifier: ProjectRef) -> ProjectRecord: ...

    def get_project(self, project_id: int) -> ProjectRecord: ...

    def list_merge_requests(
        self, project: ProjectRef, *, limit: int = 1, **filters: object
    ) -> list[MergeRequestRecord]: ...


class GitBackend(Protocol):
    """Local git operations required by the checkout workflow."""

    def list_remotes(self) -> LocalRemoteSet: ...

    def path_for_remote(self, name: str) -> str: ...

    def add_remote(self, name: str, url: str, base_path: Path | None = None) -> None: ...

    def branch_exists(self, name: str) -> bool: ...

    def delete_branch(self, name: str) -> None: ...

    def fetch(self, remote: str, refspec: str) -> None: ...

    def checkout(self, branch: str) -> None: ...

    def set_upstream(self, branch: str, tracking_ref: str) -> None: ...
