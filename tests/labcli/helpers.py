"""In-memory GitLab and git ports for merge request service tests."""

from __future__ import annotations

from pathlib import Path

from labcli.models import LocalRemoteSet, MergeRequestRecord, ProjectRecord, Remote
from labcli.services import NotFoundError, UpstreamError

MUTATIONS = {"add_remote", "delete_branch", "fetch", "checkout", "set_upstream"}


def merge_request(
    iid: int = 10,
    *,
    source_branch: str = "feature",
    source_project_id: int = 42,
    author: str = "alice",
) -> MergeRequestRecord:
    return MergeRequestRecord(
        iid=iid,
        source_branch=source_branch,
        source_project_id=source_project_id,
        author_username=author,
    )


def project(
    project_id: int = 42, path: str = "alice/project"
) -> ProjectRecord:
    return ProjectRecord(
        id=project_id,
        path_with_namespace=path,
        ssh_url_to_repo=f"git@gitlab.com:{path}.git",
        http_url_to_repo=f"https://gitlab.com/{path}.git",
    )


class FakeApi:
    def __init__(
        self,
        merge_requests: list[MergeRequestRecord] | None = None,
        projects: list[ProjectRecord] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.merge_requests = merge_requests or []
        self.projects = {record.id: record for record in projects or []}
        self.error = error
        self.calls: list[tuple[str, object, dict[str, object]]] = []

    def find_project(self, identifier: int | str) -> ProjectRecord:
        for record in self.projects.values():
            if identifier in (record.id, record.path_with_namespace):
                return record
        raise NotFoundError(f"project {identifier} not found")

    def get_project(self, project_id: int) -> ProjectRecord:
        self.calls.append(("get_project", project_id, {}))
        return self.find_project(project_id)

    def list_merge_requests(
        self, project: int | str, *, limit: int = 1, **filters: object
    ) -> list[MergeRequestRecord]:
        self.calls.append(("list_merge_requests", project, {"limit": limit, **filters}))
        if self.error is not None:
            raise self.error
        matches = self.merge_requests
        if "iids" in filters:
            iids = set(filters["iids"])  # type: ignore[arg-type]
            matches = [record for record in matches if record.iid in iids]
        if "source_branch" in filters:
            matches = [
                record
                for record in matches
                if record.source_branch == filters["source_branch"]
            ]
        return matches[:limit]


class FakeGitBackend:
    def __init__(
        self,
        remotes: dict[str, str] | None = None,
        branches: set[str] | None = None,
        fail_on: dict[str, str] | None = None,
    ) -> None:
        self.remotes = dict(remotes if remotes is not None else {"origin": "group/project"})
        self.branches = set(branches or ())
        self.fail_on = fail_on or {}
        self.calls: list[tuple[object, ...]] = []

    def _record(self, name: str, *args: object) -> None:
        self.calls.append((name, *args))
        if name in self.fail_on:
            raise UpstreamError(self.fail_on[name])

    @property
    def mutations(self) -> list[tuple[object, ...]]:
        return [call for call in self.calls if call[0] in MUTATIONS]

    def list_remotes(self) -> LocalRemoteSet:
        self._record("list_remotes")
        return tuple(
            Remote(name=name, url=f"git@gitlab.com:{path}.git")
            for name, path in self.remotes.items()
        )

    def path_for_remote(self, name: str) -> str:
        path = self.remotes[name]
        if not path:
            raise UpstreamError(f"cannot determine project path from remote {name}")
        return path

    def add_remote(self, name: str, url: str, base_path: Path | None = None) -> None:
        self._record("add_remote", name, url)
        self.remotes[name] = url

    def branch_exists(self, name: str) -> bool:
        self._record("branch_exists", name)
        return name in self.branches

    def delete_branch(self, name: str) -> None:
        self._record("delete_branch", name)
        self.branches.discard(name)

    def fetch(self, remote: str, refspec: str) -> None:
        self._record("fetch", remote, refspec)
        self.branches.add(refspec.split(":", 1)[1])

    def checkout(self, branch: str) -> None:
        self._record("checkout", branch)

    def set_upstream(self, branch: str, tracking_ref: str) -> None:
        self._record("set_upstream", branch, tracking_ref)


class FakeRepo(FakeGitBackend):
    """Git backend that also answers the CLI's remote and branch queries."""

    repo_dir = Path("/repo")

    def __init__(self, *args: object, current: str | None = "feature", **kwargs: object):
        super().__init__(*args, **kwargs)  # type: ignore[arg-type]
        self.current = current

    def is_remote(self, name: str) -> bool:
        return name in self.remotes

    def current_branch(self) -> str | None:
        return self.current
