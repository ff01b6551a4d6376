"""Typed GitLab API adapter used by lab commands.

Wraps ``python-gitlab`` and converts its objects into the read-only records in
``labcli.models``. Library and transport errors surface as ``UpstreamError``;
a 404 on a direct lookup surfaces as ``NotFoundError``.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

import gitlab
import requests
from gitlab.exceptions import GitlabError

from . import log
from .models import (
    IssueRecord,
    LabConfig,
    MergeRequestRecord,
    PipelineRecord,
    ProjectRecord,
    TodoRecord,
)
from .services.errors import DependencyMissingError, NotFoundError, UpstreamError

ProjectRef = int | str

TODO_TARGET_TYPES = {"mr": "MergeRequest", "issue": "Issue"}


@contextmanager
def _upstream(context: str, *, not_found: str | None = None) -> Iterator[None]:
    try:
        yield
    except GitlabError as exc:
        if not_found is not None and exc.response_code == 404:
            raise NotFoundError(not_found) from exc
        raise UpstreamError(f"{context}: {exc.error_message or exc}") from exc
    except requests.RequestException as exc:
        raise UpstreamError(f"{context}: {exc}") from exc


def _attributes(obj: Any) -> dict[str, Any]:
    attributes = getattr(obj, "attributes", None)
    if isinstance(attributes, dict):
        return attributes
    return dict(obj)


def project_record(obj: Any) -> ProjectRecord:
    return ProjectRecord.model_validate(_attributes(obj))


def merge_request_record(obj: Any) -> MergeRequestRecord:
    payload = _attributes(obj)
    author = payload.get("author") or {}
    draft = payload.get("draft")
    if draft is None:
        draft = payload.get("work_in_progress", False)
    return MergeRequestRecord.model_validate(
        {
            **payload,
            "author_username": author.get("username", ""),
            "draft": bool(draft),
        }
    )


def pipeline_record(obj: Any) -> PipelineRecord:
    return PipelineRecord.model_validate(_attributes(obj))


def todo_record(obj: Any) -> TodoRecord:
    payload = _attributes(obj)
    project = payload.get("project") or {}
    author = payload.get("author") or {}
    return TodoRecord.model_validate(
        {
            **payload,
            "project_id": project.get("id"),
            "author_name": author.get("name", ""),
            "author_username": author.get("username", ""),
        }
    )


@dataclass
class GitlabClient:
    """GitLab REST client bound to one host and token."""

    host: str
    token: str
    _gl: gitlab.Gitlab | None = field(default=None, init=False, repr=False)

    @classmethod
    def from_config(cls, config: LabConfig) -> GitlabClient:
        if not config.token:
            raise DependencyMissingError(
                "missing GitLab token",
                recovery_hint="set LAB_CORE_TOKEN or add token to the lab config",
            )
        return cls(host=config.host, token=config.token)

    @property
    def gl(self) -> gitlab.Gitlab:
        if self._gl is None:
            self._gl = gitlab.Gitlab(self.host, private_token=self.token)
        return self._gl

    def _project(self, project: ProjectRef) -> Any:
        return self.gl.projects.get(project, lazy=True)

    def find_project(self, identifier: ProjectRef) -> ProjectRecord:
        """Resolve a project path or numeric id to its record."""
        log.debug(f"looking up project {identifier}")
        with _upstream(
            f"failed to look up project {identifier}",
            not_found=f"project {identifier} not found",
        ):
            return project_record(self.gl.projects.get(identifier))

    def get_project(self, project_id: int) -> ProjectRecord:
        return self.find_project(project_id)

    def list_merge_requests(
        self, project: ProjectRef, *, limit: int = 1, **filters: object
    ) -> list[MergeRequestRecord]:
        """List merge requests of ``project`` matching ``filters``.

        ``limit`` caps the page size; a single page is requested.
        """
        with _upstream(f"failed to list merge requests for {project}"):
            items = self._project(project).mergerequests.list(
                per_page=limit, get_all=False, **filters
            )
            return [merge_request_record(item) for item in items[:limit]]

    def get_merge_request(self, project: ProjectRef, iid: int) -> MergeRequestRecord:
        with _upstream(
            f"failed to get merge request !{iid}", not_found=f"MR !{iid} not found"
        ):
            return merge_request_record(self._project(project).mergerequests.get(iid))

    def get_issue(self, project: ProjectRef, iid: int) -> IssueRecord:
        with _upstream(f"failed to get issue #{iid}", not_found=f"issue #{iid} not found"):
            return IssueRecord.model_validate(
                _attributes(self._project(project).issues.get(iid))
            )

    def create_pipeline(self, project: ProjectRef, ref: str) -> PipelineRecord:
        with _upstream(f"failed to create pipeline on {ref}"):
            return pipeline_record(self._project(project).pipelines.create({"ref": ref}))

    def create_merge_request_pipeline(
        self, project: ProjectRef, iid: int
    ) -> PipelineRecord:
        with _upstream(f"failed to create pipeline for MR !{iid}"):
            merge_request = self._project(project).mergerequests.get(iid, lazy=True)
            return pipeline_record(merge_request.pipelines.create({}))

    def trigger_pipeline(
        self,
        project: ProjectRef,
        ref: str,
        *,
        token: str,
        variables: dict[str, str] | None = None,
    ) -> PipelineRecord:
        with _upstream(f"failed to trigger pipeline on {ref}"):
            pipeline = self._project(project).trigger_pipeline(
                ref, token, variables=variables or {}
            )
            return pipeline_record(pipeline)

    def list_todos(
        self, *, target_type: str | None = None, limit: int = -1
    ) -> list[TodoRecord]:
        """List pending todos; ``limit < 0`` fetches every page."""
        filters: dict[str, object] = {}
        if target_type:
            filters["type"] = target_type
        with _upstream("failed to list todos"):
            if limit < 0:
                items = self.gl.todos.list(get_all=True, **filters)
            else:
                items = self.gl.todos.list(per_page=limit, get_all=False, **filters)[:limit]
            return [todo_record(item) for item in items]
