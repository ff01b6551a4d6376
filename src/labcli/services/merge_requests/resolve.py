"""Resolve a merge request number or source branch to a merge request record."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, PositiveInt, model_validator

from ...models import MergeRequestRecord
from ..base import BaseService
from ..errors import NotFoundError
from .ports import MergeRequestApi


class ResolveMergeRequestRequest(BaseModel):
    """Input contract for merge request resolution.

    Exactly one of ``mr_id`` and ``source_branch`` must be set.

    Attributes:
        project: Project path or id the merge request belongs to.
        mr_id: Merge request number.
        source_branch: Source branch of an open merge request.
    """

    model_config = ConfigDict(frozen=True)

    project: int | str
    mr_id: PositiveInt | None = None
    source_branch: str | None = None

    @model_validator(mode="after")
    def require_one_selector(self) -> ResolveMergeRequestRequest:
        if (self.mr_id is None) == (not self.source_branch):
            raise ValueError("exactly one of mr_id and source_branch is required")
        return self


class ResolveMergeRequestService(BaseService[ResolveMergeRequestRequest, MergeRequestRecord]):
    """Fetch exactly one merge request record from GitLab."""

    def __init__(self, *, api: MergeRequestApi) -> None:
        self._api = api

    def _run(self, request: ResolveMergeRequestRequest) -> MergeRequestRecord:
        if request.mr_id is not None:
            records = self._api.list_merge_requests(
                request.project, limit=1, iids=[request.mr_id]
            )
            if not records:
                raise NotFoundError(f"MR !{request.mr_id} not found")
            return records[0]

        records = self._api.list_merge_requests(
            request.project,
            limit=1,
            source_branch=request.source_branch,
            state="opened",
            order_by="created_at",
            sort="desc",
        )
        if not records:
            raise NotFoundError(
                f"no open merge request for branch {request.source_branch}"
            )
        return records[0]
