"""Check out a merge request into a local branch.

The workflow is linear: resolve the merge request, pick the local branch name,
refuse (or, with force, replace) an existing branch, optionally resolve a
tracking remote, fetch ``refs/merge-requests/<iid>/head`` into the branch,
check it out, and optionally set its upstream. Any failure stops the
workflow; completed git steps are not rolled back.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, PositiveInt

from ... import log
from ...models import CheckoutOptions, CheckoutPlan, MergeRequestRef
from ..base import BaseService
from ..errors import ConflictError, ValidationFailedError
from .ports import GitBackend, MergeRequestApi
from .resolve import ResolveMergeRequestRequest, ResolveMergeRequestService
from .tracking import ResolveTrackingRemoteRequest, ResolveTrackingRemoteService


class CheckoutMergeRequestRequest(BaseModel):
    """Input contract for the checkout workflow.

    Attributes:
        project: Project path or id of the target remote.
        target_remote: Remote the merge request ref is fetched from.
        mr_id: Merge request number; mutually exclusive with ``source_branch``.
        source_branch: Source branch of an open merge request.
        options: Per-invocation checkout options.
        base_path: Repository directory for a newly added tracking remote.
    """

    model_config = ConfigDict(frozen=True)

    project: int | str
    target_remote: str
    mr_id: PositiveInt | None = None
    source_branch: str | None = None
    options: CheckoutOptions = CheckoutOptions()
    base_path: Path | None = None

    @classmethod
    def for_ref(
        cls,
        ref: MergeRequestRef,
        *,
        project: int | str,
        options: CheckoutOptions | None = None,
        base_path: Path | None = None,
    ) -> CheckoutMergeRequestRequest:
        """Build a request checking out ``ref`` from its own remote."""
        return cls(
            project=project,
            target_remote=ref.remote_name,
            mr_id=ref.mr_id,
            options=options or CheckoutOptions(),
            base_path=base_path,
        )


@dataclass(frozen=True)
class CheckoutOutcome:
    """Outcome payload for a completed checkout.

    Args:
        branch: Local branch that is now checked out.
        mr_id: Merge request number that was checked out.
        tracking_remote: Remote the upstream ref lives on, if tracking.
        tracking_ref: Upstream ref configured for the branch, if any.
        replaced_existing: Whether an existing local branch was deleted.
        added_remote: Name of a remote added for tracking, if any.
    """

    branch: str
    mr_id: int
    tracking_remote: str | None = None
    tracking_ref: str | None = None
    replaced_existing: bool = False
    added_remote: str | None = None


def merge_request_refspec(mr_id: int, branch: str) -> str:
    """Return the fetch refspec placing MR ``mr_id`` head into ``branch``.

    Example:
        >>> merge_request_refspec(10, "feature")
        'refs/merge-requests/10/head:feature'
    """
    return f"refs/merge-requests/{mr_id}/head:{branch}"


class CheckoutMergeRequestService(BaseService[CheckoutMergeRequestRequest, CheckoutOutcome]):
    """Orchestrate merge request checkout against GitLab and local git."""

    def __init__(self, *, api: MergeRequestApi, git: GitBackend) -> None:
        self._git = git
        self._resolve = ResolveMergeRequestService(api=api)
        self._tracking = ResolveTrackingRemoteService(api=api, git=git)

    def _run(self, request: CheckoutMergeRequestRequest) -> CheckoutOutcome:
        options = request.options
        merge_request = self._resolve(
            ResolveMergeRequestRequest(
                project=request.project,
                mr_id=request.mr_id,
                source_branch=request.source_branch,
            )
        )

        plan = CheckoutPlan(
            local_branch=options.branch or merge_request.source_branch,
            target_remote=request.target_remote,
        )
        if not plan.local_branch:
            raise ValidationFailedError(f"MR !{merge_request.iid} has no source branch")
        log.info(f"branch name: {plan.local_branch}")

        exists = self._git.branch_exists(plan.local_branch)
        if exists and not options.force:
            raise ConflictError(
                f"mr {merge_request.iid} branch {plan.local_branch} already exists.",
                recovery_hint="pass --force to replace it or --branch to pick another name",
            )

        added_remote = None
        if options.track:
            tracking = self._tracking(
                ResolveTrackingRemoteRequest(
                    merge_request=merge_request,
                    remote=options.remote,
                    https=options.https,
                    base_path=request.base_path,
                )
            )
            plan.tracking_remote = tracking.remote
            plan.tracking_ref = tracking.tracking_ref
            if tracking.added:
                added_remote = tracking.remote

        if exists:
            self._git.delete_branch(plan.local_branch)
            log.debug(f"deleted existing branch {plan.local_branch}")

        self._git.fetch(
            plan.target_remote, merge_request_refspec(merge_request.iid, plan.local_branch)
        )
        self._git.checkout(plan.local_branch)

        if plan.tracking_ref:
            self._git.set_upstream(plan.local_branch, plan.tracking_ref)

        return CheckoutOutcome(
            branch=plan.local_branch,
            mr_id=merge_request.iid,
            tracking_remote=plan.tracking_remote,
            tracking_ref=plan.tracking_ref,
            replaced_existing=exists,
            added_remote=added_remote,
        )
