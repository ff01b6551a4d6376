"""Merge request commands."""

from __future__ import annotations

from .. import args as args_util
from .. import log
from ..models import CheckoutOptions
from ..services.merge_requests import (
    CheckoutMergeRequestRequest,
    CheckoutMergeRequestService,
)
from . import runtime


def checkout_merge_request(args: object) -> None:
    """Fetch and check out a merge request as a local branch.

    Args:
        args: Namespace with ``args`` (positional ``[remote] <id or branch>``),
            ``branch``, ``remote``, ``track``, ``force`` and ``https``.
    """
    lab_config = runtime.load_config()
    git = runtime.git_for(lab_config)
    selector = args_util.parse_remote_and_id(
        list(getattr(args, "args", []) or []),
        git=git,
        default_remote=lab_config.default_remote,
    )
    options = CheckoutOptions(
        branch=getattr(args, "branch", None),
        remote=getattr(args, "remote", None),
        track=bool(getattr(args, "track", False)),
        force=bool(getattr(args, "force", False)),
        https=bool(getattr(args, "https", False)),
    )
    service = CheckoutMergeRequestService(api=runtime.api_for(lab_config), git=git)
    if selector.ref is not None:
        request = CheckoutMergeRequestRequest.for_ref(
            selector.ref,
            project=selector.target.project,
            options=options,
            base_path=git.repo_dir,
        )
    else:
        request = CheckoutMergeRequestRequest(
            project=selector.target.project,
            target_remote=selector.target.remote,
            source_branch=selector.branch,
            options=options,
            base_path=git.repo_dir,
        )
    outcome = service(request)
    if outcome.added_remote:
        log.info(f"added remote {outcome.added_remote}")
    if outcome.tracking_ref:
        log.info(f"tracking {outcome.tracking_ref}")
    log.success(f"checked out MR !{outcome.mr_id} as {outcome.branch}")
