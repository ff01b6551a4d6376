"""CI pipeline commands."""

from __future__ import annotations

from .. import args as args_util
from .. import log
from ..gitlab_api import GitlabClient
from ..io import say
from ..services.errors import ValidationFailedError
from ..services.merge_requests import ResolveMergeRequestRequest, ResolveMergeRequestService
from . import runtime


def _project_override(api: GitlabClient, project: str | None) -> int | None:
    if not project:
        return None
    log.warning("--project is deprecated; the project is inferred from the remote")
    return api.find_project(project).id


def create_pipeline(args: object) -> None:
    """Create a pipeline for a branch or a merge request and print its URL."""
    lab_config = runtime.load_config()
    git = runtime.git_for(lab_config)
    api = runtime.api_for(lab_config)
    positional = list(getattr(args, "args", []) or [])
    override = _project_override(api, getattr(args, "project", None))

    if getattr(args, "merge_request", False):
        selector = args_util.parse_remote_and_mr(
            positional, git=git, default_remote=lab_config.default_remote
        )
        project = override or selector.target.project
        mr_id = selector.mr_id
        if mr_id is None:
            merge_request = ResolveMergeRequestService(api=api)(
                ResolveMergeRequestRequest(project=project, source_branch=selector.branch)
            )
            mr_id = merge_request.iid
        pipeline = api.create_merge_request_pipeline(project, mr_id)
    else:
        selector = args_util.parse_remote_and_branch(
            positional, git=git, default_remote=lab_config.default_remote
        )
        pipeline = api.create_pipeline(override or selector.target.project, selector.branch)
    say(pipeline.web_url)


def trigger_pipeline(args: object) -> None:
    """Run a pipeline trigger for a branch and print the pipeline URL."""
    lab_config = runtime.load_config()
    git = runtime.git_for(lab_config)
    api = runtime.api_for(lab_config)
    variables = args_util.parse_ci_variables(list(getattr(args, "variable", []) or []))
    selector = args_util.parse_remote_and_branch(
        list(getattr(args, "args", []) or []),
        git=git,
        default_remote=lab_config.default_remote,
    )
    override = _project_override(api, getattr(args, "project", None))
    token = getattr(args, "token", None) or ""
    if not token:
        raise ValidationFailedError(
            "missing pipeline trigger token",
            recovery_hint="pass --token or set CI_JOB_TOKEN",
        )
    pipeline = api.trigger_pipeline(
        override or selector.target.project,
        selector.branch,
        token=token,
        variables=variables,
    )
    say(pipeline.web_url)
