"""Todo listing command."""

from __future__ import annotations

from rich.text import Text

from .. import log
from ..gitlab_api import TODO_TARGET_TYPES, GitlabClient
from ..io import say
from ..models import TodoRecord
from ..services.errors import UpstreamError
from . import runtime

PLAIN_TARGET_TYPES = {"DesignManagement::Design", "AlertManagement::Alert"}

_STATE_LABELS = {
    "opened": ("open  ", "green"),
    "merged": ("merged", "cyan"),
    "draft": ("draft ", "green"),
}


def parse_number(value: object) -> int:
    """Return the requested todo count; anything non-numeric means all.

    Example:
        >>> parse_number("5"), parse_number("all")
        (5, -1)
    """
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return -1


def target_type_for(value: str | None) -> str | None:
    """Map a ``--type`` value to a GitLab todo target type.

    Example:
        >>> target_type_for("MR"), target_type_for("all")
        ('MergeRequest', None)
    """
    return TODO_TARGET_TYPES.get((value or "").strip().lower())


def describe_action(action_name: str, name: str) -> str:
    if action_name == "approval_required":
        return f"(approval requested by {name})"
    if action_name == "assigned":
        return f"(assigned to you by {name})"
    if action_name == "build_failed":
        return "(build failed)"
    if action_name == "directly_addressed":
        return f"({name} directly addressed you)"
    if action_name == "marked":
        return "(Todo Entry added by you)"
    if action_name == "mentioned":
        return f"({name} mentioned you)"
    if action_name == "merge_train_removed":
        return "(Merge Train was removed)"
    if action_name == "review_requested":
        return f"(review requested by {name})"
    if action_name == "unmergeable":
        return "(Cannot be merged)"
    return f"Unknown action {action_name}"


def target_iid(todo: TodoRecord) -> int:
    """Extract the MR or issue number from a todo target URL."""
    delim = "issues/" if todo.target_type == "Issue" else "merge_requests/"
    _, sep, tail = todo.target_url.partition(delim)
    number = tail.split("#", 1)[0].strip("/")
    if not sep or not number.isdigit():
        raise UpstreamError(f"cannot determine target of todo {todo.id}: {todo.target_url}")
    return int(number)


def _state_and_title(api: GitlabClient, todo: TodoRecord) -> tuple[str, str]:
    iid = target_iid(todo)
    project = todo.project_id
    if project is None:
        raise UpstreamError(f"todo {todo.id} has no project")
    if todo.target_type == "MergeRequest":
        merge_request = api.get_merge_request(project, iid)
        state = merge_request.state
        if state == "opened" and merge_request.draft:
            state = "draft"
        return state, merge_request.title
    issue = api.get_issue(project, iid)
    return issue.state, issue.title


def render_todo(todo: TodoRecord, state: str, title: str, *, user: str) -> Text:
    label, style = _STATE_LABELS.get(state, (state, "red"))
    name = "you" if user and user == todo.author_username else todo.author_name
    text = Text()
    text.append(label, style=style)
    text.append(f' {todo.id} "{title}" ')
    text.append(describe_action(todo.action_name, name))
    text.append(f"\n       {todo.target_url}")
    return text


def list_todos(args: object) -> None:
    """List pending todos, optionally with state and action details."""
    lab_config = runtime.load_config()
    api = runtime.api_for(lab_config)
    todos = api.list_todos(
        target_type=target_type_for(getattr(args, "type", None)),
        limit=parse_number(getattr(args, "number", "10")),
    )
    pretty = bool(getattr(args, "pretty", False))
    console = log.console()
    for todo in todos:
        if not pretty or todo.target_type in PLAIN_TARGET_TYPES:
            say(f"{todo.id} {todo.target_url}")
            continue
        state, title = _state_and_title(api, todo)
        console.print(render_todo(todo, state, title, user=lab_config.user))
