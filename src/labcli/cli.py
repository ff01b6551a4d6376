"""Typer entrypoint for the ``lab`` command."""

from types import SimpleNamespace
from typing import Annotated, Callable, Optional

import typer

from . import __version__
from . import log as lab_log
from .commands import ci as ci_cmd
from .commands import mr as mr_cmd
from .commands import todo as todo_cmd
from .io import die
from .services.errors import ServiceFailure

app = typer.Typer(
    name="lab",
    help="Work with GitLab merge requests, pipelines and todos from a git repository.",
    no_args_is_help=True,
    add_completion=False,
)
mr_app = typer.Typer(help="Work with merge requests.", no_args_is_help=True)
ci_app = typer.Typer(help="Work with CI pipelines.", no_args_is_help=True)
todo_app = typer.Typer(help="Work with todos.", no_args_is_help=True)
app.add_typer(mr_app, name="mr")
app.add_typer(ci_app, name="ci")
app.add_typer(todo_app, name="todo")


def _run(command: Callable[[object], None], args: SimpleNamespace) -> None:
    try:
        command(args)
    except ServiceFailure as exc:
        lab_log.debug(f"{exc.code}: {exc}")
        die(str(exc), hint=exc.recovery_hint)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


def _log_level_callback(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized not in lab_log.LEVEL_NAMES:
        raise typer.BadParameter(f"expected one of: {', '.join(lab_log.LEVEL_NAMES)}")
    return normalized


@app.callback()
def main(
    log_level: Annotated[
        Optional[str],
        typer.Option(
            "--log-level",
            help="Log level (trace|debug|info|success|warning|error).",
            callback=_log_level_callback,
        ),
    ] = None,
    no_color: Annotated[
        bool, typer.Option("--no-color", help="Disable colorized output.")
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show the version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Configure logging for every subcommand."""
    del version
    if log_level is not None:
        lab_log.set_level(log_level)
    if no_color:
        lab_log.set_no_color(True)


@mr_app.command(
    "checkout",
    epilog=(
        "Examples: lab mr checkout origin 10; lab mr checkout upstream 10 -b name; "
        "lab mr checkout 10 -t -r a_remote; lab mr checkout origin 10 -f --https"
    ),
)
def mr_checkout(
    args: Annotated[
        list[str],
        typer.Argument(help="[remote] <MR id or branch>", metavar="[REMOTE] MR"),
    ],
    branch: Annotated[
        Optional[str],
        typer.Option("--branch", "-b", help="Check out the merge request as <branch>."),
    ] = None,
    remote: Annotated[
        Optional[str],
        typer.Option("--remote", "-r", help="If tracking, force <remote> name."),
    ] = None,
    track: Annotated[
        bool,
        typer.Option(
            "--track", "-t", help="Track the remote branch, adding a remote if needed."
        ),
    ] = False,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Replace an existing local branch."),
    ] = False,
    https: Annotated[
        bool,
        typer.Option("--https", "--http", help="Add remotes over HTTPS instead of SSH."),
    ] = False,
) -> None:
    """Check out an open merge request."""
    _run(
        mr_cmd.checkout_merge_request,
        SimpleNamespace(
            args=args,
            branch=branch,
            remote=remote,
            track=track,
            force=force,
            https=https,
        ),
    )


def _ci_create(
    args: Annotated[
        Optional[list[str]],
        typer.Argument(help="[remote] [branch, or MR id with --merge-request]"),
    ] = None,
    merge_request: Annotated[
        bool,
        typer.Option("--merge-request", help="Use a merge request pipeline if enabled."),
    ] = False,
    project: Annotated[
        Optional[str],
        typer.Option("--project", "-p", hidden=True, help="Deprecated project override."),
    ] = None,
) -> None:
    """Create a CI pipeline for the given or current branch."""
    _run(
        ci_cmd.create_pipeline,
        SimpleNamespace(args=args or [], merge_request=merge_request, project=project),
    )


ci_app.command("create")(_ci_create)
ci_app.command("run", hidden=True)(_ci_create)


@ci_app.command("trigger")
def ci_trigger(
    args: Annotated[
        Optional[list[str]], typer.Argument(help="[remote] [branch]")
    ] = None,
    token: Annotated[
        str,
        typer.Option(
            "--token",
            "-t",
            envvar="CI_JOB_TOKEN",
            help="Pipeline trigger token, optional inside GitLab CI.",
        ),
    ] = "",
    variable: Annotated[
        Optional[list[str]],
        typer.Option(
            "--variable",
            "-v",
            help="Pipeline variable key=value; comma-separate several pairs.",
        ),
    ] = None,
    project: Annotated[
        Optional[str],
        typer.Option("--project", "-p", hidden=True, help="Deprecated project override."),
    ] = None,
) -> None:
    """Trigger a CI pipeline for the given or current branch."""
    _run(
        ci_cmd.trigger_pipeline,
        SimpleNamespace(
            args=args or [], token=token, variable=variable or [], project=project
        ),
    )


def _todo_list(
    pretty: Annotated[
        bool, typer.Option("--pretty", "-p", help="Show state and action details.")
    ] = False,
    todo_type: Annotated[
        str,
        typer.Option("--type", "-t", help="Filter todos by type (all|mr|issue)."),
    ] = "all",
    number: Annotated[
        str, typer.Option("--number", "-n", help="Number of todos to return.")
    ] = "10",
) -> None:
    """List todos."""
    _run(
        todo_cmd.list_todos,
        SimpleNamespace(pretty=pretty, type=todo_type, number=number),
    )


todo_app.command("list")(_todo_list)
todo_app.command("ls", hidden=True)(_todo_list)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
