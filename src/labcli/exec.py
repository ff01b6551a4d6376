"""Run external commands (git) behind a small typed boundary.

Commands are described by a ``CommandRequest``; runners turn requests into
``CommandResult`` values, or ``None`` when the executable is missing.
``run_typed`` adds the success check and output parsing so callers only ever
see a parsed value or a ``CommandExecutionError``/``CommandParseError``.
"""

import subprocess
from dataclasses import dataclass
from typing import Callable, Generic, Protocol, TypeVar

ParsedT = TypeVar("ParsedT")


@dataclass(frozen=True)
class CommandRequest:
    """A command line; git commands carry their repository via ``-C``."""

    argv: tuple[str, ...]

    @property
    def display(self) -> str:
        return " ".join(self.argv)


@dataclass(frozen=True)
class CommandResult:
    argv: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Stripped stderr, or stdout when stderr is empty."""
        return (self.stderr or self.stdout or "").strip()


class CommandRunner(Protocol):
    def run(self, request: CommandRequest) -> CommandResult | None: ...


def _text(value: object) -> str:
    return value if isinstance(value, str) else ""


class SubprocessCommandRunner:
    """Run requests with ``subprocess.run``, always capturing text output."""

    def run(self, request: CommandRequest) -> CommandResult | None:
        try:
            completed = subprocess.run(
                list(request.argv), capture_output=True, text=True, check=False
            )
        except FileNotFoundError:
            return None
        return CommandResult(
            argv=request.argv,
            returncode=completed.returncode,
            stdout=_text(completed.stdout),
            stderr=_text(completed.stderr),
        )


_default_runner: CommandRunner = SubprocessCommandRunner()


@dataclass(frozen=True)
class CommandSpec(Generic[ParsedT]):
    """A request paired with the parser for its successful output."""

    request: CommandRequest
    parser: Callable[[CommandResult], ParsedT]
    context: str | None = None


@dataclass(frozen=True)
class CommandExecutionError(RuntimeError):
    """The command is missing (``result`` is ``None``) or exited non-zero."""

    request: CommandRequest
    detail: str
    result: CommandResult | None = None

    def __str__(self) -> str:
        return self.detail


@dataclass(frozen=True)
class CommandParseError(RuntimeError):
    request: CommandRequest
    detail: str
    context: str | None = None

    def __str__(self) -> str:
        return self.detail


def run_with_runner(
    request: CommandRequest, *, runner: CommandRunner | None = None
) -> CommandResult | None:
    """Run ``request`` without interpreting the exit status."""
    return (runner or _default_runner).run(request)


def run_typed(
    spec: CommandSpec[ParsedT], *, runner: CommandRunner | None = None
) -> ParsedT:
    """Run ``spec.request`` and parse its output.

    Raises:
        CommandExecutionError: The executable is missing or exited non-zero.
        CommandParseError: The parser rejected the output.
    """
    request = spec.request
    result = run_with_runner(request, runner=runner)
    if result is None:
        name = request.argv[0] if request.argv else "<empty>"
        raise CommandExecutionError(request=request, detail=f"missing required command: {name}")
    if not result.ok:
        detail = f"command failed: {request.display}"
        if result.output:
            detail = f"{detail}\n{result.output}"
        raise CommandExecutionError(request=request, detail=detail, result=result)
    try:
        return spec.parser(result)
    except CommandParseError:
        raise
    except (ValueError, TypeError, IndexError, KeyError) as exc:
        where = f" ({spec.context})" if spec.context else ""
        raise CommandParseError(
            request=request,
            detail=f"cannot parse output of {request.display}{where}: {exc}",
            context=spec.context,
        ) from exc


def parse_stdout_text(result: CommandResult) -> str:
    return result.stdout.strip()


def parse_stdout_lines(result: CommandResult) -> list[str]:
    """Return the non-blank stdout lines, stripped."""
    return [line.strip() for line in result.stdout.splitlines() if line.strip()]


def parse_nothing(result: CommandResult) -> None:
    del result
