from __future__ import annotations

import pytest

from labcli import args as args_util
from labcli.models import MergeRequestRef
from labcli.services import ValidationFailedError


class FakeRemoteGit:
    def __init__(
        self,
        remotes: dict[str, str] | None = None,
        current: str | None = "feature",
    ) -> None:
        self.remotes = remotes or {
            "origin": "me/project",
            "upstream": "group/project",
        }
        self.current = current

    def is_remote(self, name: str) -> bool:
        return name in self.remotes

    def path_for_remote(self, name: str) -> str:
        return self.remotes[name]

    def current_branch(self) -> str | None:
        return self.current


@pytest.mark.parametrize(
    ("argv", "remote", "project", "mr_id", "branch"),
    [
        (["10"], "origin", "me/project", 10, None),
        (["!12"], "origin", "me/project", 12, None),
        (["upstream", "10"], "upstream", "group/project", 10, None),
        (["upstream", "topic"], "upstream", "group/project", None, "topic"),
        (["topic"], "origin", "me/project", None, "topic"),
        (["upstream"], "upstream", "group/project", None, "feature"),
    ],
)
def test_parse_remote_and_id(
    argv: list[str],
    remote: str,
    project: str,
    mr_id: int | None,
    branch: str | None,
) -> None:
    selector = args_util.parse_remote_and_id(
        argv, git=FakeRemoteGit(), default_remote="origin"
    )

    assert selector.target == args_util.RemoteTarget(remote=remote, project=project)
    assert selector.mr_id == mr_id
    assert selector.branch == branch


def test_numeric_selector_carries_a_merge_request_ref() -> None:
    by_id = args_util.parse_remote_and_id(
        ["upstream", "10"], git=FakeRemoteGit(), default_remote="origin"
    )
    by_branch = args_util.parse_remote_and_id(
        ["topic"], git=FakeRemoteGit(), default_remote="origin"
    )

    assert by_id.ref == MergeRequestRef(remote_name="upstream", mr_id=10)
    assert by_branch.ref is None


@pytest.mark.parametrize("value", ["\u00b2", "1\u00b2", "\u0663"])
def test_parse_id_treats_non_ascii_digits_as_branch_names(value: str) -> None:
    assert args_util.parse_id(value) is None


def test_parse_remote_and_id_requires_a_known_remote_with_two_args() -> None:
    with pytest.raises(ValidationFailedError, match="fork is not a valid remote"):
        args_util.parse_remote_and_id(
            ["fork", "10"], git=FakeRemoteGit(), default_remote="origin"
        )


@pytest.mark.parametrize("argv", [[], ["origin", "10", "extra"]])
def test_parse_remote_and_id_enforces_arity(argv: list[str]) -> None:
    with pytest.raises(ValidationFailedError, match="expected between 1 and 2"):
        args_util.parse_remote_and_id(argv, git=FakeRemoteGit(), default_remote="origin")


def test_parse_remote_and_id_rejects_zero() -> None:
    with pytest.raises(ValidationFailedError, match="invalid merge request id"):
        args_util.parse_remote_and_id(["0"], git=FakeRemoteGit(), default_remote="origin")


def test_parse_remote_and_mr_defaults_to_current_branch() -> None:
    selector = args_util.parse_remote_and_mr(
        [], git=FakeRemoteGit(), default_remote="upstream"
    )

    assert selector.target.remote == "upstream"
    assert selector.mr_id is None
    assert selector.branch == "feature"


def test_parse_remote_and_mr_fails_on_detached_head() -> None:
    with pytest.raises(ValidationFailedError, match="current branch"):
        args_util.parse_remote_and_mr(
            [], git=FakeRemoteGit(current=None), default_remote="origin"
        )


@pytest.mark.parametrize(
    ("argv", "remote", "branch"),
    [
        ([], "origin", "feature"),
        (["main"], "origin", "main"),
        (["upstream"], "upstream", "feature"),
        (["upstream", "main"], "upstream", "main"),
    ],
)
def test_parse_remote_and_branch(argv: list[str], remote: str, branch: str) -> None:
    selector = args_util.parse_remote_and_branch(
        argv, git=FakeRemoteGit(), default_remote="origin"
    )

    assert selector.target.remote == remote
    assert selector.branch == branch


def test_parse_ci_variables_rejects_missing_separator() -> None:
    with pytest.raises(ValidationFailedError) as exc_info:
        args_util.parse_ci_variables(["ok=1", "broken"])

    assert str(exc_info.value) == (
        'Invalid Variable: "broken", Variables must be in the format key=value'
    )


def test_parse_ci_variables_allows_empty_values() -> None:
    assert args_util.parse_ci_variables(["EMPTY=", "A=b=c"]) == {"EMPTY": "", "A": "b=c"}


def test_parse_ci_variables_splits_comma_separated_pairs() -> None:
    assert args_util.parse_ci_variables(["a=1,b=2", '"c=x,y"', "d=4"]) == {
        "a": "1",
        "b": "2",
        "c": "x,y",
        "d": "4",
    }


def test_parse_ci_variables_checks_each_comma_separated_pair() -> None:
    with pytest.raises(ValidationFailedError, match='Invalid Variable: "b"'):
        args_util.parse_ci_variables(["a=1,b"])
