from __future__ import annotations

import string

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from labcli.models import Remote
from labcli.services.merge_requests import (
    ResolveTrackingRemoteRequest,
    ResolveTrackingRemoteService,
    match_remote,
)
from tests.labcli.helpers import FakeApi, FakeGitBackend, merge_request, project

NAME_CHARS = string.ascii_lowercase + string.digits + "-"


def test_explicit_remote_is_used_without_lookup() -> None:
    api = FakeApi(projects=[project()])
    git = FakeGitBackend()
    service = ResolveTrackingRemoteService(api=api, git=git)

    tracking = service(
        ResolveTrackingRemoteRequest(merge_request=merge_request(), remote="fork")
    )

    assert tracking.remote == "fork"
    assert tracking.tracking_ref == "fork/feature"
    assert tracking.added is False
    assert api.calls == []
    assert git.calls == []


def test_existing_remote_matching_source_project_is_selected() -> None:
    git = FakeGitBackend({"origin": "group/project", "alice": "alice/project"})
    service = ResolveTrackingRemoteService(api=FakeApi(projects=[project()]), git=git)

    tracking = service(ResolveTrackingRemoteRequest(merge_request=merge_request()))

    assert tracking.remote == "alice"
    assert tracking.tracking_ref == "alice/feature"
    assert git.mutations == []


def test_first_matching_remote_wins() -> None:
    git = FakeGitBackend(
        {"upstream": "alice/project", "origin": "group/project", "mirror": "alice/project"}
    )
    service = ResolveTrackingRemoteService(api=FakeApi(projects=[project()]), git=git)

    tracking = service(ResolveTrackingRemoteRequest(merge_request=merge_request()))

    assert tracking.remote == "upstream"


def test_unmappable_remotes_are_skipped() -> None:
    git = FakeGitBackend({"local": "", "fork": "alice/project"})
    service = ResolveTrackingRemoteService(api=FakeApi(projects=[project()]), git=git)

    tracking = service(ResolveTrackingRemoteRequest(merge_request=merge_request()))

    assert tracking.remote == "fork"


def test_missing_remote_is_added_for_author_over_ssh() -> None:
    git = FakeGitBackend({"origin": "group/project"})
    service = ResolveTrackingRemoteService(api=FakeApi(projects=[project()]), git=git)

    tracking = service(ResolveTrackingRemoteRequest(merge_request=merge_request()))

    assert tracking.remote == "alice"
    assert tracking.tracking_ref == "alice/feature"
    assert tracking.added is True
    assert git.mutations == [("add_remote", "alice", "git@gitlab.com:alice/project.git")]


def test_missing_remote_uses_https_url_when_requested() -> None:
    git = FakeGitBackend({"origin": "group/project"})
    service = ResolveTrackingRemoteService(api=FakeApi(projects=[project()]), git=git)

    service(ResolveTrackingRemoteRequest(merge_request=merge_request(), https=True))

    assert git.mutations == [("add_remote", "alice", "https://gitlab.com/alice/project.git")]


remote_sets = st.dictionaries(
    keys=st.text(alphabet=NAME_CHARS, min_size=1, max_size=8),
    values=st.sampled_from(["group/project", "alice/project", "bob/project", ""]),
    max_size=6,
)


@settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
@given(remote_sets)
def test_match_remote_is_deterministic_first_match(remotes: dict[str, str]) -> None:
    git = FakeGitBackend(remotes)
    listing = tuple(Remote(name=name, url="") for name in remotes)

    first = match_remote(listing, "alice/project", git.path_for_remote)
    second = match_remote(listing, "alice/project", git.path_for_remote)

    expected = next(
        (name for name, path in remotes.items() if path == "alice/project"), None
    )
    assert first == second == expected
