from __future__ import annotations

import pytest
from pydantic import ValidationError

from labcli.services import NotFoundError, UpstreamError
from labcli.services.merge_requests import (
    ResolveMergeRequestRequest,
    ResolveMergeRequestService,
)

from tests.labcli.helpers import FakeApi, merge_request


def test_resolves_by_iid_with_single_result_query() -> None:
    api = FakeApi(merge_requests=[merge_request(9), merge_request(10)])
    service = ResolveMergeRequestService(api=api)

    record = service(ResolveMergeRequestRequest(project="group/project", mr_id=10))

    assert record.iid == 10
    assert api.calls == [
        ("list_merge_requests", "group/project", {"limit": 1, "iids": [10]})
    ]


def test_missing_iid_is_not_found() -> None:
    service = ResolveMergeRequestService(api=FakeApi())

    with pytest.raises(NotFoundError) as exc_info:
        service(ResolveMergeRequestRequest(project="group/project", mr_id=10))

    assert str(exc_info.value) == "MR !10 not found"
    assert exc_info.value.code == "not_found"


def test_resolves_open_merge_request_by_source_branch() -> None:
    api = FakeApi(
        merge_requests=[
            merge_request(3, source_branch="other"),
            merge_request(4, source_branch="topic"),
        ]
    )
    service = ResolveMergeRequestService(api=api)

    record = service(
        ResolveMergeRequestRequest(project="group/project", source_branch="topic")
    )

    assert record.iid == 4
    _, _, filters = api.calls[0]
    assert filters["state"] == "opened"


def test_missing_branch_merge_request_is_not_found() -> None:
    service = ResolveMergeRequestService(api=FakeApi())

    with pytest.raises(NotFoundError, match="no open merge request for branch topic"):
        service(ResolveMergeRequestRequest(project="group/project", source_branch="topic"))


def test_upstream_errors_propagate() -> None:
    service = ResolveMergeRequestService(api=FakeApi(error=UpstreamError("boom")))

    with pytest.raises(UpstreamError, match="boom"):
        service(ResolveMergeRequestRequest(project="group/project", mr_id=1))


@pytest.mark.parametrize(
    "kwargs",
    [{}, {"mr_id": 1, "source_branch": "topic"}, {"mr_id": 0}],
)
def test_request_requires_exactly_one_valid_selector(kwargs: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
        ResolveMergeRequestRequest(project="group/project", **kwargs)
