from .checkout import (
    CheckoutMergeRequestRequest,
    CheckoutMergeRequestService,
    CheckoutOutcome,
    merge_request_refspec,
)
from .ports import GitBackend, MergeRequestApi
from .resolve import ResolveMergeRequestRequest, ResolveMergeRequestService
from .tracking import (
    ResolveTrackingRemoteRequest,
    ResolveTrackingRemoteService,
    TrackingRemote,
    match_remote,
    tracking_ref_for,
)

__all__ = [
    "CheckoutMergeRequestRequest",
    "CheckoutMergeRequestService",
    "CheckoutOutcome",
    "GitBackend",
    "MergeRequestApi",
    "ResolveMergeRequestRequest",
    "ResolveMergeRequestService",
    "ResolveTrackingRemoteRequest",
    "ResolveTrackingRemoteService",
    "TrackingRemote",
    "match_remote",
    "merge_request_refspec",
    "tracking_ref_for",
]
