"""Command implementations exposed by the lab CLI."""

from .ci import create_pipeline, trigger_pipeline
from .mr import checkout_merge_request
from .todo import list_todos

__all__ = [
    "checkout_merge_request",
    "create_pipeline",
    "list_todos",
    "trigger_pipeline",
]
