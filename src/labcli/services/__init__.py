from .base import BaseService
from .errors import (
    ConflictError,
    DependencyMissingError,
    NotFoundError,
    ServiceFailure,
    UpstreamError,
    ValidationFailedError,
)

__all__ = [
    "BaseService",
    "ConflictError",
    "DependencyMissingError",
    "NotFoundError",
    "ServiceFailure",
    "UpstreamError",
    "ValidationFailedError",
]
